# logger.py
"""
로깅 설정 및 logger 객체 반환 함수

    - 터미널 출력만 사용 (파일/DB 저장 없음)
    - LOG_LEVEL: 기본 로그 레벨 (기본 INFO)
    - LOG_JSON_FORMAT=true: 한 줄 JSON 출력 (log_with_context 의 필드가 최상위 키로 펼쳐짐)
"""
import json
import logging
import os
from datetime import datetime
from typing import Optional

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
RESET_COLOR = '\033[0m'
TEXT_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'

# 쿼리 로그는 DATABASE_ECHO 로만 켬
QUIET_LOGGERS = ('sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.dialects', 'sqlalchemy.orm', 'httpx')


class ColoredFormatter(logging.Formatter):
    """레벨명에 색을 입히는 텍스트 포맷터"""

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelname)
        if color:
            # 복사본에만 색상 적용 (다른 핸들러 출력 보호)
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{RESET_COLOR}"
        text = super().format(record)
        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            text += " " + " ".join(f"{key}={value}" for key, value in extra_fields.items())
        return text


class JSONFormatter(logging.Formatter):
    """JSON 형식 로그 포맷터"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        log_entry.update(getattr(record, 'extra_fields', None) or {})
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


def get_logger(
    name: str = "app",
    level: Optional[str] = None,
    enable_json_format: Optional[bool] = None,
) -> logging.Logger:
    """
    logger 객체 생성 및 포맷 지정
    - 같은 이름으로 다시 호출하면 기존 logger 를 그대로 반환

    Args:
        name: 로거 이름
        level: 로그 레벨, 생략 시 LOG_LEVEL 환경변수
        enable_json_format: JSON 출력 여부, 생략 시 LOG_JSON_FORMAT 환경변수
    """
    # config 모듈도 이 함수를 쓰므로 Settings 대신 환경변수를 직접 읽음
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if enable_json_format is None:
        enable_json_format = _env_flag("LOG_JSON_FORMAT")

    for quiet_name in QUIET_LOGGERS:
        logging.getLogger(quiet_name).setLevel(logging.WARNING)

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if enable_json_format else ColoredFormatter(TEXT_FORMAT))
    logger.addHandler(handler)
    return logger


def log_with_context(logger: logging.Logger, level: str, message: str, **kwargs):
    """
    컨텍스트 필드와 함께 로깅 (값이 None 인 필드는 생략)

    예: log_with_context(logger, "INFO", "DB 레시피 매칭 성공", recipe_id=3, device_id="d1")
    """
    fields = {key: value for key, value in kwargs.items() if value is not None}
    log_method = getattr(logger, level.lower(), logger.info)
    log_method(message, extra={'extra_fields': fields})
