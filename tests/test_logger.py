"""공통 logger 포맷 테스트"""
import json
import logging

from common.logger import ColoredFormatter, JSONFormatter, TEXT_FORMAT, get_logger, log_with_context


def make_record(**extra_fields):
    record = logging.LogRecord("recipe_router", logging.INFO, __file__, 10, "매칭 성공", None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


def test_json_formatter_flattens_context_fields():
    line = JSONFormatter().format(make_record(recipe_id=3, device_id="d1"))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "recipe_router"
    assert payload["message"] == "매칭 성공"
    assert payload["recipe_id"] == 3
    assert payload["device_id"] == "d1"


def test_colored_formatter_does_not_mutate_record():
    record = make_record(recipe_id=3)
    text = ColoredFormatter(TEXT_FORMAT).format(record)

    assert record.levelname == "INFO"
    assert "recipe_id=3" in text


def test_get_logger_reuses_handlers_and_skips_none_fields(caplog):
    logger = get_logger("test_logger_reuse", level="DEBUG")
    assert get_logger("test_logger_reuse") is logger
    assert len(logger.handlers) == 1

    with caplog.at_level(logging.INFO, logger="test_logger_reuse"):
        log_with_context(logger, "INFO", "컨텍스트 로그", recipe_id=1, device_id=None)

    record = caplog.records[-1]
    assert record.extra_fields == {"recipe_id": 1}
