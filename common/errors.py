# errors.py
"""
공통 에러 타입 정의 및 FastAPI 예외 핸들러
"""
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.logger import get_logger

logger = get_logger("errors")

class BadRequestException(HTTPException):
    """400 에러 - 잘못된 요청"""
    def __init__(self, detail: str = "잘못된 요청입니다."):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NotFoundException(HTTPException):
    """404 에러 - 항목 없음"""
    def __init__(self, name: str = "데이터"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name}을(를) 찾을 수 없습니다.")

class GenerationFailedException(HTTPException):
    """502 에러 - 외부 레시피 생성 실패 (재시도 안내)"""
    def __init__(self, detail: str = "레시피 생성에 실패했습니다. 잠시 후 다시 시도해 주세요."):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class RecipeGenerationError(Exception):
    """텍스트 생성 서비스 호출 실패 (타임아웃, 전송 오류, 2xx 이외 응답)"""


def _format_validation_errors(exc: RequestValidationError) -> str:
    """pydantic 검증 오류 목록을 사람이 읽을 수 있는 한 줄 메시지로 변환"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "잘못된 요청입니다."


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패 → 400 JSON 응답"""
    detail = _format_validation_errors(exc)
    logger.warning(f"요청 검증 실패: path={request.url.path}, detail={detail}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 → 500 JSON 응답 (내부 정보 노출 금지)"""
    logger.error(f"처리되지 않은 예외: path={request.url.path}, error={exc!r}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "서버 내부 오류가 발생했습니다."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱 공통 예외 핸들러 등록"""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
