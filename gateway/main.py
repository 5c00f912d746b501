"""
gateway/main.py
---------------
API Gateway 서비스 진입점.
각 서비스의 FastAPI router를 통합해서 전체 API 엔드포인트로 제공한다.
- CORS, 공통 예외처리, DB 엔진/AI 생성기 수명주기도 이곳에서 관리
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.config import Settings, get_settings
from common.database.recipe_db import RecipeDatabase
from common.errors import register_exception_handlers
from common.logger import get_logger
# create_all 이전에 모든 ORM 모델을 메타데이터에 등록
from services.device.models import premium_model  # noqa: F401
from services.recipe.models import core_model, rating_model  # noqa: F401
from services.device.routers.device_router import router as device_router
from services.recipe.routers.api_router import router as recipe_router
from services.recipe.utils.recipe_generator import RecipeGenerator, create_recipe_generator

logger = get_logger("gateway")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    owns_database = getattr(app.state, "recipe_db", None) is None
    if owns_database:
        app.state.recipe_db = RecipeDatabase(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
        )
    if settings.create_tables_on_startup:
        await app.state.recipe_db.create_all()

    logger.info(f"API Gateway 시작 완료: AI 생성={'활성' if app.state.recipe_generator else '비활성'}")
    try:
        yield
    finally:
        if owns_database:
            await app.state.recipe_db.dispose()
        logger.info("API Gateway 종료")


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[RecipeDatabase] = None,
    recipe_generator: Optional[RecipeGenerator] = None,
) -> FastAPI:
    """
    FastAPI 앱 생성
    - database 를 넘기지 않으면 lifespan 에서 설정값으로 생성/해제
    - recipe_generator 를 넘기지 않으면 설정값(GEMINI_API_KEY)으로 구성, 키가 없으면 AI 생성 비활성화
    """
    settings = settings or get_settings()
    logger.info(f"FastAPI 애플리케이션 생성: 제목={settings.app_name}, 디버그={settings.debug}")

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.recipe_db = database
    app.state.recipe_generator = recipe_generator or create_recipe_generator(settings)

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "endpoints": [
                "POST /api/recipes/match",
                "POST /api/recipes/save-favorite",
                "POST /api/recipes/{id}/rate",
                "GET /api/recipes/top-community",
                "GET /api/recipes/{id}",
                "GET /api/devices/{deviceId}/views",
            ],
        }

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    logger.debug("서비스 라우터 등록 중...")
    app.include_router(recipe_router)
    app.include_router(device_router)
    logger.info("모든 서비스 라우터 등록 완료")
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("gateway.main:app", host="0.0.0.0", port=8000, reload=True)
