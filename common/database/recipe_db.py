"""
레시피 DB 엔진/세션 관리 (recipe_db)
- 모듈 import 시점이 아니라 앱 lifespan 에서 명시적으로 생성/해제
- FastAPI dependency(get_recipe_db)는 app.state 에 보관된 인스턴스에서 세션을 꺼냄
"""
from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from common.database.base_postgres import PostgresBase
from common.logger import get_logger

logger = get_logger("recipe_db")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite 는 커넥션마다 FK(ON DELETE CASCADE) 를 켜야 함"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class RecipeDatabase:
    """
    레시피 DB 비동기 엔진과 세션 팩토리 묶음
    """

    def __init__(self, url: str, echo: bool = False, pool_size: int = 10, **engine_kwargs: Any):
        options: dict = {"echo": echo, "pool_pre_ping": True}
        if not url.startswith("sqlite"):
            options.update(pool_size=pool_size, max_overflow=pool_size * 2, pool_recycle=1800)
        options.update(engine_kwargs)

        self.url = url
        self.engine = create_async_engine(url, **options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(f"레시피 DB 엔진 생성됨: dialect={self.engine.dialect.name}, echo={echo}")

    async def create_all(self) -> None:
        """ORM 메타데이터 기준으로 테이블 생성 (이미 있으면 건너뜀)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(PostgresBase.metadata.create_all)
        logger.info(f"테이블 생성 확인 완료: {sorted(PostgresBase.metadata.tables)}")

    async def dispose(self) -> None:
        """커넥션 풀 해제"""
        await self.engine.dispose()
        logger.info("레시피 DB 엔진 해제됨")

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """세션 하나를 열어 반환하고 종료 시 close"""
        logger.debug("레시피 데이터베이스 세션 생성 중")
        async with self.SessionLocal() as session:
            yield session
        logger.debug("레시피 데이터베이스 세션 종료됨")


async def get_recipe_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI DI 용 레시피 DB 세션 반환"""
    database: RecipeDatabase = request.app.state.recipe_db
    async for session in database.session():
        yield session
