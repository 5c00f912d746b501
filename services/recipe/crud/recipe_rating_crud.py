"""
Recipe view / rating CRUD functions.
- RECIPE_VIEW 는 (레시피, 기기)당 1행
- RECIPE.AVERAGE_RATING / RATING_COUNT 는 항상 RECIPE_VIEW 의 평점에서 다시 계산 (증분 갱신 없음)
"""

from __future__ import annotations

from typing import Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.upsert import insert_or_ignore, insert_or_update
from common.dependencies import ClaimedDevice
from common.logger import get_logger
from services.recipe.models.core_model import Recipe
from services.recipe.models.rating_model import RecipeView

logger = get_logger("recipe_rating_crud")


async def record_view(db: AsyncSession, recipe_id: int, device: ClaimedDevice) -> bool:
    """
    조회 기록 (이미 있으면 무시, 기존 평점 유지)
    - 반환: 새로 기록되었으면 True
    """
    inserted = await insert_or_ignore(
        db,
        RecipeView,
        {"recipe_id": recipe_id, "device_id": device.device_id},
        conflict_attrs=("recipe_id", "device_id"),
    )
    logger.debug(f"조회 기록: recipe_id={recipe_id}, device_id={device}, inserted={inserted}")
    return inserted


async def recompute_recipe_rating(db: AsyncSession, recipe_id: int) -> Tuple[float, int]:
    """
    평점이 있는 RECIPE_VIEW 행으로 평균/개수를 다시 계산해 RECIPE 에 반영
    - 평점이 하나도 없으면 (0.0, 0)
    """
    stmt = select(func.avg(RecipeView.rating), func.count(RecipeView.rating)).where(
        RecipeView.recipe_id == recipe_id,
        RecipeView.rating.is_not(None),
    )
    avg_rating, count = (await db.execute(stmt)).one()
    average = float(avg_rating) if avg_rating is not None else 0.0
    count = int(count or 0)

    await db.execute(
        update(Recipe)
        .where(Recipe.recipe_id == recipe_id)
        .values(average_rating=average, rating_count=count)
    )
    return average, count


async def record_rating(
    db: AsyncSession,
    recipe_id: int,
    device: ClaimedDevice,
    rating: int,
) -> Optional[Tuple[float, int]]:
    """
    기기의 평점 등록/변경 후 집계 갱신
    - 레시피가 없으면 None
    - 같은 기기가 다시 평가하면 행을 추가하지 않고 평점만 교체
    - 제출자가 없는 레시피에 첫 평점으로 5점을 준 기기는 제출자로 기록
    """
    # 같은 레시피의 동시 평가를 직렬화 (SQLite 는 무시)
    recipe = (
        await db.execute(
            select(Recipe.recipe_id, Recipe.submitted_by)
            .where(Recipe.recipe_id == recipe_id)
            .with_for_update()
        )
    ).first()
    if recipe is None:
        logger.warning(f"평점 대상 레시피 없음: recipe_id={recipe_id}")
        return None

    prior_count = (
        await db.execute(
            select(func.count(RecipeView.rating)).where(
                RecipeView.recipe_id == recipe_id,
                RecipeView.rating.is_not(None),
            )
        )
    ).scalar_one()

    await insert_or_update(
        db,
        RecipeView,
        {"recipe_id": recipe_id, "device_id": device.device_id, "rating": rating},
        conflict_attrs=("recipe_id", "device_id"),
        update_attrs=("rating",),
    )

    if rating == 5 and prior_count == 0 and recipe.submitted_by is None:
        await db.execute(
            update(Recipe)
            .where(Recipe.recipe_id == recipe_id)
            .values(submitted_by=device.device_id)
        )
        logger.info(f"첫 5점 평가 기기를 제출자로 기록: recipe_id={recipe_id}, device_id={device}")

    average, count = await recompute_recipe_rating(db, recipe_id)
    logger.debug(
        f"평점 기록 완료: recipe_id={recipe_id}, device_id={device}, rating={rating}, "
        f"average={average:.2f}, count={count}"
    )
    return average, count
