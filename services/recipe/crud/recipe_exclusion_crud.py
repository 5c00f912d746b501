"""기기별 추천 제외 레시피 조회."""

from __future__ import annotations

from typing import Optional, Set

from sqlalchemy import select, union
from sqlalchemy.ext.asyncio import AsyncSession

from common.dependencies import ClaimedDevice
from common.logger import get_logger
from services.recipe.models.core_model import Recipe
from services.recipe.models.rating_model import RecipeView

logger = get_logger("recipe_exclusion_crud")


async def get_excluded_recipe_ids(db: AsyncSession, device: Optional[ClaimedDevice]) -> Set[int]:
    """
    해당 기기가 이미 본 레시피 + 직접 등록한 레시피 ID 집합
    - 기기 정보가 없으면 빈 집합
    """
    if device is None:
        return set()

    viewed = select(RecipeView.recipe_id).where(RecipeView.device_id == device.device_id)
    submitted = select(Recipe.recipe_id).where(Recipe.submitted_by == device.device_id)
    rows = (await db.execute(union(viewed, submitted))).all()

    excluded = {int(row[0]) for row in rows}
    logger.debug(f"제외 레시피 조회 완료: device_id={device}, count={len(excluded)}")
    return excluded
