"""
재료 집합 기반 레시피 매칭 (정확 일치 정책)
- 레시피의 핵심 재료 집합이 요청 재료 집합과 정확히 같을 때만 후보
- 후보 중 평균 평점 desc → 평점 수 desc → recipe_id asc 첫 번째
"""

from __future__ import annotations

from typing import AbstractSet, Optional

from sqlalchemy import case, desc, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from common.logger import get_logger
from services.recipe.models.core_model import Ingredient, Recipe, RecipeIngredient
from services.recipe.utils.ports import RecipeMatcherPort

logger = get_logger("recipe_match_crud")


class ExactSetRecipeMatcher(RecipeMatcherPort):
    """GROUP BY / HAVING 한 번으로 정확 일치 레시피를 고르는 매처"""

    async def find_best_match(
        self,
        db: AsyncSession,
        core_ingredients: AbstractSet[str],
        exclude_ids: AbstractSet[int],
    ) -> Optional[int]:
        keys = sorted({key for key in core_ingredients if key})
        if not keys:
            logger.debug("매칭할 핵심 재료가 없음")
            return None

        total_count = func.count(distinct(Ingredient.ingredient_id))
        matched_count = func.count(
            distinct(case((Ingredient.name.in_(keys), Ingredient.ingredient_id)))
        )

        stmt = (
            select(Recipe.recipe_id)
            .join(RecipeIngredient, RecipeIngredient.recipe_id == Recipe.recipe_id)
            .join(Ingredient, Ingredient.ingredient_id == RecipeIngredient.ingredient_id)
            .group_by(Recipe.recipe_id, Recipe.average_rating, Recipe.rating_count)
            .having(total_count == len(keys))
            .having(matched_count == len(keys))
            .order_by(desc(Recipe.average_rating), desc(Recipe.rating_count), Recipe.recipe_id)
            .limit(1)
        )
        if exclude_ids:
            stmt = stmt.where(Recipe.recipe_id.not_in(sorted(exclude_ids)))

        recipe_id = (await db.execute(stmt)).scalar_one_or_none()
        logger.debug(
            f"정확 일치 매칭 결과: keys={keys}, excluded={len(exclude_ids)}, recipe_id={recipe_id}"
        )
        return recipe_id


def get_recipe_matcher() -> RecipeMatcherPort:
    """FastAPI DI 용 매처 (테스트에서 dependency_overrides 로 교체 가능)"""
    return ExactSetRecipeMatcher()
