"""Recipe detail CRUD functions."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import case, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from common.logger import get_logger
from services.recipe.models.core_model import Recipe, RecipeIngredient, RecipeSource
from services.recipe.models.rating_model import RecipeView
from services.recipe.schemas.recipe_core_schema import CommunityRecipe, NutritionOut, RecipeOut

logger = get_logger("recipe_detail_crud")


def recipe_to_out(recipe: Recipe) -> RecipeOut:
    """ORM Recipe(연관 로딩 완료 상태) → 응답 형태"""
    nutrition = (
        NutritionOut.model_validate(recipe.nutrition) if recipe.nutrition is not None else NutritionOut()
    )
    return RecipeOut(
        id=recipe.recipe_id,
        title=recipe.title,
        description=recipe.description,
        cuisine=recipe.cuisine,
        servings=recipe.servings,
        prep_time=recipe.prep_time,
        cook_time=recipe.cook_time,
        difficulty=recipe.difficulty,
        source=recipe.source,
        rating=round(recipe.average_rating or 0.0, 2),
        rating_count=recipe.rating_count or 0,
        ingredients=[line.full_text for line in recipe.ingredient_lines],
        instructions=[step.instruction for step in sorted(recipe.instructions, key=lambda s: s.step_number)],
        nutrition=nutrition,
    )


async def get_recipe_detail(db: AsyncSession, recipe_id: int) -> Optional[RecipeOut]:
    """
    레시피 상세(재료 라인, 조리 단계, 영양 포함) 반환
    - 없으면 None
    """
    stmt = (
        select(Recipe)
        .where(Recipe.recipe_id == recipe_id)
        .options(
            selectinload(Recipe.ingredient_lines).joinedload(RecipeIngredient.ingredient),
            selectinload(Recipe.instructions),
            selectinload(Recipe.nutrition),
        )
    )
    recipe = (await db.execute(stmt)).scalars().first()
    if recipe is None:
        logger.warning(f"레시피를 찾을 수 없음: recipe_id={recipe_id}")
        return None

    logger.debug(
        f"레시피 상세 조회 완료: recipe_id={recipe_id}, "
        f"ingredients={len(recipe.ingredient_lines)}, steps={len(recipe.instructions)}"
    )
    return recipe_to_out(recipe)


async def get_top_community_recipes(db: AsyncSession, limit: int = 10) -> List[CommunityRecipe]:
    """
    사용자 등록(user_generated) 레시피 중 평점이 있는 것을 평균 평점 → 평점 수 순으로 반환
    - five_star_count: 5점 평가 수
    """
    five_star_count = func.count(case((RecipeView.rating == 5, RecipeView.view_id)))
    stmt = (
        select(Recipe, five_star_count.label("five_star_count"))
        .outerjoin(RecipeView, RecipeView.recipe_id == Recipe.recipe_id)
        .where(Recipe.source == RecipeSource.user_generated.value)
        .where(Recipe.rating_count > 0)
        .group_by(Recipe.recipe_id)
        .order_by(desc(Recipe.average_rating), desc(Recipe.rating_count), Recipe.recipe_id)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).all()

    recipes = [
        CommunityRecipe(
            id=recipe.recipe_id,
            title=recipe.title,
            cuisine=recipe.cuisine,
            servings=recipe.servings,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            average_rating=round(recipe.average_rating, 2),
            rating_count=recipe.rating_count,
            five_star_count=five_stars,
        )
        for recipe, five_stars in rows
    ]
    logger.debug(f"커뮤니티 인기 레시피 조회 완료: limit={limit}, count={len(recipes)}")
    return recipes
