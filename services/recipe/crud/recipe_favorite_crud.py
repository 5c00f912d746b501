"""
완성 레시피 저장 CRUD (save-favorite, 시드 데이터 공용)
- 같은 제목(대소문자 구분)이 있으면 새로 만들지 않고 평점만 기록
- 커밋은 호출 측(라우터/스크립트)에서 수행
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.upsert import insert_or_ignore
from common.dependencies import ClaimedDevice
from common.logger import get_logger
from services.recipe.crud.recipe_rating_crud import record_rating
from services.recipe.models.core_model import (
    Ingredient,
    Recipe,
    RecipeIngredient,
    RecipeInstruction,
    RecipeNutrition,
    RecipeSource,
)
from services.recipe.schemas.recipe_favorite_schema import FavoriteRecipeIn
from services.recipe.utils.ingredient_normalizer import (
    core_ingredient_key,
    normalize_whitespace,
    parse_ingredient,
)
from services.recipe.utils.recipe_values import (
    normalize_difficulty,
    parse_nutrition,
    parse_servings,
    parse_time_minutes,
)

logger = get_logger("recipe_favorite_crud")

DEFAULT_CUISINE = "american"


async def get_recipe_id_by_title(db: AsyncSession, title: str) -> Optional[int]:
    stmt = select(Recipe.recipe_id).where(Recipe.title == title)
    return (await db.execute(stmt)).scalar_one_or_none()


async def get_or_create_ingredient_id(db: AsyncSession, name: str, category: str = "other") -> int:
    """핵심 재료 키로 INGREDIENT 행을 찾고 없으면 생성 (동시 생성 시에도 1행)"""
    await insert_or_ignore(
        db,
        Ingredient,
        {"name": name, "category": category},
        conflict_attrs=("name",),
    )
    stmt = select(Ingredient.ingredient_id).where(Ingredient.name == name)
    return (await db.execute(stmt)).scalar_one()


def split_instructions(instructions: Optional[Union[List[str], str]]) -> List[str]:
    """리스트 또는 줄바꿈 문자열 → 빈 줄 없는 단계 리스트"""
    if not instructions:
        return []
    if isinstance(instructions, str):
        instructions = instructions.splitlines()
    return [normalize_whitespace(step) for step in instructions if step and step.strip()]


async def build_ingredient_lines(db: AsyncSession, lines: List[str]) -> List[RecipeIngredient]:
    ingredient_ids: Dict[str, int] = {}
    rows: List[RecipeIngredient] = []
    for line in lines:
        parsed = parse_ingredient(line)
        key = core_ingredient_key(parsed.name) or core_ingredient_key(line)
        if not key:
            logger.warning(f"빈 재료 라인 건너뜀: {line!r}")
            continue
        if key not in ingredient_ids:
            ingredient_ids[key] = await get_or_create_ingredient_id(db, key)
        rows.append(
            RecipeIngredient(
                ingredient_id=ingredient_ids[key],
                amount=parsed.amount,
                unit=parsed.unit,
                full_text=normalize_whitespace(line),
                is_required=True,
                preparation=parsed.preparation,
            )
        )
    return rows


async def save_favorite_recipe(
    db: AsyncSession,
    recipe_in: FavoriteRecipeIn,
    device: Optional[ClaimedDevice],
    rating: int = 5,
    source: RecipeSource = RecipeSource.user_generated,
) -> Tuple[int, bool]:
    """
    레시피 저장
    - 반환: (recipe_id, 새로 생성했는지)
    - 기존 제목: 기기가 있으면 해당 기기의 평점만 기록
    - 신규: 레시피/재료 라인/조리 단계/영양 정보 생성 후 기기 평점 기록
    """
    existing_id = await get_recipe_id_by_title(db, recipe_in.title)
    if existing_id is not None:
        logger.info(f"이미 존재하는 레시피 제목: recipe_id={existing_id}, title={recipe_in.title!r}")
        if device is not None:
            await record_rating(db, existing_id, device, rating)
        return existing_id, False

    ingredient_lines = await build_ingredient_lines(db, recipe_in.ingredients)
    steps = split_instructions(recipe_in.instructions)

    recipe = Recipe(
        title=recipe_in.title,
        description=recipe_in.description,
        cuisine=(recipe_in.cuisine or "").strip().lower() or DEFAULT_CUISINE,
        servings=parse_servings(recipe_in.servings),
        prep_time=parse_time_minutes(recipe_in.prep_time),
        cook_time=parse_time_minutes(recipe_in.cook_time),
        difficulty=normalize_difficulty(recipe_in.difficulty),
        source=source.value,
        average_rating=0.0,
        rating_count=0,
        submitted_by=device.device_id if device is not None else None,
    )
    recipe.ingredient_lines = ingredient_lines
    recipe.instructions = [
        RecipeInstruction(step_number=index, instruction=step)
        for index, step in enumerate(steps, start=1)
    ]
    if recipe_in.nutrition:
        recipe.nutrition = RecipeNutrition(**parse_nutrition(recipe_in.nutrition))

    db.add(recipe)
    await db.flush()
    logger.info(
        f"새 레시피 생성: recipe_id={recipe.recipe_id}, title={recipe.title!r}, source={recipe.source}, "
        f"ingredients={len(ingredient_lines)}, steps={len(steps)}"
    )

    if device is not None:
        await record_rating(db, recipe.recipe_id, device, rating)
    return recipe.recipe_id, True
