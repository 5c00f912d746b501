#!/usr/bin/env python3
"""
샘플 레시피 시드 스크립트
- save-favorite 와 같은 저장 경로(save_favorite_recipe)를 사용, source=database
- 이미 같은 제목이 있으면 건너뜀
"""

import asyncio
import os
import sys
from typing import List, Tuple

# 프로젝트 루트를 Python 경로에 추가
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.ext.asyncio import AsyncSession

from common.config import get_settings
from common.database.recipe_db import RecipeDatabase
from common.logger import get_logger
from services.device.models import premium_model  # noqa: F401
from services.recipe.crud.recipe_favorite_crud import save_favorite_recipe
from services.recipe.models import rating_model  # noqa: F401
from services.recipe.models.core_model import RecipeSource
from services.recipe.schemas.recipe_favorite_schema import FavoriteRecipeIn

logger = get_logger("seed_recipes")

SEED_RECIPES = [
    {
        "title": "Classic Chicken Fried Rice",
        "cuisine": "chinese",
        "servings": 4,
        "prepTime": 15,
        "cookTime": 20,
        "difficulty": "easy",
        "ingredients": [
            "1 lb chicken",
            "3 cups rice",
            "3 tbsp soy sauce",
            "2 eggs",
            "3 stalks green onions, sliced",
            "3 cloves garlic, minced",
            "2 tbsp vegetable oil",
        ],
        "instructions": [
            "Cook rice according to package directions and let cool",
            "Cut chicken into small bite-sized pieces",
            "Heat oil in a large wok or skillet over high heat",
            "Add chicken and cook until golden brown",
            "Push chicken to the side, scramble eggs in the pan",
            "Add rice, breaking up any clumps",
            "Stir in soy sauce and mix everything together",
            "Garnish with sliced green onions and serve hot",
        ],
        "nutrition": {
            "calories": 420, "protein": "28g", "carbs": "45g", "fat": "12g",
            "fiber": "2g", "sugar": "3g", "sodium": "890mg",
        },
    },
    {
        "title": "One-Pot Pasta Primavera",
        "cuisine": "italian",
        "servings": 6,
        "prepTime": 10,
        "cookTime": 25,
        "difficulty": "easy",
        "ingredients": [
            "1 lb pasta",
            "2 cups tomatoes",
            "4 cloves garlic",
            "3 tbsp olive oil",
            "3 cups vegetables",
            "1/4 cup basil",
            "1/2 cup parmesan",
        ],
        "instructions": [
            "Place pasta, tomatoes, garlic, and olive oil in a large pot",
            "Add 4 cups of water and bring to a boil",
            "Stir frequently as pasta cooks",
            "Add vegetables in the last 5 minutes of cooking",
            "Top with basil and parmesan before serving",
        ],
        "nutrition": {
            "calories": 380, "protein": "14g", "carbs": "68g", "fat": "8g",
            "fiber": "5g", "sugar": "8g", "sodium": "340mg",
        },
    },
    {
        "title": "Simple Beef Tacos",
        "cuisine": "mexican",
        "servings": 4,
        "prepTime": 10,
        "cookTime": 15,
        "difficulty": "easy",
        "ingredients": [
            "1 lb ground beef",
            "2 tbsp taco seasoning",
            "8 tortillas",
            "1 cup cheese",
            "2 cups lettuce",
            "1 cup tomatoes",
        ],
        "instructions": [
            "Brown ground beef in a large skillet",
            "Drain excess fat",
            "Add taco seasoning and 1/4 cup water",
            "Simmer for 5 minutes",
            "Warm tortillas and fill with beef and toppings",
        ],
        "nutrition": {
            "calories": 450, "protein": "25g", "carbs": "32g", "fat": "24g",
            "fiber": "4g", "sugar": "4g", "sodium": "720mg",
        },
    },
]


async def seed_recipes(db: AsyncSession, recipes: List[dict] = SEED_RECIPES) -> Tuple[int, int]:
    """
    샘플 레시피 저장 (한 트랜잭션)
    - 반환: (생성 수, 건너뛴 수)
    """
    created_count = skipped_count = 0
    try:
        for data in recipes:
            recipe_in = FavoriteRecipeIn.model_validate(data)
            recipe_id, created = await save_favorite_recipe(
                db, recipe_in, device=None, source=RecipeSource.database
            )
            if created:
                created_count += 1
                logger.info(f"시드 레시피 생성: recipe_id={recipe_id}, title={recipe_in.title!r}")
            else:
                skipped_count += 1
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"시드 레시피 저장 실패: {str(e)}")
        raise

    logger.info(f"시드 완료: 생성 {created_count}건, 건너뜀 {skipped_count}건")
    return created_count, skipped_count


async def main():
    settings = get_settings()
    database = RecipeDatabase(settings.database_url, echo=settings.database_echo)
    try:
        await database.create_all()
        async with database.SessionLocal() as db:
            await seed_recipes(db)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
