"""Recipe detail endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.recipe_db import get_recipe_db
from common.logger import get_logger
from services.recipe.crud.recipe_detail_crud import get_recipe_detail, get_top_community_recipes
from services.recipe.schemas.recipe_core_schema import CommunityRecipeListResponse, RecipeDetailResponse

router = APIRouter()
logger = get_logger("recipe_router")


# /{recipe_id} 보다 먼저 등록
@router.get("/top-community", response_model=CommunityRecipeListResponse)
async def top_community_recipes(
        limit: int = Query(10, ge=1, le=50, description="최대 개수"),
        db: AsyncSession = Depends(get_recipe_db),
):
    """사용자 등록 레시피 중 평점 상위 목록"""
    logger.info(f"커뮤니티 인기 레시피 조회 API 호출: limit={limit}")
    try:
        recipes = await get_top_community_recipes(db, limit)
    except Exception as e:
        logger.error(f"커뮤니티 인기 레시피 조회 실패: error={str(e)}")
        raise HTTPException(status_code=500, detail="커뮤니티 레시피 조회 중 오류가 발생했습니다.")
    return CommunityRecipeListResponse(recipes=recipes)


@router.get("/{recipe_id}", response_model=RecipeDetailResponse)
async def get_recipe(
        recipe_id: int = Path(..., description="레시피 ID"),
        db: AsyncSession = Depends(get_recipe_db),
):
    """
    레시피 상세 정보 (재료 라인, 조리 단계, 영양 정보)
    """
    logger.info(f"레시피 상세 조회 API 호출: recipe_id={recipe_id}")

    try:
        result = await get_recipe_detail(db, recipe_id)
    except Exception as e:
        logger.error(f"레시피 상세 조회 실패: recipe_id={recipe_id}, error={str(e)}")
        raise HTTPException(status_code=500, detail="레시피 상세 조회 중 오류가 발생했습니다.")

    if result is None:
        raise HTTPException(status_code=404, detail="레시피가 존재하지 않습니다.")
    return RecipeDetailResponse(recipe=result)
