"""Recipe rating endpoints."""

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.recipe_db import get_recipe_db
from common.dependencies import claim_device
from common.errors import BadRequestException, NotFoundException
from common.logger import get_logger
from services.recipe.crud.recipe_rating_crud import record_rating
from services.recipe.schemas.recipe_rating_schema import RecipeRatingCreate, RecipeRatingResponse

router = APIRouter()
logger = get_logger("recipe_router")


@router.post("/{recipe_id}/rate", response_model=RecipeRatingResponse)
async def rate_recipe(
        recipe_id: int = Path(..., description="레시피 ID"),
        req: RecipeRatingCreate = Body(...),
        db: AsyncSession = Depends(get_recipe_db),
):
    """
    레시피 별점 등록/변경 (1~5 정수, 기기당 1개)
    """
    device = claim_device(req.device_id)
    if device is None:
        raise BadRequestException("deviceId 가 필요합니다.")
    logger.info(f"레시피 별점 등록 API 호출: recipe_id={recipe_id}, device_id={device}, rating={int(req.rating)}")

    try:
        result = await record_rating(db, recipe_id, device, int(req.rating))
        if result is None:
            await db.rollback()
            raise NotFoundException("레시피")
        await db.commit()
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"레시피 별점 등록 실패: recipe_id={recipe_id}, device_id={device}, error={e}")
        raise HTTPException(status_code=500, detail="레시피 별점 등록 중 오류가 발생했습니다.")

    average, count = result
    logger.info(f"레시피 별점 등록 완료: recipe_id={recipe_id}, average={average:.2f}, count={count}")
    return RecipeRatingResponse(
        success=True,
        recipe_id=recipe_id,
        average_rating=round(average, 2),
        rating_count=count,
    )
