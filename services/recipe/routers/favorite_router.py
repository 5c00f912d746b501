"""5점 레시피 저장(save-favorite) 엔드포인트."""

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.recipe_db import get_recipe_db
from common.dependencies import claim_device
from common.logger import get_logger
from services.recipe.crud.recipe_favorite_crud import save_favorite_recipe
from services.recipe.schemas.recipe_favorite_schema import SaveFavoriteRequest, SaveFavoriteResponse

router = APIRouter()
logger = get_logger("recipe_router")


@router.post("/save-favorite", response_model=SaveFavoriteResponse)
async def save_favorite(
        req: SaveFavoriteRequest = Body(...),
        db: AsyncSession = Depends(get_recipe_db),
):
    """
    5점 받은 레시피 저장
    - 같은 제목이 있으면 해당 레시피에 기기 평점만 기록
    - 레시피/재료/단계/영양/평점은 한 트랜잭션
    """
    device = claim_device(req.device_id)
    logger.info(f"레시피 저장 API 호출: title={req.recipe.title!r}, device_id={device}")

    try:
        recipe_id, created = await save_favorite_recipe(db, req.recipe, device, rating=req.rating)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"레시피 저장 충돌: title={req.recipe.title!r}, error={str(e)}")
        raise HTTPException(status_code=409, detail="같은 레시피가 동시에 저장되고 있습니다. 다시 시도해 주세요.")
    except Exception as e:
        await db.rollback()
        logger.error(f"레시피 저장 실패: title={req.recipe.title!r}, device_id={device}, error={str(e)}")
        raise HTTPException(status_code=500, detail="레시피 저장 중 오류가 발생했습니다.")

    message = "레시피가 저장되었습니다." if created else "이미 저장된 레시피입니다. 평점이 반영되었습니다."
    logger.info(f"레시피 저장 완료: recipe_id={recipe_id}, created={created}")
    return SaveFavoriteResponse(success=True, message=message, recipe_id=recipe_id, created=created)
