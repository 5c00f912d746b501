"""Recipe match endpoints (DB 정확 일치 → 실패 시 AI 생성)."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.recipe_db import get_recipe_db
from common.dependencies import claim_device
from common.errors import GenerationFailedException, RecipeGenerationError
from common.logger import get_logger, log_with_context
from services.recipe.crud.recipe_detail_crud import get_recipe_detail
from services.recipe.crud.recipe_exclusion_crud import get_excluded_recipe_ids
from services.recipe.crud.recipe_match_crud import get_recipe_matcher
from services.recipe.crud.recipe_rating_crud import record_view
from services.recipe.schemas.recipe_match_schema import RecipeMatchRequest, RecipeMatchResponse
from services.recipe.utils.ingredient_normalizer import ingredient_key
from services.recipe.utils.ports import RecipeMatcherPort
from services.recipe.utils.recipe_generator import RecipeGenerator, get_recipe_generator

router = APIRouter()
logger = get_logger("recipe_router")


@router.post("/match", response_model=RecipeMatchResponse, response_model_exclude_none=True)
async def match_recipe(
        req: RecipeMatchRequest = Body(...),
        db: AsyncSession = Depends(get_recipe_db),
        matcher: RecipeMatcherPort = Depends(get_recipe_matcher),
        generator: Optional[RecipeGenerator] = Depends(get_recipe_generator),
):
    """
    보유 재료로 레시피 찾기
    - 기기가 이미 본/등록한 레시피는 제외
    - DB 매칭 성공 시 조회 기록 후 반환, 실패 시 AI 생성(설정된 경우)
    """
    device = claim_device(req.device_id)
    core_ingredients = {key for key in (ingredient_key(item) for item in req.ingredients) if key}
    logger.info(f"레시피 매칭 API 호출: device_id={device}, ingredients={req.ingredients}")

    try:
        excluded = await get_excluded_recipe_ids(db, device)
        recipe_id = await matcher.find_best_match(db, core_ingredients, excluded)
        recipe = await get_recipe_detail(db, recipe_id) if recipe_id is not None else None
    except Exception as e:
        logger.error(f"레시피 매칭 실패: device_id={device}, error={str(e)}")
        raise HTTPException(status_code=500, detail="레시피 매칭 중 오류가 발생했습니다.")

    if recipe is not None:
        if device is not None:
            try:
                await record_view(db, recipe_id, device)
                await db.commit()
            except Exception as e:
                await db.rollback()
                logger.warning(f"조회 기록 실패(응답은 계속): recipe_id={recipe_id}, device_id={device}, error={str(e)}")
        log_with_context(
            logger, "INFO", "DB 레시피 매칭 성공",
            recipe_id=recipe_id, device_id=str(device) if device else None, excluded=len(excluded),
        )
        return RecipeMatchResponse(found=True, recipe=recipe, from_database=True)

    if generator is None:
        logger.warning(f"매칭 레시피 없음, AI 생성 비활성화(GEMINI_API_KEY 미설정): keys={sorted(core_ingredients)}")
        return RecipeMatchResponse(found=False)

    # 생성 대기 동안 커넥션 반납
    await db.close()
    try:
        generated = await generator.generate(
            req.ingredients,
            cuisine_hint=req.cuisine,
            dietary_hint=req.dietary,
            available_seasonings=req.seasonings,
        )
    except RecipeGenerationError as e:
        logger.error(f"AI 레시피 생성 실패: ingredients={req.ingredients}, error={str(e)}")
        raise GenerationFailedException()

    log_with_context(logger, "INFO", "AI 레시피 생성 반환", title=generated.title, device_id=str(device) if device else None)
    return RecipeMatchResponse(found=True, recipe=generated, from_database=False)
