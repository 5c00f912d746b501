"""Device endpoints (조회 이력, 프리미엄 상태, 기기 ID 이전)."""

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.recipe_db import get_recipe_db
from common.dependencies import ClaimedDevice, claim_device
from common.errors import BadRequestException
from common.logger import get_logger
from services.device.crud.device_crud import (
    get_device_views,
    get_premium_status,
    migrate_device,
    set_premium_status,
)
from services.device.schemas.device_schema import (
    DeviceMigrateRequest,
    DeviceMigrateResponse,
    DeviceViewsResponse,
    PremiumStatus,
    PremiumUpdate,
)

router = APIRouter(prefix="/api/devices", tags=["Device"])
logger = get_logger("device_router")


def path_device(device_id: str = Path(..., description="기기 ID")) -> ClaimedDevice:
    device = claim_device(device_id)
    if device is None:
        raise BadRequestException("기기 ID 가 비어 있습니다.")
    return device


# /{device_id} 경로보다 먼저 등록
@router.post("/migrate", response_model=DeviceMigrateResponse)
async def migrate(
        req: DeviceMigrateRequest = Body(...),
        db: AsyncSession = Depends(get_recipe_db),
):
    """기존 기기 ID 의 이력/등록 레시피/프리미엄을 새 기기 ID 로 이전"""
    old, new = claim_device(req.old_device_id), claim_device(req.new_device_id)
    logger.info(f"기기 ID 이전 API 호출: old={old}, new={new}")
    try:
        result = await migrate_device(db, old, new)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"기기 ID 이전 실패: old={old}, new={new}, error={str(e)}")
        raise HTTPException(status_code=500, detail="기기 이전 중 오류가 발생했습니다.")
    return DeviceMigrateResponse(success=True, **result)


@router.get("/{device_id}/views", response_model=DeviceViewsResponse)
async def device_views(
        device: ClaimedDevice = Depends(path_device),
        db: AsyncSession = Depends(get_recipe_db),
):
    """기기의 레시피 조회/평점 이력"""
    logger.debug(f"기기 조회 이력 API 호출: device_id={device}")
    try:
        views = await get_device_views(db, device)
    except Exception as e:
        logger.error(f"기기 조회 이력 조회 실패: device_id={device}, error={str(e)}")
        raise HTTPException(status_code=500, detail="조회 이력 조회 중 오류가 발생했습니다.")
    return DeviceViewsResponse(device_id=device.device_id, view_count=len(views), views=views)


@router.get("/{device_id}/premium", response_model=PremiumStatus)
async def premium_status(
        device: ClaimedDevice = Depends(path_device),
        db: AsyncSession = Depends(get_recipe_db),
):
    """프리미엄 상태 조회 (기록이 없으면 비프리미엄)"""
    try:
        entitlement = await get_premium_status(db, device)
    except Exception as e:
        logger.error(f"프리미엄 상태 조회 실패: device_id={device}, error={str(e)}")
        raise HTTPException(status_code=500, detail="프리미엄 상태 조회 중 오류가 발생했습니다.")
    if entitlement is None:
        return PremiumStatus(device_id=device.device_id, is_premium=False)
    return PremiumStatus.model_validate(entitlement)


@router.post("/{device_id}/premium", response_model=PremiumStatus)
async def update_premium_status(
        device: ClaimedDevice = Depends(path_device),
        req: PremiumUpdate = Body(...),
        db: AsyncSession = Depends(get_recipe_db),
):
    """프리미엄 상태 저장"""
    logger.info(f"프리미엄 상태 저장 API 호출: device_id={device}, is_premium={req.is_premium}")
    try:
        entitlement = await set_premium_status(db, device, req.is_premium, req.purchase_token)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"프리미엄 상태 저장 실패: device_id={device}, error={str(e)}")
        raise HTTPException(status_code=500, detail="프리미엄 상태 저장 중 오류가 발생했습니다.")
    return PremiumStatus.model_validate(entitlement)
