"""
Device CRUD functions (조회 이력, 프리미엄 상태, 기기 ID 이전).
- 커밋은 라우터에서 수행
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Set

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.upsert import insert_or_update
from common.dependencies import ClaimedDevice
from common.logger import get_logger
from services.device.models.premium_model import PremiumEntitlement
from services.device.schemas.device_schema import DeviceView
from services.recipe.crud.recipe_rating_crud import recompute_recipe_rating
from services.recipe.models.core_model import Recipe
from services.recipe.models.rating_model import RecipeView

logger = get_logger("device_crud")


async def get_device_views(db: AsyncSession, device: ClaimedDevice) -> List[DeviceView]:
    """기기의 조회/평점 이력 (최신순)"""
    stmt = (
        select(RecipeView.recipe_id, Recipe.title, RecipeView.rating, RecipeView.viewed_at)
        .join(Recipe, Recipe.recipe_id == RecipeView.recipe_id)
        .where(RecipeView.device_id == device.device_id)
        .order_by(desc(RecipeView.viewed_at), desc(RecipeView.view_id))
    )
    rows = (await db.execute(stmt)).all()
    return [
        DeviceView(recipe_id=row.recipe_id, title=row.title, rating=row.rating, viewed_at=row.viewed_at)
        for row in rows
    ]


async def get_premium_status(db: AsyncSession, device: ClaimedDevice) -> Optional[PremiumEntitlement]:
    stmt = (
        select(PremiumEntitlement)
        .where(PremiumEntitlement.device_id == device.device_id)
        .execution_options(populate_existing=True)
    )
    return (await db.execute(stmt)).scalars().first()


async def set_premium_status(
    db: AsyncSession,
    device: ClaimedDevice,
    is_premium: bool,
    purchase_token: Optional[str] = None,
) -> PremiumEntitlement:
    """
    프리미엄 상태 저장 (기기당 1행 upsert)
    - 이미 프리미엄이면 최초 구매일 유지
    """
    now = datetime.now()
    purchase_date = now if is_premium else None
    if is_premium:
        current = await get_premium_status(db, device)
        if current is not None and current.is_premium and current.purchase_date is not None:
            purchase_date = current.purchase_date

    await insert_or_update(
        db,
        PremiumEntitlement,
        {
            "device_id": device.device_id,
            "is_premium": is_premium,
            "purchase_date": purchase_date,
            "purchase_token": purchase_token,
            "updated_at": now,
        },
        conflict_attrs=("device_id",),
        update_attrs=("is_premium", "purchase_date", "purchase_token", "updated_at"),
    )
    logger.info(f"프리미엄 상태 저장: device_id={device}, is_premium={is_premium}")
    return await get_premium_status(db, device)


async def migrate_device(db: AsyncSession, old: ClaimedDevice, new: ClaimedDevice) -> Dict[str, object]:
    """
    기존 기기 ID 의 데이터를 새 기기 ID 로 이전
    - 조회 이력: 새 기기에 같은 레시피 행이 있으면 기존 행은 삭제 (새 행에 평점이 없으면 평점만 옮김)
    - 등록 레시피(submitted_by), 프리미엄 상태 이전
    - 평점이 옮겨진 레시피는 집계 재계산
    """
    result: Dict[str, object] = {
        "views_moved": 0,
        "views_merged": 0,
        "recipes_moved": 0,
        "premium_moved": False,
    }
    if old.device_id == new.device_id:
        return result

    old_views = (
        await db.execute(select(RecipeView).where(RecipeView.device_id == old.device_id))
    ).scalars().all()
    new_views = {
        view.recipe_id: view
        for view in (
            await db.execute(select(RecipeView).where(RecipeView.device_id == new.device_id))
        ).scalars().all()
    }

    affected: Set[int] = set()
    for view in old_views:
        target = new_views.get(view.recipe_id)
        if target is None:
            view.device_id = new.device_id
            result["views_moved"] += 1
            continue
        if target.rating is None and view.rating is not None:
            target.rating = view.rating
        if view.rating is not None:
            affected.add(view.recipe_id)
        await db.delete(view)
        result["views_merged"] += 1
    await db.flush()

    moved_recipes = await db.execute(
        update(Recipe)
        .where(Recipe.submitted_by == old.device_id)
        .values(submitted_by=new.device_id)
    )
    result["recipes_moved"] = moved_recipes.rowcount or 0

    old_premium = await get_premium_status(db, old)
    if old_premium is not None:
        new_premium = await get_premium_status(db, new)
        if new_premium is None:
            db.add(
                PremiumEntitlement(
                    device_id=new.device_id,
                    is_premium=old_premium.is_premium,
                    purchase_date=old_premium.purchase_date,
                    purchase_token=old_premium.purchase_token,
                )
            )
        elif old_premium.is_premium and not new_premium.is_premium:
            new_premium.is_premium = True
            new_premium.purchase_date = old_premium.purchase_date
            new_premium.purchase_token = old_premium.purchase_token
        await db.delete(old_premium)
        await db.flush()
        result["premium_moved"] = True

    for recipe_id in sorted(affected):
        await recompute_recipe_rating(db, recipe_id)

    logger.info(f"기기 ID 이전 완료: old={old}, new={new}, result={result}")
    return result
