"""Device (조회 이력 / 프리미엄 / 기기 이전) schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class DeviceView(BaseModel):
    recipe_id: int = Field(..., alias="recipeId")
    title: str
    rating: Optional[int] = None
    viewed_at: Optional[datetime] = Field(None, alias="viewedAt")

    class Config:
        populate_by_name = True


class DeviceViewsResponse(BaseModel):
    device_id: str = Field(..., alias="deviceId")
    view_count: int = Field(..., alias="viewCount")
    views: List[DeviceView] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class PremiumUpdate(BaseModel):
    """프리미엄 상태 저장 요청"""

    is_premium: bool = Field(..., alias="isPremium")
    purchase_token: Optional[str] = Field(None, alias="purchaseToken")

    class Config:
        populate_by_name = True


class PremiumStatus(BaseModel):
    device_id: str = Field(..., alias="deviceId")
    is_premium: bool = Field(False, alias="isPremium")
    purchase_date: Optional[datetime] = Field(None, alias="purchaseDate")

    class Config:
        populate_by_name = True
        from_attributes = True


class DeviceMigrateRequest(BaseModel):
    old_device_id: str = Field(..., alias="oldDeviceId", min_length=1)
    new_device_id: str = Field(..., alias="newDeviceId", min_length=1)

    @field_validator("old_device_id", "new_device_id")
    @classmethod
    def strip_device_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("기기 ID 가 비어 있습니다.")
        return v.strip()

    class Config:
        populate_by_name = True


class DeviceMigrateResponse(BaseModel):
    success: bool = True
    views_moved: int = Field(0, alias="viewsMoved")
    views_merged: int = Field(0, alias="viewsMerged")
    recipes_moved: int = Field(0, alias="recipesMoved")
    premium_moved: bool = Field(False, alias="premiumMoved")

    class Config:
        populate_by_name = True
