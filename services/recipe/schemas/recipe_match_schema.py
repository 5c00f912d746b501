"""Recipe match request/response schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from services.recipe.schemas.recipe_core_schema import RecipeOut


class RecipeMatchRequest(BaseModel):
    """재료 기반 레시피 매칭 요청 바디"""

    ingredients: List[str] = Field(..., min_length=1, description="보유 재료 목록(1개 이상)")
    cuisine: Optional[str] = Field(None, description="AI 생성 시 요리 종류 힌트")
    dietary: Optional[str] = Field(None, description="AI 생성 시 식단 제한 힌트")
    seasonings: List[str] = Field(default_factory=list, description="AI 생성 시 추가로 허용할 양념/기본 식재료")
    device_id: Optional[str] = Field(None, alias="deviceId", description="클라이언트 기기 ID(인증 없음)")

    @field_validator("ingredients")
    @classmethod
    def strip_ingredients(cls, v: List[str]) -> List[str]:
        cleaned = [item.strip() for item in v if item and item.strip()]
        if not cleaned:
            raise ValueError("재료 목록이 비어 있습니다.")
        return cleaned

    @field_validator("seasonings")
    @classmethod
    def strip_seasonings(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]

    class Config:
        populate_by_name = True


class RecipeMatchResponse(BaseModel):
    """
    매칭 결과
    - 미매칭: {"found": false}
    - 매칭/생성: {"found": true, "recipe": {...}, "fromDatabase": bool}
    """

    found: bool
    recipe: Optional[RecipeOut] = None
    from_database: Optional[bool] = Field(None, alias="fromDatabase")

    class Config:
        populate_by_name = True
