"""5점 레시피 저장(save-favorite) 요청/응답 스키마."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class FavoriteRecipeIn(BaseModel):
    """
    클라이언트가 보낸 완성 레시피
    - prepTime/cookTime 은 분(int) 또는 "1h 15m" 같은 문자열
    - instructions 는 리스트 또는 단일 문자열
    - nutrition 값은 숫자 또는 "28g" 같은 문자열
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    cuisine: Optional[str] = None
    servings: Optional[Union[int, str]] = None
    prep_time: Optional[Union[int, str]] = Field(None, alias="prepTime")
    cook_time: Optional[Union[int, str]] = Field(None, alias="cookTime")
    difficulty: Optional[str] = None
    ingredients: List[str] = Field(..., min_length=1)
    instructions: Optional[Union[List[str], str]] = None
    nutrition: Optional[Dict[str, Any]] = None
    dietary: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("레시피 제목이 비어 있습니다.")
        return v.strip()

    @field_validator("ingredients")
    @classmethod
    def strip_ingredients(cls, v: List[str]) -> List[str]:
        cleaned = [item.strip() for item in v if item and item.strip()]
        if not cleaned:
            raise ValueError("재료 목록이 비어 있습니다.")
        return cleaned

    class Config:
        populate_by_name = True


class SaveFavoriteRequest(BaseModel):
    recipe: FavoriteRecipeIn
    device_id: Optional[str] = Field(None, alias="deviceId")
    rating: int = Field(..., description="5점만 허용")

    @field_validator("rating")
    @classmethod
    def only_five_stars(cls, v: int) -> int:
        if v != 5:
            raise ValueError("5점 레시피만 저장할 수 있습니다.")
        return v

    class Config:
        populate_by_name = True


class SaveFavoriteResponse(BaseModel):
    success: bool = True
    message: str
    recipe_id: int = Field(..., alias="recipeId")
    created: bool = Field(..., description="새 레시피 생성 여부(기존 제목이면 False)")

    class Config:
        populate_by_name = True
