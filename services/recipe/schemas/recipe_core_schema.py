"""Core recipe response schemas (매칭/상세/생성 결과 공통 형태)."""

from typing import List, Optional

from pydantic import BaseModel, Field


class NutritionOut(BaseModel):
    """영양 정보 (없는 값은 0)"""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    sodium: float = 0

    class Config:
        from_attributes = True


class RecipeOut(BaseModel):
    """
    클라이언트로 내려가는 레시피
    - DB 레시피와 AI 생성 레시피가 같은 형태를 사용 (생성 레시피는 id 없음)
    """

    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    cuisine: Optional[str] = None
    servings: int = 4
    prep_time: int = Field(30, alias="prepTime", description="분")
    cook_time: int = Field(30, alias="cookTime", description="분")
    difficulty: str = "medium"
    source: str = "database"
    rating: float = 0.0
    rating_count: int = Field(0, alias="ratingCount")
    ingredients: List[str] = Field(default_factory=list, description="표시용 재료 라인")
    instructions: List[str] = Field(default_factory=list)
    nutrition: NutritionOut = Field(default_factory=NutritionOut)

    class Config:
        populate_by_name = True


class RecipeDetailResponse(BaseModel):
    recipe: RecipeOut


class CommunityRecipe(BaseModel):
    """커뮤니티(사용자 등록) 인기 레시피 요약"""

    id: int
    title: str
    cuisine: Optional[str] = None
    servings: int
    prep_time: int = Field(..., alias="prepTime")
    cook_time: int = Field(..., alias="cookTime")
    average_rating: float = Field(..., alias="averageRating")
    rating_count: int = Field(..., alias="ratingCount")
    five_star_count: int = Field(..., alias="fiveStarCount")

    class Config:
        populate_by_name = True


class CommunityRecipeListResponse(BaseModel):
    recipes: List[CommunityRecipe] = Field(default_factory=list)
