"""Recipe rating schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class RatingValue(int, Enum):
    one = 1
    two = 2
    three = 3
    four = 4
    five = 5


class RecipeRatingCreate(BaseModel):
    """별점 등록 요청 바디"""

    rating: RatingValue = Field(..., description="1~5 정수만 허용")
    device_id: str = Field(..., alias="deviceId", min_length=1, description="평가하는 기기 ID")

    class Config:
        populate_by_name = True


class RecipeRatingResponse(BaseModel):
    success: bool = True
    recipe_id: int = Field(..., alias="recipeId")
    average_rating: float = Field(..., alias="averageRating")
    rating_count: int = Field(..., alias="ratingCount")

    class Config:
        populate_by_name = True
