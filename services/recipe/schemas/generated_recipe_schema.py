"""AI 생성 레시피 스키마 (생성기 출력 형태가 일정하지 않아 재료 라인을 태그드 유니언으로 표현)."""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class RawIngredientLine(BaseModel):
    """생성기가 문자열로 준 재료 라인 ("2 cups rice")"""

    kind: Literal["raw"] = "raw"
    text: str


class StructuredIngredientLine(BaseModel):
    """생성기가 객체로 준 재료 라인 ({"amount": 2, "unit": "cups", "name": "rice"})"""

    kind: Literal["structured"] = "structured"
    amount: Optional[str] = None
    unit: Optional[str] = None
    name: str
    preparation: Optional[str] = None


IngredientLine = Annotated[
    Union[RawIngredientLine, StructuredIngredientLine],
    Field(discriminator="kind"),
]


# 영양 정보가 없을 때 채우는 중립 값
NEUTRAL_NUTRITION: Dict[str, float] = {
    "calories": 0,
    "protein": 0,
    "carbs": 0,
    "fat": 0,
    "fiber": 0,
    "sugar": 0,
    "sodium": 0,
}


class GeneratedRecipe(BaseModel):
    title: str
    description: Optional[str] = None
    cuisine: Optional[str] = None
    servings: int = 4
    prep_time: int = 15
    cook_time: int = 30
    difficulty: str = "medium"
    ingredients: List[IngredientLine] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    nutrition: Dict[str, float] = Field(default_factory=lambda: dict(NEUTRAL_NUTRITION))
