# -*- coding: utf-8 -*-
"""
AI 레시피 생성 (DB 매칭 실패 시 대체 경로)

흐름
1) 초안(draft): 높은 temperature 로 주어진 재료(+양념)만 쓰는 레시피 JSON 요청
   - 전송 실패/타임아웃 → RecipeGenerationError (호출자가 502 로 변환)
   - JSON 해석 실패 → 입력 재료로 만든 최소 레시피로 대체
2) 교정(correction): 낮은 temperature 로 허용되지 않은 재료 제거/분량 보정/필수 필드 보장
   - 어떤 실패든 초안을 그대로 사용
3) 결정적 검증: 핵심 재료 키가 허용 목록과 맞지 않는 재료 라인 제거
"""
import asyncio
import json
import re
from typing import Any, Iterable, List, Optional, Set

from fastapi import Request

from common.config import Settings
from common.errors import RecipeGenerationError
from common.logger import get_logger
from services.recipe.schemas.generated_recipe_schema import (
    NEUTRAL_NUTRITION,
    GeneratedRecipe,
    IngredientLine,
    RawIngredientLine,
    StructuredIngredientLine,
)
from services.recipe.schemas.recipe_core_schema import NutritionOut, RecipeOut
from .gemini_adapter import GeminiTextGenerator
from .ingredient_normalizer import core_ingredient_key, ingredient_key, normalize_whitespace, parse_ingredient
from .ports import TextGeneratorPort
from .recipe_values import normalize_difficulty, parse_nutrition, parse_servings, parse_time_minutes

logger = get_logger("recipe_generator")

GENERATED_SOURCE = "ai_generated"

CODE_FENCE_RX = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)

NAME_KEYS = ("name", "ingredient", "item")
AMOUNT_KEYS = ("amount", "quantity", "qty")
UNIT_KEYS = ("unit", "measure")
PREPARATION_KEYS = ("preparation", "notes", "prep")
STEP_TEXT_KEYS = ("instruction", "text", "step", "description")

RECIPE_JSON_SHAPE = """{
  "title": "string",
  "description": "string",
  "cuisine": "string",
  "servings": 4,
  "prepTime": 15,
  "cookTime": 30,
  "difficulty": "easy | medium | hard",
  "ingredients": [{"amount": "2", "unit": "cups", "name": "rice", "preparation": "rinsed"}],
  "instructions": ["step 1", "step 2"],
  "nutrition": {"calories": 0, "protein": 0, "carbs": 0, "fat": 0, "fiber": 0, "sugar": 0, "sodium": 0}
}"""


# ----- 프롬프트 -----
def build_draft_prompt(
    ingredients: List[str],
    cuisine_hint: Optional[str],
    dietary_hint: Optional[str],
    available_seasonings: List[str],
) -> str:
    lines = [
        "You are a home cook writing a realistic recipe.",
        f"Use ONLY these ingredients: {', '.join(ingredients)}.",
    ]
    if available_seasonings:
        lines.append(f"You may also use these seasonings: {', '.join(available_seasonings)}.")
    lines.append("Do not add any other ingredient, not even water, oil or salt unless listed above.")
    if cuisine_hint:
        lines.append(f"Preferred cuisine: {cuisine_hint}.")
    if dietary_hint:
        lines.append(f"Dietary requirement: {dietary_hint}.")
    lines.append("Times are in minutes. Respond with JSON only, in this shape:")
    lines.append(RECIPE_JSON_SHAPE)
    return "\n".join(lines)


def build_correction_prompt(draft: GeneratedRecipe, allowed: List[str]) -> str:
    draft_json = json.dumps(generated_to_dict(draft), ensure_ascii=False)
    return "\n".join([
        "Review this recipe and return a corrected version.",
        f"Allowed ingredients: {', '.join(allowed)}.",
        "Remove every ingredient that is not allowed and any step that uses it.",
        "Fix unrealistic quantities and make sure every field is filled in.",
        "Respond with JSON only, in the same shape as the input.",
        draft_json,
    ])


# ----- 파싱/정규화 -----
def strip_code_fences(text: str) -> str:
    """```json ... ``` 감싸기와 앞뒤 설명 문장 제거"""
    text = (text or "").strip()
    match = CODE_FENCE_RX.search(text)
    if match:
        text = match.group(1).strip()
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        text = text[start:end + 1]
    return text


def _first_present(data: dict, keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        text = normalize_whitespace(str(value))
        if text:
            return text
    return None


def to_ingredient_line(item: Any) -> Optional[IngredientLine]:
    """생성기 재료 항목(문자열 또는 객체) → 태그드 유니언, 해석 불가면 None"""
    if isinstance(item, str):
        text = normalize_whitespace(item)
        return RawIngredientLine(text=text) if text else None
    if isinstance(item, dict):
        name = _first_present(item, NAME_KEYS)
        if not name:
            return None
        return StructuredIngredientLine(
            amount=_first_present(item, AMOUNT_KEYS),
            unit=_first_present(item, UNIT_KEYS),
            name=name,
            preparation=_first_present(item, PREPARATION_KEYS),
        )
    return None


def format_ingredient_line(line: IngredientLine) -> str:
    """표시용 한 줄: "amount unit name, preparation" """
    if isinstance(line, RawIngredientLine):
        return line.text
    text = " ".join(part for part in (line.amount, line.unit, line.name) if part)
    return f"{text}, {line.preparation}" if line.preparation else text


def ingredient_line_key(line: IngredientLine) -> str:
    if isinstance(line, RawIngredientLine):
        return ingredient_key(line.text)
    return core_ingredient_key(line.name)


def _optional_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return normalize_whitespace(str(value)) or None


def _to_steps(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.splitlines()
    if not isinstance(value, list):
        return []
    steps = []
    for item in value:
        if isinstance(item, dict):
            item = _first_present(item, STEP_TEXT_KEYS)
        if isinstance(item, str) and item.strip():
            steps.append(normalize_whitespace(item))
    return steps


def coerce_generated_recipe(data: Any) -> Optional[GeneratedRecipe]:
    """
    JSON dict → GeneratedRecipe
    - 제목/재료/조리 단계 중 하나라도 없으면 None
    - 시간/인분/난이도/영양은 기본값으로 보정
    """
    if not isinstance(data, dict):
        return None

    title = normalize_whitespace(str(data.get("title") or ""))
    raw_ingredients = data.get("ingredients") or []
    if isinstance(raw_ingredients, str):
        raw_ingredients = raw_ingredients.splitlines()
    if not isinstance(raw_ingredients, list):
        raw_ingredients = []
    ingredients = [line for line in (to_ingredient_line(item) for item in raw_ingredients) if line]
    instructions = _to_steps(data.get("instructions"))
    if not title or not ingredients or not instructions:
        return None

    nutrition = data.get("nutrition")
    return GeneratedRecipe(
        title=title,
        description=_optional_text(data.get("description")),
        cuisine=_optional_text(data.get("cuisine")),
        servings=parse_servings(data.get("servings")),
        prep_time=parse_time_minutes(data.get("prepTime", data.get("prep_time")), default=15),
        cook_time=parse_time_minutes(data.get("cookTime", data.get("cook_time"))),
        difficulty=normalize_difficulty(data.get("difficulty")),
        ingredients=ingredients,
        instructions=instructions,
        nutrition=parse_nutrition(nutrition) if isinstance(nutrition, dict) else dict(NEUTRAL_NUTRITION),
    )


def parse_generated_recipe(text: str) -> Optional[GeneratedRecipe]:
    """원문 텍스트 → GeneratedRecipe, JSON 이 아니거나 필수 필드가 없으면 None"""
    try:
        data = json.loads(strip_code_fences(text))
    except ValueError:
        return None
    return coerce_generated_recipe(data)


def generated_to_dict(recipe: GeneratedRecipe) -> dict:
    return {
        "title": recipe.title,
        "description": recipe.description,
        "cuisine": recipe.cuisine,
        "servings": recipe.servings,
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
        "difficulty": recipe.difficulty,
        "ingredients": [format_ingredient_line(line) for line in recipe.ingredients],
        "instructions": recipe.instructions,
        "nutrition": recipe.nutrition,
    }


def build_fallback_recipe(
    ingredients: List[str],
    available_seasonings: List[str],
    cuisine_hint: Optional[str] = None,
) -> GeneratedRecipe:
    """초안 해석 실패 시 입력 재료만으로 만든 최소 레시피"""
    names = [normalize_whitespace(parse_ingredient(item).name) for item in ingredients]
    names = [name for name in names if name] or ["Pantry"]
    cuisine_prefix = f"{cuisine_hint.strip().title()} " if cuisine_hint and cuisine_hint.strip() else ""
    title = f"Simple {cuisine_prefix}{' & '.join(name.title() for name in names[:3])} Skillet"

    seasoning_step = (
        f"Season with {', '.join(available_seasonings)} to taste."
        if available_seasonings else "Taste and adjust before serving."
    )
    instructions = [
        f"Prepare the {', '.join(names)}: rinse, trim and cut into bite-sized pieces.",
        "Heat a pan over medium heat.",
        f"Add the {names[0]} and cook, stirring occasionally, until done.",
    ]
    if len(names) > 1:
        instructions.append(f"Add the {', '.join(names[1:])} and cook until everything is tender.")
    instructions.append(seasoning_step)

    return GeneratedRecipe(
        title=title,
        description=f"A quick dish made with {', '.join(names)}.",
        cuisine=cuisine_hint or None,
        difficulty="easy",
        ingredients=[RawIngredientLine(text=normalize_whitespace(item)) for item in ingredients + available_seasonings],
        instructions=instructions,
    )


def _is_allowed(key: str, allowed_keys: Set[str]) -> bool:
    """핵심 재료 키 정확 일치만 허용 ("chicken stock" ≠ "chicken")"""
    return bool(key) and key in allowed_keys


def filter_disallowed_ingredients(
    recipe: GeneratedRecipe,
    allowed_lines: List[str],
) -> GeneratedRecipe:
    """
    허용 목록(입력 재료 + 양념)에 없는 재료 라인 제거
    - 모두 제거되면 입력 재료 라인으로 대체
    """
    allowed_keys = {key for key in (ingredient_key(item) for item in allowed_lines) if key}
    kept = [line for line in recipe.ingredients if _is_allowed(ingredient_line_key(line), allowed_keys)]

    dropped = len(recipe.ingredients) - len(kept)
    if dropped:
        logger.warning(f"허용되지 않은 재료 라인 제거: title={recipe.title!r}, dropped={dropped}")
    if not kept:
        kept = [RawIngredientLine(text=normalize_whitespace(item)) for item in allowed_lines]
    return recipe.model_copy(update={"ingredients": kept})


def to_recipe_out(recipe: GeneratedRecipe) -> RecipeOut:
    return RecipeOut(
        id=None,
        title=recipe.title,
        description=recipe.description,
        cuisine=recipe.cuisine,
        servings=recipe.servings,
        prep_time=recipe.prep_time,
        cook_time=recipe.cook_time,
        difficulty=recipe.difficulty,
        source=GENERATED_SOURCE,
        rating=0.0,
        rating_count=0,
        ingredients=[format_ingredient_line(line) for line in recipe.ingredients],
        instructions=recipe.instructions,
        nutrition=NutritionOut(**recipe.nutrition),
    )


class RecipeGenerator:
    """
    2단계(초안 → 교정) 레시피 생성기
    - 텍스트 생성기는 TextGeneratorPort 로 주입 (운영: Gemini, 테스트: 가짜 구현)
    """

    def __init__(
        self,
        text_generator: TextGeneratorPort,
        timeout: float = 15.0,
        draft_temperature: float = 0.9,
        correction_temperature: float = 0.2,
        max_output_tokens: int = 2048,
    ):
        self.text_generator = text_generator
        self.timeout = timeout
        self.draft_temperature = draft_temperature
        self.correction_temperature = correction_temperature
        self.max_output_tokens = max_output_tokens

    async def _generate_text(self, prompt: str, temperature: float) -> str:
        try:
            return await asyncio.wait_for(
                self.text_generator.generate_text(prompt, temperature, self.max_output_tokens),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"레시피 생성 타임아웃: {self.timeout}s 초과")
            raise RecipeGenerationError("텍스트 생성 응답 시간이 초과되었습니다.") from e

    async def generate(
        self,
        ingredients: List[str],
        cuisine_hint: Optional[str] = None,
        dietary_hint: Optional[str] = None,
        available_seasonings: Optional[List[str]] = None,
    ) -> RecipeOut:
        seasonings = list(available_seasonings or [])
        allowed = list(ingredients) + seasonings
        logger.info(f"AI 레시피 생성 시작: ingredients={ingredients}, seasonings={seasonings}, cuisine={cuisine_hint}")

        # 1단계: 전송 실패는 그대로 올림
        draft_text = await self._generate_text(
            build_draft_prompt(ingredients, cuisine_hint, dietary_hint, seasonings),
            self.draft_temperature,
        )
        draft = parse_generated_recipe(draft_text)
        if draft is None:
            logger.warning("초안 JSON 해석 실패, 입력 재료로 최소 레시피 구성")
            draft = build_fallback_recipe(ingredients, seasonings, cuisine_hint)

        # 2단계: 실패하면 초안 유지
        recipe = draft
        try:
            corrected_text = await self._generate_text(
                build_correction_prompt(draft, allowed),
                self.correction_temperature,
            )
        except RecipeGenerationError as e:
            logger.warning(f"교정 단계 실패, 초안 사용: {e}")
        else:
            corrected = parse_generated_recipe(corrected_text)
            if corrected is None:
                logger.warning("교정 결과 JSON 해석 실패, 초안 사용")
            else:
                recipe = corrected

        recipe = filter_disallowed_ingredients(recipe, allowed)
        logger.info(f"AI 레시피 생성 완료: title={recipe.title!r}, ingredients={len(recipe.ingredients)}")
        return to_recipe_out(recipe)


def create_recipe_generator(settings: Settings) -> Optional[RecipeGenerator]:
    """API 키가 설정된 경우에만 Gemini 기반 생성기 구성"""
    if not settings.gemini_api_key:
        logger.info("GEMINI_API_KEY 미설정: AI 레시피 생성 비활성화")
        return None
    text_generator = GeminiTextGenerator(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        timeout=settings.generation_timeout_seconds,
    )
    return RecipeGenerator(
        text_generator,
        timeout=settings.generation_timeout_seconds,
        draft_temperature=settings.draft_temperature,
        correction_temperature=settings.correction_temperature,
        max_output_tokens=settings.generation_max_output_tokens,
    )


def get_recipe_generator(request: Request) -> Optional[RecipeGenerator]:
    """FastAPI DI 용: app.state 에 보관된 생성기 (없으면 None)"""
    return getattr(request.app.state, "recipe_generator", None)
