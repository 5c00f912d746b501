# -*- coding: utf-8 -*-
"""
재료 문자열 파싱 및 **핵심 재료 키**(core key) 정규화 모듈

핵심 아이디어
- "2 cups rice", "1/2 lb chicken breast, diced" 같은 자유 입력을
  분량(amount) / 단위(unit) / 재료명(name) / 손질법(preparation) 으로 분리
- 재료명은 소문자화 → 수식어(fresh, diced ...) 단어 단위 제거 → 공백 정리 → 별칭 치환
- 저장 시점(재료 행 생성)과 조회 시점(매칭 쿼리)이 **반드시 같은 함수**를 써야 매칭이 깨지지 않음
- 파싱 실패는 에러가 아님: 분량/단위 없이 원문(trim)을 재료명으로 사용

참고:
- ALIAS_MAP 은 "chicken breast → chicken" 처럼 **정확 일치** 치환만 넣음 (부분 문자열 치환 금지)
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Set

# ----- 도메인 사전 -----
# 부피/무게/개수 단위 및 약어 (복수형 포함)
UNIT_VOCAB: Set[str] = {
    # 부피
    "cup", "cups", "tablespoon", "tablespoons", "tbsp", "teaspoon", "teaspoons", "tsp",
    "liter", "liters", "l", "milliliter", "milliliters", "ml",
    "pint", "pints", "pt", "quart", "quarts", "qt", "gallon", "gallons",
    # 무게
    "pound", "pounds", "lb", "lbs", "ounce", "ounces", "oz",
    "gram", "grams", "g", "kilogram", "kilograms", "kg",
    # 개수
    "piece", "pieces", "clove", "cloves", "can", "cans", "package", "packages",
    "bunch", "bunches", "slice", "slices", "stalk", "stalks", "pinch", "pinches",
    "dash", "dashes",
}

# 재료 자체가 아닌 상태/손질 수식어: 단어 단위로 제거
DESCRIPTOR_WORDS: Set[str] = {
    "fresh", "dried", "frozen", "canned", "cooked", "raw",
    "whole", "ground", "minced", "diced", "chopped", "sliced",
}

# 화이트리스트 별칭: 수식어 제거 후 결과와 정확히 일치할 때만 치환
ALIAS_MAP: Dict[str, str] = {
    "chicken breast": "chicken",
    "chicken breasts": "chicken",
    "chicken thighs": "chicken",
    "chicken wings": "chicken",
    "beef steak": "beef",
    "white rice": "rice",
    "brown rice": "rice",
    "jasmine rice": "rice",
    "basmati rice": "rice",
}

# ---- 정규식 패턴 모음 ----
# 긴 단위가 먼저 시도되도록 정렬, 단위 뒤는 단어 경계 필수 ("2 lemons" 의 l 오인 방지)
_UNIT_ALT = "|".join(sorted((re.escape(u) for u in UNIT_VOCAB), key=len, reverse=True))
INGREDIENT_RX = re.compile(
    r"^\s*(?P<amount>\d+(?:/\d+)?(?:\.\d+)?)"
    rf"\s*(?:(?P<unit>{_UNIT_ALT})\b\.?)?"
    r"\s*(?P<name>[^,]+?)"
    r"(?:\s*,\s*(?P<preparation>.+?))?\s*$",
    re.IGNORECASE,
)
DESCRIPTOR_RX = re.compile(r"\b(?:" + "|".join(sorted(DESCRIPTOR_WORDS)) + r")\b")
SPACE_RX = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedIngredient:
    """파싱 결과 (분량/단위/손질법은 없을 수 있음)"""

    amount: Optional[float]
    unit: Optional[str]
    name: str
    preparation: Optional[str] = None


def parse_amount(text: str) -> Optional[float]:
    """
    "2", "1.5", "1/2" → float
    - 분모가 0 이면 None
    """
    if "/" in text:
        numerator, denominator = text.split("/", 1)
        try:
            denominator_value = float(denominator)
            if denominator_value == 0:
                return None
            return float(numerator) / denominator_value
        except ValueError:
            return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_ingredient(text: str) -> ParsedIngredient:
    """
    재료 한 줄 파싱
    - 예: "2 cups rice"               → (2.0, "cups", "rice", None)
    - 예: "3 tomatoes, chopped"        → (3.0, None, "tomatoes", "chopped")
    - 예: "Salt to taste"              → (None, None, "Salt to taste", None)
    """
    raw = (text or "").strip()
    match = INGREDIENT_RX.match(raw)
    if not match:
        return ParsedIngredient(amount=None, unit=None, name=raw, preparation=None)

    unit = match.group("unit")
    preparation = match.group("preparation")
    return ParsedIngredient(
        amount=parse_amount(match.group("amount")),
        unit=unit.lower() if unit else None,
        name=match.group("name").strip(),
        preparation=preparation.strip() if preparation else None,
    )


def normalize_whitespace(text: str) -> str:
    """연속 공백을 하나로 줄이고 앞뒤 공백 제거"""
    return SPACE_RX.sub(" ", text or "").strip()


def core_ingredient_key(name: str) -> str:
    """
    재료명 → 핵심 재료 키
    - 소문자화 → 수식어 단어 제거 → 공백 정리 → 별칭 치환(정확 일치)
    - 수식어만 남는 이름("Fresh", "chopped")은 소문자 원문을 키로 사용
    - 순수 함수: 같은 입력이면 항상 같은 출력
    """
    lowered = normalize_whitespace((name or "").lower())
    cleaned = normalize_whitespace(DESCRIPTOR_RX.sub(" ", lowered)) or lowered
    return ALIAS_MAP.get(cleaned, cleaned)


def ingredient_key(text: str) -> str:
    """자유 입력 재료 한 줄 → 핵심 재료 키 (파싱 + 정규화)"""
    return core_ingredient_key(parse_ingredient(text).name)
