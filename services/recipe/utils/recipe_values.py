# -*- coding: utf-8 -*-
"""
레시피 부가 값(시간/인분/난이도/영양) 정규화
- 입력 형태가 제각각(숫자, "1h 15m", "28g", None)이라도 에러 없이 기본값으로 수렴
- 무한대/NaN 은 기본값, 비정상적으로 큰 값은 상한으로 자름 (INTEGER 컬럼 보호)
"""
import math
import re
from typing import Any, Dict, Optional

from services.recipe.models.core_model import RecipeDifficulty

DEFAULT_MINUTES = 30
DEFAULT_SERVINGS = 4
MAX_MINUTES = 7 * 24 * 60
MAX_SERVINGS = 100
NUTRITION_FIELDS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")

HOURS_RX = re.compile(r"(\d+)\s*h", re.IGNORECASE)
MINUTES_RX = re.compile(r"(\d+)\s*m", re.IGNORECASE)
LEADING_INT_RX = re.compile(r"\d+")
NON_NUMERIC_RX = re.compile(r"[^\d.]")


def _positive_int(value: Any, default: int, upper: int) -> int:
    """숫자 → 1..upper 범위 int, 0 이하/무한대/NaN 이면 default"""
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if value <= 0:
        return default
    return min(int(value), upper) or default


def parse_time_minutes(value: Any, default: int = DEFAULT_MINUTES) -> int:
    """
    조리/준비 시간 → 분
    - 15 → 15, "15" → 15, "1h 15m" → 75, "45 minutes" → 45, "1 hour" → 60
    - 해석 불가/0 이면 default
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return _positive_int(value, default, MAX_MINUTES)

    text = str(value).strip()
    if text.isdigit():
        return _positive_int(int(text), default, MAX_MINUTES)

    total = 0
    hours = HOURS_RX.search(text)
    minutes = MINUTES_RX.search(text)
    if hours:
        total += int(hours.group(1)) * 60
    if minutes:
        total += int(minutes.group(1))
    return _positive_int(total, default, MAX_MINUTES)


def parse_servings(value: Any, default: int = DEFAULT_SERVINGS) -> int:
    """ "4", 4, "4 servings", "4-6" → 4 """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return _positive_int(value, default, MAX_SERVINGS)
    match = LEADING_INT_RX.search(str(value))
    if not match:
        return default
    return _positive_int(int(match.group(0)), default, MAX_SERVINGS)


def normalize_difficulty(value: Any) -> str:
    """easy/medium/hard 이외의 값은 medium"""
    text = str(value or "").strip().lower()
    try:
        return RecipeDifficulty(text).value
    except ValueError:
        return RecipeDifficulty.medium.value


def parse_nutrition_value(value: Any) -> float:
    """ 420 → 420.0, "28g" → 28.0, "890mg" → 890.0, None/해석 불가/무한대 → 0 """
    if value is None or isinstance(value, bool):
        return 0.0
    raw = value if isinstance(value, (int, float)) else NON_NUMERIC_RX.sub("", str(value))
    try:
        number = float(raw)
    except (ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_nutrition(data: Optional[Dict[str, Any]]) -> Dict[str, float]:
    """영양 정보 dict → 7개 필드가 모두 채워진 float dict (없는 값은 0)"""
    data = data or {}
    return {field: parse_nutrition_value(data.get(field)) for field in NUTRITION_FIELDS}
