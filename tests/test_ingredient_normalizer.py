"""재료 파싱/핵심 키 정규화 및 부가 값 파싱 테스트"""
import pytest

from services.recipe.utils.ingredient_normalizer import (
    core_ingredient_key,
    ingredient_key,
    parse_amount,
    parse_ingredient,
)
from services.recipe.utils.recipe_values import (
    normalize_difficulty,
    parse_nutrition,
    parse_servings,
    parse_time_minutes,
)


def test_parse_amount_unit_and_name():
    parsed = parse_ingredient("2 cups rice")
    assert parsed.amount == 2.0
    assert parsed.unit == "cups"
    assert parsed.name == "rice"
    assert parsed.preparation is None


def test_parse_fraction_and_preparation():
    parsed = parse_ingredient("1/2 lb chicken breast, diced")
    assert parsed.amount == 0.5
    assert parsed.unit == "lb"
    assert parsed.name == "chicken breast"
    assert parsed.preparation == "diced"


def test_parse_without_unit_does_not_steal_letters():
    parsed = parse_ingredient("2 lemons")
    assert parsed.amount == 2.0
    assert parsed.unit is None
    assert parsed.name == "lemons"


def test_parse_failure_keeps_trimmed_text():
    parsed = parse_ingredient("  Salt to taste ")
    assert parsed.amount is None
    assert parsed.unit is None
    assert parsed.name == "Salt to taste"


def test_parse_amount_zero_denominator():
    assert parse_amount("1/0") is None
    assert parse_amount("1.5") == 1.5


@pytest.mark.parametrize(
    "name, expected",
    [
        ("chicken breast", "chicken"),
        ("chicken thighs", "chicken"),
        ("Fresh  Chicken Breast", "chicken"),
        ("Basmati Rice", "rice"),
        ("diced tomatoes", "tomatoes"),
        ("ground beef", "beef"),
        ("groundnut oil", "groundnut oil"),
    ],
)
def test_core_ingredient_key(name, expected):
    assert core_ingredient_key(name) == expected


def test_descriptor_only_name_falls_back_to_lowered_text():
    assert core_ingredient_key("Fresh") == "fresh"
    assert core_ingredient_key("  Chopped ") == "chopped"
    assert ingredient_key("1 cup fresh") == ingredient_key("Fresh") == "fresh"


def test_core_key_is_case_and_whitespace_insensitive():
    assert core_ingredient_key("  BROTH ") == core_ingredient_key("broth")
    assert ingredient_key("2 cups broth") == ingredient_key("Broth") == "broth"


@pytest.mark.parametrize(
    "value, expected",
    [(15, 15), ("15", 15), ("1h 15m", 75), ("45 minutes", 45), ("1 hour", 60), (None, 30), ("soon", 30), (0, 30)],
)
def test_parse_time_minutes(value, expected):
    assert parse_time_minutes(value) == expected


def test_non_finite_and_huge_numbers_are_bounded():
    assert parse_time_minutes(float("inf")) == 30
    assert parse_time_minutes(float("nan")) == 30
    assert parse_time_minutes(10 ** 30) == 7 * 24 * 60
    assert parse_time_minutes("99999999999999999999") == 7 * 24 * 60
    assert parse_servings(float("inf")) == 4
    assert parse_servings(10 ** 30) == 100
    assert parse_nutrition({"calories": float("inf"), "fat": 10 ** 400})["calories"] == 0.0
    assert parse_nutrition({"fat": 10 ** 400})["fat"] == 0.0


def test_parse_servings_and_difficulty():
    assert parse_servings("4-6 servings") == 4
    assert parse_servings(None) == 4
    assert normalize_difficulty("HARD") == "hard"
    assert normalize_difficulty("impossible") == "medium"


def test_parse_nutrition_fills_missing_fields():
    nutrition = parse_nutrition({"calories": 420, "protein": "28g", "sodium": "890mg", "fat": "n/a"})
    assert nutrition["calories"] == 420.0
    assert nutrition["protein"] == 28.0
    assert nutrition["sodium"] == 890.0
    assert nutrition["fat"] == 0.0
    assert nutrition["fiber"] == 0.0
    assert set(nutrition) == {"calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium"}
