# -*- coding: utf-8 -*-
"""
Recipe 서비스 유틸리티 모듈
"""

from .ingredient_normalizer import (
    ParsedIngredient,
    core_ingredient_key,
    ingredient_key,
    parse_ingredient,
)
from .ports import RecipeMatcherPort, TextGeneratorPort
from .recipe_generator import RecipeGenerator, create_recipe_generator, get_recipe_generator

__all__ = [
    "ParsedIngredient",
    "core_ingredient_key",
    "ingredient_key",
    "parse_ingredient",
    "RecipeMatcherPort",
    "TextGeneratorPort",
    "RecipeGenerator",
    "create_recipe_generator",
    "get_recipe_generator",
]
