"""Core recipe models (RECIPE, INGREDIENT, RECIPE_INGREDIENT, RECIPE_INSTRUCTION, RECIPE_NUTRITION)."""

from enum import Enum

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func
)
from sqlalchemy.orm import relationship

from common.database.base_postgres import PostgresBase


class RecipeDifficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class RecipeSource(str, Enum):
    database = "database"
    user_generated = "user_generated"


class Recipe(PostgresBase):
    """RECIPE 테이블의 ORM 모델."""

    __tablename__ = "RECIPE"

    recipe_id = Column("RECIPE_ID", Integer, primary_key=True, autoincrement=True)
    title = Column("TITLE", String(200), nullable=False, unique=True, comment="레시피 제목(중복 판정 키, 대소문자 구분)")
    description = Column("DESCRIPTION", Text, nullable=True)
    cuisine = Column("CUISINE", String(50), nullable=True)
    servings = Column("SERVINGS", Integer, nullable=False, default=4)
    prep_time = Column("PREP_TIME", Integer, nullable=False, default=30, comment="준비 시간(분)")
    cook_time = Column("COOK_TIME", Integer, nullable=False, default=30, comment="조리 시간(분)")
    difficulty = Column("DIFFICULTY", String(10), nullable=False, default=RecipeDifficulty.medium.value)
    source = Column("SOURCE", String(20), nullable=False, default=RecipeSource.database.value)
    average_rating = Column("AVERAGE_RATING", Float, nullable=False, default=0.0, comment="평점 평균(RECIPE_VIEW 집계값)")
    rating_count = Column("RATING_COUNT", Integer, nullable=False, default=0, comment="평점 개수(RECIPE_VIEW 집계값)")
    submitted_by = Column("SUBMITTED_BY", String(255), nullable=True, index=True, comment="등록 기기 ID")
    created_at = Column("CREATED_AT", DateTime, nullable=False, server_default=func.now())

    ingredient_lines = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.line_id",
        lazy="select",
    )
    instructions = relationship(
        "RecipeInstruction",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeInstruction.step_number",
        lazy="select",
    )
    nutrition = relationship(
        "RecipeNutrition",
        back_populates="recipe",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="select",
    )


class Ingredient(PostgresBase):
    """INGREDIENT 테이블의 ORM 모델. NAME 은 정규화된 핵심 재료명."""

    __tablename__ = "INGREDIENT"

    ingredient_id = Column("INGREDIENT_ID", Integer, primary_key=True, autoincrement=True)
    name = Column("NAME", String(100), nullable=False, unique=True)
    category = Column("CATEGORY", String(50), nullable=False, default="other")


class RecipeIngredient(PostgresBase):
    """RECIPE_INGREDIENT 테이블의 ORM 모델 (레시피-재료 연결 + 원문 라인)."""

    __tablename__ = "RECIPE_INGREDIENT"

    line_id = Column("LINE_ID", Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(
        "RECIPE_ID",
        Integer,
        ForeignKey("RECIPE.RECIPE_ID", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ingredient_id = Column(
        "INGREDIENT_ID",
        Integer,
        ForeignKey("INGREDIENT.INGREDIENT_ID", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column("AMOUNT", Float, nullable=True)
    unit = Column("UNIT", String(30), nullable=True)
    full_text = Column("FULL_TEXT", String(500), nullable=False, comment="화면 표시용 원문")
    is_required = Column("IS_REQUIRED", Boolean, nullable=False, default=True)
    preparation = Column("PREPARATION", String(200), nullable=True)

    recipe = relationship("Recipe", back_populates="ingredient_lines", lazy="select")
    ingredient = relationship("Ingredient", lazy="joined")


class RecipeInstruction(PostgresBase):
    """RECIPE_INSTRUCTION 테이블의 ORM 모델."""

    __tablename__ = "RECIPE_INSTRUCTION"
    __table_args__ = (
        UniqueConstraint("RECIPE_ID", "STEP_NUMBER", name="uq_recipe_instruction_step"),
    )

    instruction_id = Column("INSTRUCTION_ID", Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(
        "RECIPE_ID",
        Integer,
        ForeignKey("RECIPE.RECIPE_ID", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
    )
    step_number = Column("STEP_NUMBER", Integer, nullable=False, comment="1부터 시작")
    instruction = Column("INSTRUCTION", Text, nullable=False)

    recipe = relationship("Recipe", back_populates="instructions", lazy="select")


class RecipeNutrition(PostgresBase):
    """RECIPE_NUTRITION 테이블의 ORM 모델 (레시피당 최대 1행)."""

    __tablename__ = "RECIPE_NUTRITION"

    recipe_id = Column(
        "RECIPE_ID",
        Integer,
        ForeignKey("RECIPE.RECIPE_ID", onupdate="CASCADE", ondelete="CASCADE"),
        primary_key=True,
    )
    calories = Column("CALORIES", Float, nullable=False, default=0)
    protein = Column("PROTEIN", Float, nullable=False, default=0)
    carbs = Column("CARBS", Float, nullable=False, default=0)
    fat = Column("FAT", Float, nullable=False, default=0)
    fiber = Column("FIBER", Float, nullable=False, default=0)
    sugar = Column("SUGAR", Float, nullable=False, default=0)
    sodium = Column("SODIUM", Float, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="nutrition", lazy="select")
