"""
테스트 공용 픽스처
- SQLite 인메모리 DB (StaticPool 로 커넥션 하나 공유)
- 텍스트 생성기는 응답을 미리 지정하는 가짜 구현으로 교체
"""
import json
from typing import List, Optional, Union

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from common.config import Settings
from common.database.recipe_db import RecipeDatabase
from common.errors import RecipeGenerationError
from gateway.main import create_app
from services.recipe.utils.ports import TextGeneratorPort
from services.recipe.utils.recipe_generator import RecipeGenerator


class ScriptedTextGenerator(TextGeneratorPort):
    """미리 넣어둔 응답(문자열 또는 예외)을 순서대로 반환"""

    def __init__(self, responses: Optional[List[Union[str, Exception]]] = None):
        self.responses = list(responses or [])
        self.calls = []

    async def generate_text(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        self.calls.append({"prompt": prompt, "temperature": temperature})
        if not self.responses:
            raise RecipeGenerationError("준비된 응답이 없습니다.")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def recipe_json(**overrides) -> str:
    data = {
        "title": "Generated Dish",
        "description": "A generated recipe.",
        "cuisine": "american",
        "servings": 2,
        "prepTime": 10,
        "cookTime": 20,
        "difficulty": "easy",
        "ingredients": ["1 cup rice"],
        "instructions": ["Cook the rice.", "Serve."],
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
async def database():
    db = RecipeDatabase(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.SessionLocal() as db:
        yield db


@pytest.fixture
def text_generator():
    return ScriptedTextGenerator()


@pytest.fixture
def app(database, text_generator):
    settings = Settings(_env_file=None, gemini_api_key=None)
    return create_app(
        settings=settings,
        database=database,
        recipe_generator=RecipeGenerator(text_generator, timeout=5.0),
    )


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def save_favorite(client):
    """POST /api/recipes/save-favorite 호출 헬퍼"""

    async def _save(title: str, ingredients: List[str], device_id: Optional[str] = None, **recipe_fields):
        body = {
            "recipe": {"title": title, "ingredients": ingredients, "instructions": ["Cook.", "Serve."], **recipe_fields},
            "rating": 5,
        }
        if device_id is not None:
            body["deviceId"] = device_id
        response = await client.post("/api/recipes/save-favorite", json=body)
        assert response.status_code == 200, response.text
        return response.json()

    return _save
