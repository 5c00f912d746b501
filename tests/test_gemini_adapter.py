"""Gemini 어댑터: httpx MockTransport 로 응답/오류 매핑 확인"""
import json

import httpx
import pytest

from common.errors import RecipeGenerationError
from services.recipe.utils.gemini_adapter import GeminiTextGenerator


def make_generator(handler) -> GeminiTextGenerator:
    return GeminiTextGenerator(
        api_key="test-key",
        model="gemini-test",
        api_base="https://gemini.test/v1beta/",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


async def test_generate_text_joins_candidate_parts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": '{"title": '}, {"text": '"Rice"}'}]}}]},
        )

    text = await make_generator(handler).generate_text("make rice", 0.9, 512)

    assert text == '{"title": "Rice"}'
    assert seen["url"].startswith("https://gemini.test/v1beta/models/gemini-test:generateContent")
    assert "key=test-key" in seen["url"]
    assert seen["body"]["generationConfig"] == {"temperature": 0.9, "maxOutputTokens": 512}
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "make rice"


async def test_server_error_is_mapped_to_generation_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="overloaded")

    with pytest.raises(RecipeGenerationError, match="503"):
        await make_generator(handler).generate_text("make rice", 0.9, 512)


async def test_timeout_is_mapped_to_generation_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(RecipeGenerationError):
        await make_generator(handler).generate_text("make rice", 0.9, 512)


@pytest.mark.parametrize(
    "payload",
    [
        {"candidates": []},
        {},
        {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
    ],
)
async def test_empty_candidates_are_mapped_to_generation_error(payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    with pytest.raises(RecipeGenerationError):
        await make_generator(handler).generate_text("make rice", 0.9, 512)


async def test_non_json_body_is_mapped_to_generation_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(RecipeGenerationError):
        await make_generator(handler).generate_text("make rice", 0.9, 512)
