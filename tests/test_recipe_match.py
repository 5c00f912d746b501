"""POST /api/recipes/match: 정확 일치 매칭, 기기별 제외, 조회 기록"""
from sqlalchemy import func, select

from common.dependencies import ClaimedDevice
from services.recipe.crud.recipe_rating_crud import record_rating, record_view
from services.recipe.models.rating_model import RecipeView


async def match(client, ingredients, device_id=None, **extra):
    body = {"ingredients": ingredients, **extra}
    if device_id is not None:
        body["deviceId"] = device_id
    return await client.post("/api/recipes/match", json=body)


async def test_saved_recipe_is_matched_by_core_ingredients(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    response = await match(client, ["broth", "carrots"], device_id="d1")

    assert response.status_code == 200
    body = response.json()
    assert body["found"] is True
    assert body["fromDatabase"] is True
    assert body["recipe"]["title"] == "Test Soup"
    assert body["recipe"]["ingredients"] == ["2 cups broth", "1 cup carrots"]
    assert body["recipe"]["prepTime"] == 30


async def test_second_request_from_same_device_excludes_seen_recipe(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    first = await match(client, ["broth", "carrots"], device_id="d1")
    second = await match(client, ["broth", "carrots"], device_id="d1")
    other_device = await match(client, ["broth", "carrots"], device_id="d2")

    assert first.json()["found"] is True
    assert second.status_code == 200
    assert second.json() == {"found": False}
    assert other_device.json()["recipe"]["title"] == "Test Soup"


async def test_match_is_case_and_whitespace_insensitive(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    response = await match(client, ["  BROTH ", "Carrots"])

    assert response.json()["found"] is True


async def test_subset_or_superset_never_matches(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    subset = await match(client, ["broth"])
    superset = await match(client, ["broth", "carrots", "celery"])

    assert subset.json() == {"found": False}
    assert superset.json() == {"found": False}


async def test_alias_ingredients_match_canonical_recipe(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Chicken Rice", ["1 lb chicken breast, diced", "2 cups white rice"])

    response = await match(client, ["chicken thighs", "jasmine rice"])

    assert response.json()["recipe"]["title"] == "Chicken Rice"


async def test_best_rated_recipe_wins_then_next_after_view(client, app, save_favorite, session):
    app.state.recipe_generator = None
    low = await save_favorite("Plain Eggs", ["2 eggs", "1 tbsp butter"])
    high = await save_favorite("Buttery Eggs", ["3 eggs", "2 tbsp butter"])
    await record_rating(session, low["recipeId"], ClaimedDevice("r1"), 3)
    await record_rating(session, high["recipeId"], ClaimedDevice("r1"), 5)
    await session.commit()

    first = await match(client, ["eggs", "butter"], device_id="d1")
    second = await match(client, ["eggs", "butter"], device_id="d1")

    assert first.json()["recipe"]["title"] == "Buttery Eggs"
    assert second.json()["recipe"]["title"] == "Plain Eggs"


async def test_submitted_recipes_are_excluded_for_submitter(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Tomato Pasta", ["1 lb pasta", "2 cups tomatoes"], device_id="owner")

    own = await match(client, ["pasta", "tomatoes"], device_id="owner")
    other = await match(client, ["pasta", "tomatoes"], device_id="guest")

    assert own.json() == {"found": False}
    assert other.json()["found"] is True


async def test_match_hit_records_single_view(client, app, save_favorite, session):
    app.state.recipe_generator = None
    saved = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    await match(client, ["broth", "carrots"], device_id="d1")
    await record_view(session, saved["recipeId"], ClaimedDevice("d1"))
    await session.commit()

    count = (
        await session.execute(
            select(func.count()).select_from(RecipeView).where(RecipeView.device_id == "d1")
        )
    ).scalar_one()
    assert count == 1


async def test_record_view_is_idempotent(session, client, save_favorite):
    saved = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])
    device = ClaimedDevice("d9")

    assert await record_view(session, saved["recipeId"], device) is True
    assert await record_view(session, saved["recipeId"], device) is False


async def test_empty_ingredients_is_rejected_with_400(client):
    empty = await match(client, [])
    blank = await match(client, ["   "])

    assert empty.status_code == 400
    assert "detail" in empty.json()
    assert blank.status_code == 400


async def test_view_recording_failure_still_returns_match(client, app, save_favorite, session, monkeypatch):
    app.state.recipe_generator = None
    await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    async def failing_record_view(*args, **kwargs):
        raise RuntimeError("view store unavailable")

    monkeypatch.setattr("services.recipe.routers.match_router.record_view", failing_record_view)
    first = await match(client, ["broth", "carrots"], device_id="d1")
    monkeypatch.undo()
    second = await match(client, ["broth", "carrots"], device_id="d1")

    assert first.status_code == 200
    assert first.json()["found"] is True
    assert first.json()["recipe"]["title"] == "Test Soup"
    assert second.json()["found"] is True

    count = (
        await session.execute(
            select(func.count()).select_from(RecipeView).where(RecipeView.device_id == "d1")
        )
    ).scalar_one()
    assert count == 1
