"""POST /api/recipes/{id}/rate 및 평점 집계/첫 평가자 규칙"""
from sqlalchemy import select

from common.dependencies import ClaimedDevice
from scripts.seed_recipes import seed_recipes
from services.recipe.crud.recipe_rating_crud import record_rating
from services.recipe.models.core_model import Recipe


async def rate(client, recipe_id, rating, device_id):
    return await client.post(f"/api/recipes/{recipe_id}/rate", json={"rating": rating, "deviceId": device_id})


async def test_rating_aggregate_is_mean_of_device_ratings(client, save_favorite):
    saved = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])
    recipe_id = saved["recipeId"]

    await rate(client, recipe_id, 5, "d1")
    await rate(client, recipe_id, 5, "d2")
    response = await rate(client, recipe_id, 4, "d3")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["recipeId"] == recipe_id
    assert body["averageRating"] == 4.67
    assert body["ratingCount"] == 3


async def test_same_device_rating_replaces_previous(client, save_favorite):
    saved = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])
    recipe_id = saved["recipeId"]

    await rate(client, recipe_id, 5, "d1")
    response = await rate(client, recipe_id, 1, "d1")

    assert response.json()["averageRating"] == 1.0
    assert response.json()["ratingCount"] == 1

    detail = await client.get(f"/api/recipes/{recipe_id}")
    assert detail.json()["recipe"]["rating"] == 1.0
    assert detail.json()["recipe"]["ratingCount"] == 1


async def test_rating_outside_range_is_rejected(client, save_favorite):
    saved = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])

    too_high = await rate(client, saved["recipeId"], 6, "d1")
    too_low = await rate(client, saved["recipeId"], 0, "d1")

    assert too_high.status_code == 400
    assert too_low.status_code == 400


async def test_rating_unknown_recipe_returns_404(client):
    response = await rate(client, 9999, 5, "d1")

    assert response.status_code == 404


async def test_first_five_star_rater_becomes_submitter(session):
    await seed_recipes(session)
    recipe = (
        await session.execute(select(Recipe).where(Recipe.title == "Simple Beef Tacos"))
    ).scalars().one()
    assert recipe.submitted_by is None

    await record_rating(session, recipe.recipe_id, ClaimedDevice("fan"), 5)
    await record_rating(session, recipe.recipe_id, ClaimedDevice("late"), 5)
    await session.commit()

    submitted_by = (
        await session.execute(select(Recipe.submitted_by).where(Recipe.recipe_id == recipe.recipe_id))
    ).scalar_one()
    assert submitted_by == "fan"


async def test_first_rating_below_five_does_not_assign_submitter(session):
    await seed_recipes(session)
    recipe_id = (
        await session.execute(select(Recipe.recipe_id).where(Recipe.title == "One-Pot Pasta Primavera"))
    ).scalar_one()

    await record_rating(session, recipe_id, ClaimedDevice("critic"), 4)
    await record_rating(session, recipe_id, ClaimedDevice("fan"), 5)
    await session.commit()

    submitted_by = (
        await session.execute(select(Recipe.submitted_by).where(Recipe.recipe_id == recipe_id))
    ).scalar_one()
    assert submitted_by is None


async def test_top_community_lists_rated_user_recipes(client, save_favorite, session):
    await seed_recipes(session)
    await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"], device_id="d1")
    unrated = await save_favorite("Quiet Salad", ["2 cups lettuce", "1 cup cucumber"])
    seeded_id = (
        await session.execute(select(Recipe.recipe_id).where(Recipe.title == "Simple Beef Tacos"))
    ).scalar_one()
    await session.commit()
    await rate(client, seeded_id, 5, "d2")

    response = await client.get("/api/recipes/top-community", params={"limit": 5})

    assert response.status_code == 200
    recipes = response.json()["recipes"]
    assert [r["title"] for r in recipes] == ["Test Soup"]
    assert recipes[0]["fiveStarCount"] == 1
    assert recipes[0]["averageRating"] == 5.0
    assert unrated["recipeId"] not in [r["id"] for r in recipes]


async def test_top_community_limit_is_validated(client):
    response = await client.get("/api/recipes/top-community", params={"limit": 0})

    assert response.status_code == 400
