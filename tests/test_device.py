"""/api/devices: 조회 이력, 프리미엄 상태, 기기 ID 이전 + 헬스체크"""
from common.dependencies import ClaimedDevice, claim_device
from services.recipe.crud.recipe_rating_crud import record_rating, record_view


def test_claim_device_ignores_blank_values():
    assert claim_device(None) is None
    assert claim_device("   ") is None
    assert claim_device(" abc ") == ClaimedDevice("abc")


async def test_health_and_root(client):
    health = await client.get("/health")
    root = await client.get("/")

    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert "timestamp" in health.json()
    assert root.json()["name"]


async def test_device_views_after_match(client, app, save_favorite):
    app.state.recipe_generator = None
    saved = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])
    await client.post("/api/recipes/match", json={"ingredients": ["broth", "carrots"], "deviceId": "d1"})

    response = await client.get("/api/devices/d1/views")

    assert response.status_code == 200
    body = response.json()
    assert body["deviceId"] == "d1"
    assert body["viewCount"] == 1
    assert body["views"][0]["recipeId"] == saved["recipeId"]
    assert body["views"][0]["title"] == "Test Soup"
    assert body["views"][0]["rating"] is None


async def test_premium_status_roundtrip(client):
    before = await client.get("/api/devices/d1/premium")
    saved = await client.post("/api/devices/d1/premium", json={"isPremium": True, "purchaseToken": "tok-1"})
    after = await client.get("/api/devices/d1/premium")

    assert before.json()["isPremium"] is False
    assert saved.status_code == 200
    assert saved.json()["isPremium"] is True
    assert after.json()["isPremium"] is True
    assert after.json()["purchaseDate"] is not None


async def test_repeated_premium_post_keeps_first_purchase_date(client):
    first = await client.post("/api/devices/d1/premium", json={"isPremium": True, "purchaseToken": "tok-1"})
    again = await client.post("/api/devices/d1/premium", json={"isPremium": True, "purchaseToken": "tok-2"})

    assert again.json()["isPremium"] is True
    assert again.json()["purchaseDate"] == first.json()["purchaseDate"]


async def test_premium_can_be_revoked(client):
    await client.post("/api/devices/d1/premium", json={"isPremium": True})
    revoked = await client.post("/api/devices/d1/premium", json={"isPremium": False})

    assert revoked.json()["isPremium"] is False
    assert revoked.json()["purchaseDate"] is None


async def test_migrate_moves_views_ratings_and_premium(client, app, save_favorite, session):
    app.state.recipe_generator = None
    soup = await save_favorite("Test Soup", ["2 cups broth", "1 cup carrots"])
    stew = await save_favorite("Test Stew", ["1 lb beef", "2 cups potatoes"])
    await record_rating(session, soup["recipeId"], ClaimedDevice("old"), 5)
    await record_view(session, stew["recipeId"], ClaimedDevice("old"))
    await record_view(session, soup["recipeId"], ClaimedDevice("new"))
    await session.commit()
    await client.post("/api/devices/old/premium", json={"isPremium": True})

    response = await client.post("/api/devices/migrate", json={"oldDeviceId": "old", "newDeviceId": "new"})

    assert response.status_code == 200
    body = response.json()
    assert body["viewsMoved"] == 1
    assert body["viewsMerged"] == 1
    assert body["premiumMoved"] is True

    old_views = (await client.get("/api/devices/old/views")).json()
    new_views = (await client.get("/api/devices/new/views")).json()
    assert old_views["viewCount"] == 0
    assert sorted(v["recipeId"] for v in new_views["views"]) == sorted([soup["recipeId"], stew["recipeId"]])
    assert {v["recipeId"]: v["rating"] for v in new_views["views"]}[soup["recipeId"]] == 5

    detail = (await client.get(f"/api/recipes/{soup['recipeId']}")).json()["recipe"]
    assert detail["rating"] == 5.0
    assert detail["ratingCount"] == 1

    assert (await client.get("/api/devices/new/premium")).json()["isPremium"] is True
    assert (await client.get("/api/devices/old/premium")).json()["isPremium"] is False


async def test_migrate_moves_submitted_recipes(client, app, save_favorite):
    app.state.recipe_generator = None
    await save_favorite("Tomato Pasta", ["1 lb pasta", "2 cups tomatoes"], device_id="old")

    response = await client.post("/api/devices/migrate", json={"oldDeviceId": "old", "newDeviceId": "new"})
    match = await client.post("/api/recipes/match", json={"ingredients": ["pasta", "tomatoes"], "deviceId": "new"})

    assert response.json()["recipesMoved"] == 1
    assert match.json() == {"found": False}


async def test_migrate_requires_both_ids(client):
    response = await client.post("/api/devices/migrate", json={"oldDeviceId": "old", "newDeviceId": "  "})

    assert response.status_code == 400
