import httpx
import pytest

from api.main import app
from api.routes import get_engine


@pytest.fixture()
def engine(make_engine, make_item):
    tracks = [make_item(age_days=d, plays=p, owner_id=o) for d, p, o in [(1, 0, 1), (2, 300, 1), (40, 200, 2)]]
    return make_engine(tracks=tracks)


@pytest.fixture()
async def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_listing(client):
    response = await client.get("/api/TRACK/new", params={"limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "new"
    assert body["items"] == [1, 2]
    assert body["total_count"] == 3
    assert body["total_pages"] == 2


async def test_listing_clamps_bad_paging(client):
    response = await client.get("/api/track/trending", params={"page": "-4", "limit": "abc"})

    body = response.json()
    assert response.status_code == 200
    assert (body["page"], body["limit"]) == (0, 20)
    assert body["items"] == [2]


async def test_owner_scoped_listing(client):
    response = await client.get("/api/TRACK/popular", params={"owner_id": 2})
    assert response.json()["items"] == [3]


async def test_unknown_target_type_is_empty(client):
    response = await client.get("/api/VIDEO/new")
    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_unknown_category_is_rejected(client):
    response = await client.get("/api/TRACK/hottest")
    assert response.status_code == 422


async def test_promotion_flow(client):
    response = await client.post(
        "/api/promotions",
        json={"target_type": "TRACK", "target_id": 3, "tier": "premium", "days": 14, "owner_id": 2},
    )
    assert response.status_code == 200
    promotion = response.json()
    assert promotion["tier"] == "premium"
    assert promotion["duration_days"] == 14

    featured = (await client.get("/api/TRACK/featured")).json()
    assert featured["items"] == [3]

    status = (await client.get("/api/promotions/TRACK/3/active")).json()
    assert status["active"] is True
    assert status["active_in_type"] == 1

    mine = (await client.get("/api/promotions/mine", params={"owner_id": 2})).json()
    assert mine["total"] == 1
    assert mine["promotions"][0]["status"] == "active"


@pytest.mark.parametrize(
    "tier,days,expected_days",
    [
        ("gold", "lots", 1),
        (5, 3, 3),
        (None, [7], 1),
    ],
)
async def test_promotion_defaults_bad_tier_and_days(client, tier, days, expected_days):
    response = await client.post(
        "/api/promotions",
        json={"target_type": "TRACK", "target_id": 1, "tier": tier, "days": days},
    )

    assert response.status_code == 200
    promotion = response.json()
    assert promotion["tier"] == "standard"
    assert promotion["duration_days"] == expected_days


async def test_promotion_unknown_type_is_bad_request(client):
    response = await client.post("/api/promotions", json={"target_type": "VIDEO", "target_id": 1})
    assert response.status_code == 400


async def test_status_unknown_type_is_not_found(client):
    response = await client.get("/api/promotions/VIDEO/1/active")
    assert response.status_code == 404


async def test_quote(client):
    body = (await client.get("/api/promotions/quote", params={"tier": "premium", "days": "10"})).json()
    assert body == {"tier": "premium", "days": 10, "price": "30.00"}

    body = (await client.get("/api/promotions/quote", params={"tier": "gold", "days": "500"})).json()
    assert body == {"tier": "standard", "days": 90, "price": "135.00"}


async def test_style_listing(make_engine, make_item):
    tracks = [
        make_item(age_days=2, genre="uk drill"),
        make_item(age_days=1, plays=50, tags="ukdrill"),
        make_item(age_days=1, genre="trap"),
    ]
    app.dependency_overrides[get_engine] = lambda: make_engine(tracks=tracks)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        response = await c.get("/api/track/styles/UK-Drill", params={"limit": "1000"})
    app.dependency_overrides.clear()

    body = response.json()
    assert response.status_code == 200
    assert body["style"] == "uk drill"
    assert body["items"] == [tracks[1].id, tracks[0].id]
    assert body["limit"] == 200
