"""
API tests for the favorites endpoints.
"""
import pytest
from fastapi import status
from httpx import AsyncClient

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


@pytest.mark.asyncio
async def test_favorites_require_user(async_client: AsyncClient):
    """Test requests without X-User-Id are rejected."""
    response = await async_client.get("/api/favorites")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = await async_client.post("/api/favorites/L1/toggle", headers={"X-User-Id": "  "})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_empty_favorites(async_client: AsyncClient):
    response = await async_client.get("/api/favorites", headers=USER)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"favorites": []}


@pytest.mark.asyncio
async def test_toggle_adds_then_removes(async_client: AsyncClient):
    """Test toggling twice returns the property to its original state."""
    response = await async_client.post("/api/favorites/L1/toggle", headers=USER)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"property_id": "L1", "is_favorite": True, "favorites": ["L1"]}

    response = await async_client.post("/api/favorites/L2/toggle", headers=USER)
    assert response.json()["favorites"] == ["L1", "L2"]

    response = await async_client.post("/api/favorites/L1/toggle", headers=USER)
    assert response.json() == {"property_id": "L1", "is_favorite": False, "favorites": ["L2"]}

    response = await async_client.get("/api/favorites", headers=USER)
    assert response.json() == {"favorites": ["L2"]}


@pytest.mark.asyncio
async def test_favorite_status(async_client: AsyncClient):
    await async_client.post("/api/favorites/L1/toggle", headers=USER)

    response = await async_client.get("/api/favorites/L1", headers=USER)
    assert response.json() == {"property_id": "L1", "is_favorite": True}

    response = await async_client.get("/api/favorites/L9", headers=USER)
    assert response.json() == {"property_id": "L9", "is_favorite": False}


@pytest.mark.asyncio
async def test_favorites_are_per_user(async_client: AsyncClient):
    """Test one user's favorites are not visible to another."""
    await async_client.post("/api/favorites/L1/toggle", headers=USER)

    response = await async_client.get("/api/favorites", headers=OTHER_USER)
    assert response.json() == {"favorites": []}

    response = await async_client.get("/api/favorites/L1", headers=OTHER_USER)
    assert response.json()["is_favorite"] is False


@pytest.mark.asyncio
async def test_cross_origin_preflight_allows_user_header(async_client: AsyncClient):
    """Test a browser on another origin may send X-User-Id."""
    response = await async_client.options(
        "/api/favorites/L1/toggle",
        headers={
            "Origin": "https://listings.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "x-user-id",
        },
    )

    assert response.status_code == status.HTTP_200_OK
    allowed = [h.strip().lower() for h in response.headers["access-control-allow-headers"].split(",")]
    assert "x-user-id" in allowed
    assert "POST" in response.headers["access-control-allow-methods"]
