"""
Pytest configuration and fixtures for Realty API tests.
"""
import copy
from typing import Any, AsyncGenerator, Callable, Dict, Generator, List

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from realtyapi import RealtyAPI, create_app
from realtyapi.core.config import Settings

TOKEN_URL = "https://api.realtyfeed.com/auth/token"
PROPERTIES_URL = "https://api.realtyfeed.com/properties"

SAMPLE_LISTINGS: List[Dict[str, Any]] = [
    {
        "id": "L1",
        "list_price": 850000,
        "bedrooms": 3,
        "bathrooms": 2,
        "living_area": 1800,
        "listing_status": "Active",
        "address": {"city": "Irvine", "state": "CA", "postal_code": "92618"},
    },
    {
        "id": "L2",
        "list_price": 1250000,
        "bedrooms": 4,
        "bathrooms": 3,
        "living_area": 2600,
        "listing_status": "Pending",
        "address": {"city": "Irvine", "state": "CA", "postal_code": "92620"},
    },
]


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the environment and any local .env file."""
    values: Dict[str, Any] = {
        "ENV": "test",
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "VITE_CRMLS_CLIENT_ID": "test-client-id",
        "VITE_CRMLS_CLIENT_SECRET": "test-client-secret",
        "VITE_CRMLS_API_KEY": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeCRMLS:
    """Stands in for the upstream CRMLS API behind an ``httpx.MockTransport``.

    Each handler receives the request and returns a fresh response (or
    raises an ``httpx`` transport error).
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.token_handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200,
            json={"access_token": "upstream-access-token", "token_type": "Bearer", "expires_in": 3600},
        )
        self.properties_handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200,
            json={"data": SAMPLE_LISTINGS, "total": 40, "page": 1, "has_more": True},
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        if url == TOKEN_URL:
            return self.token_handler(request)
        if url == PROPERTIES_URL:
            return self.properties_handler(request)
        return httpx.Response(404, json={"error": "not found"})

    def requests_to(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if f"{r.url.scheme}://{r.url.host}{r.url.path}" == url]


@pytest.fixture
def fake_crmls() -> FakeCRMLS:
    return FakeCRMLS()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings


@pytest.fixture
def sample_listings() -> List[Dict[str, Any]]:
    return copy.deepcopy(SAMPLE_LISTINGS)


@pytest.fixture(scope="function")
def app(settings: Settings, fake_crmls: FakeCRMLS) -> RealtyAPI:
    """Create a test application with an in-memory database and a fake upstream."""
    return create_app(settings, upstream_transport=httpx.MockTransport(fake_crmls))


@pytest.fixture(scope="function")
def client(app: RealtyAPI) -> Generator[TestClient, None, None]:
    """Create a test client; entering it runs startup and shutdown."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture(scope="function")
async def async_client(app: RealtyAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async client over ASGI with database tables created."""
    await app.state.db.create_all()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    await app.state.upstream.close()
    await app.state.db.close()
