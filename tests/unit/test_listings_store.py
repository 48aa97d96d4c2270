"""
Unit tests for the listings store.
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest

from realtyapi.client import (
    CRMLSService,
    CRMLSServiceError,
    ListingsStore,
    NetworkServiceError,
    SortOption,
)
from realtyapi.client.store import INITIAL_SEARCH_PARAMS
from realtyapi.schemas.crmls import ListingsResponse, Property


def _listing(listing_id: str, **fields: Any) -> Property:
    return Property(id=listing_id, **fields)


def _page(ids: List[str], **fields: Any) -> ListingsResponse:
    return ListingsResponse(data=[_listing(i) for i in ids], **fields)


class FakeService:
    """Returns queued responses (or raises queued errors) in order."""

    def __init__(self) -> None:
        self.responses: List[Any] = []
        self.properties: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []

    async def get_listings(self, params: Optional[Dict[str, Any]] = None) -> ListingsResponse:
        self.calls.append(dict(params or {}))
        await asyncio.sleep(0)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def get_property(self, property_id: str) -> Property:
        result = self.properties[property_id]
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(service, clock) -> ListingsStore:
    return ListingsStore(service, clock=clock)


def test_initial_state(store: ListingsStore):
    state = store.state
    assert state.listings == []
    assert state.is_loading is False
    assert state.error is None
    assert state.last_fetched is None
    assert state.total_count == 0
    assert state.current_page == 1
    assert state.has_more is True
    assert state.search_params == {"page": 1, "per_page": 50, "sort_by": "list_price", "sort_order": "desc"}


class TestFetchListings:
    @pytest.mark.asyncio
    async def test_success(self, store, service, clock):
        service.responses.append(_page(["a", "b"], total=120, page=1, has_more=True))

        await store.fetch_listings({"city": "Irvine"})

        state = store.state
        assert [p.id for p in state.listings] == ["a", "b"]
        assert state.total_count == 120
        assert state.current_page == 1
        assert state.has_more is True
        assert state.last_fetched == clock.now
        assert state.is_loading is False
        assert state.error is None
        assert state.search_params["city"] == "Irvine"
        assert service.calls == [{**INITIAL_SEARCH_PARAMS, "city": "Irvine"}]

    @pytest.mark.asyncio
    async def test_missing_fields_fall_back(self, store, service):
        """Test total falls back to the page length and has_more to a full page."""
        service.responses.append(_page(["a", "b"]))

        await store.fetch_listings({"per_page": 2})

        assert store.state.total_count == 2
        assert store.state.current_page == 1
        assert store.state.has_more is True

    @pytest.mark.asyncio
    async def test_short_page_means_no_more(self, store, service):
        service.responses.append(_page(["a"]))

        await store.fetch_listings()

        assert store.state.has_more is False

    @pytest.mark.asyncio
    async def test_skipped_while_loading(self, store, service):
        store.set_loading(True)

        await store.fetch_listings()

        assert service.calls == []

    @pytest.mark.asyncio
    async def test_concurrent_fetches_issue_one_request(self, store, service):
        service.responses.append(_page(["a"]))

        await asyncio.gather(store.fetch_listings(), store.fetch_listings())

        assert len(service.calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error, message", [
        (
            CRMLSServiceError(
                "CRMLS credentials not configured",
                error="Server configuration error",
                raw_error="Missing environment variables: VITE_CRMLS_CLIENT_ID or VITE_CRMLS_CLIENT_SECRET",
            ),
            "CRMLS API credentials are not properly configured. Please check your environment variables.",
        ),
        (
            CRMLSServiceError("Unable to authenticate with CRMLS API", error="Authentication failed"),
            "Failed to authenticate with CRMLS API. Please verify your credentials.",
        ),
        (
            NetworkServiceError("Failed to fetch /api/crmls/listings: connection refused"),
            "Unable to connect to CRMLS API. Please check your internet connection and try again.",
        ),
        (
            CRMLSServiceError("Invalid response received from listings API"),
            "Invalid response received from listings API",
        ),
    ])
    async def test_failure_sets_friendly_error(self, store, service, error, message):
        store.state.listings = [_listing("old")]
        store.state.total_count = 9
        service.responses.append(error)

        await store.fetch_listings()

        state = store.state
        assert state.error == message
        assert state.listings == []
        assert state.total_count == 0
        assert state.has_more is False
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_undecodable_response_does_not_block_later_fetches(self, clock):
        calls: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.DecodingError("bad gzip stream", request=request)
            return httpx.Response(200, json={"data": [{"id": "a"}], "total": 1})

        async with CRMLSService(base_url="http://realty.test", transport=httpx.MockTransport(handler)) as service:
            store = ListingsStore(service, clock=clock)

            await store.fetch_listings()
            assert store.state.is_loading is False
            assert store.state.error is not None
            assert store.state.listings == []

            await store.fetch_listings()
            assert [p.id for p in store.state.listings] == ["a"]
            assert store.state.error is None

    @pytest.mark.asyncio
    async def test_unexpected_error_clears_loading(self, store, service):
        service.responses.extend([RuntimeError("boom"), _page(["a"])])

        with pytest.raises(RuntimeError):
            await store.fetch_listings()
        assert store.state.is_loading is False

        await store.fetch_listings()
        assert [p.id for p in store.state.listings] == ["a"]


class TestFreshness:
    @pytest.mark.asyncio
    async def test_should_fetch(self, store, service, clock):
        """Test data younger than five minutes is not refetched."""
        assert store.should_fetch() is True

        service.responses.append(_page(["a"]))
        await store.fetch_listings()
        assert store.should_fetch() is False

        clock.advance(299)
        assert store.should_fetch() is False

        clock.advance(1)
        assert store.should_fetch() is True

    @pytest.mark.asyncio
    async def test_empty_result_is_refetched(self, store, service):
        service.responses.append(_page([]))
        await store.fetch_listings()

        assert store.should_fetch() is True

    def test_not_while_loading(self, store):
        store.set_loading(True)
        assert store.should_fetch() is False

    @pytest.mark.asyncio
    async def test_ensure_fresh(self, store, service, clock):
        service.responses.extend([_page(["a"]), _page(["b"])])

        assert await store.ensure_fresh() is True
        assert await store.ensure_fresh() is False

        clock.advance(600)
        assert await store.ensure_fresh() is True
        assert [p.id for p in store.state.listings] == ["b"]
        assert len(service.calls) == 2


class TestLoadMore:
    @pytest.mark.asyncio
    async def test_appends_next_page(self, store, service):
        service.responses.append(_page(["a", "b"], page=1, has_more=True))
        await store.fetch_listings({"per_page": 2})

        service.responses.append(_page(["c"], page=2))
        await store.load_more_listings()

        state = store.state
        assert [p.id for p in state.listings] == ["a", "b", "c"]
        assert state.current_page == 2
        assert state.has_more is False
        assert service.calls[-1]["page"] == 2
        assert service.calls[-1]["per_page"] == 2

    @pytest.mark.asyncio
    async def test_noop_without_more(self, store, service):
        store.state.has_more = False

        await store.load_more_listings()

        assert service.calls == []

    @pytest.mark.asyncio
    async def test_failure_keeps_listings(self, store, service):
        service.responses.append(_page(["a"], has_more=True))
        await store.fetch_listings()

        service.responses.append(CRMLSServiceError("Listings fetch failed"))
        await store.load_more_listings()

        state = store.state
        assert [p.id for p in state.listings] == ["a"]
        assert state.current_page == 1
        assert state.has_more is True
        assert state.error == "Listings fetch failed"
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_unexpected_error_clears_loading(self, store, service):
        service.responses.append(_page(["a"], has_more=True))
        await store.fetch_listings()

        service.responses.extend([RuntimeError("boom"), _page(["b"])])
        with pytest.raises(RuntimeError):
            await store.load_more_listings()
        assert store.state.is_loading is False

        await store.load_more_listings()
        assert [p.id for p in store.state.listings] == ["a", "b"]


class TestFetchProperty:
    @pytest.mark.asyncio
    async def test_replaces_listed_property(self, store, service):
        service.responses.append(_page(["a", "b"]))
        await store.fetch_listings()
        service.properties["b"] = _listing("b", description="detailed")

        prop = await store.fetch_property("b")

        assert prop.description == "detailed"
        assert [p.id for p in store.state.listings] == ["a", "b"]
        assert store.state.listings[1].description == "detailed"

    @pytest.mark.asyncio
    async def test_does_not_append_unlisted_property(self, store, service):
        service.properties["z"] = _listing("z")

        prop = await store.fetch_property("z")

        assert prop.id == "z"
        assert store.state.listings == []

    @pytest.mark.asyncio
    async def test_failure_returns_none(self, store, service):
        service.properties["x"] = CRMLSServiceError("Property not found")

        assert await store.fetch_property("x") is None
        assert store.state.error == "Property not found"


class TestStateHelpers:
    @pytest.mark.asyncio
    async def test_refresh_restarts_at_page_one(self, store, service):
        service.responses.append(_page(["a"], page=3))
        await store.fetch_listings({"page": 3, "city": "Irvine"})

        service.responses.append(_page(["b"]))
        await store.refresh_listings()

        assert service.calls[-1]["page"] == 1
        assert service.calls[-1]["city"] == "Irvine"
        assert [p.id for p in store.state.listings] == ["b"]

    def test_update_search_params_resets_page(self, store):
        store.state.search_params["page"] = 4

        store.update_search_params({"city": "Tustin", "page": 9})

        assert store.state.search_params["page"] == 1
        assert store.state.search_params["city"] == "Tustin"

    def test_clear_listings(self, store):
        store.state.listings = [_listing("a")]
        store.state.search_params["city"] = "Irvine"
        store.set_error("boom")

        store.clear_listings()

        assert store.state.listings == []
        assert store.state.error is None
        assert store.state.search_params == INITIAL_SEARCH_PARAMS

    def test_by_status_is_case_insensitive(self, store):
        store.state.listings = [
            _listing("a", listing_status="Active"),
            _listing("b", listing_status="Pending"),
            _listing("c"),
        ]

        assert [p.id for p in store.get_listings_by_status("active")] == ["a"]

    def test_by_price_range(self, store):
        store.state.listings = [
            _listing("a", list_price=300000),
            _listing("b", list_price=600000),
            _listing("c", list_price=900000),
            _listing("d"),
        ]

        assert [p.id for p in store.get_listings_by_price_range(500000, 800000)] == ["b"]
        assert [p.id for p in store.get_listings_by_price_range(min_price=500000)] == ["b", "c"]
        assert [p.id for p in store.get_listings_by_price_range(0, None)] == ["a", "b", "c"]

    def test_sorted_listings(self, store):
        store.state.listings = [_listing("a", list_price=1), _listing("b", list_price=2)]

        assert [p.id for p in store.sorted_listings(SortOption.PRICE_DESC)] == ["b", "a"]
        assert [p.id for p in store.state.listings] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_snapshot(self, store, service, clock):
        service.responses.append(_page(["a"], total=1))
        await store.fetch_listings()
        store.set_error("ignored")

        snapshot = store.snapshot()

        assert snapshot == {
            "listings": [{"id": "a"}],
            "search_params": INITIAL_SEARCH_PARAMS,
            "last_fetched": clock.now.isoformat(),
            "total_count": 1,
        }
