"""
Listings store: the last fetched listing set plus its pagination state.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..schemas.crmls import Property
from .service import CRMLSService, CRMLSServiceError, NetworkServiceError
from .sorting import SortOption, sort_properties

logger = logging.getLogger(__name__)

INITIAL_SEARCH_PARAMS: Dict[str, Any] = {
    "page": 1,
    "per_page": 50,
    "sort_by": "list_price",
    "sort_order": "desc",
}

# Listings younger than this are not refetched
DEFAULT_MAX_AGE = 300  # seconds

CREDENTIALS_MESSAGE = (
    "CRMLS API credentials are not properly configured. Please check your environment variables."
)
AUTHENTICATION_MESSAGE = "Failed to authenticate with CRMLS API. Please verify your credentials."
CONNECTIVITY_MESSAGE = (
    "Unable to connect to CRMLS API. Please check your internet connection and try again."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ListingsState:
    listings: List[Property] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None
    last_fetched: Optional[datetime] = None
    total_count: int = 0
    current_page: int = 1
    has_more: bool = True
    search_params: Dict[str, Any] = field(default_factory=lambda: dict(INITIAL_SEARCH_PARAMS))


def friendly_error(exc: CRMLSServiceError) -> str:
    """Message suitable for showing to an end user."""
    details = exc.details
    if "credentials not configured" in details:
        return CREDENTIALS_MESSAGE
    if "Authentication failed" in details:
        return AUTHENTICATION_MESSAGE
    if isinstance(exc, NetworkServiceError) or "NetworkError" in details or "Network error" in details:
        return CONNECTIVITY_MESSAGE
    return str(exc) or "Failed to fetch listings"


class ListingsStore:
    """Holds listings fetched through a :class:`CRMLSService`.

    Only one fetch runs at a time: while ``is_loading`` is set, further
    fetches and page loads are ignored.
    """

    def __init__(self, service: CRMLSService, clock: Callable[[], datetime] = _utcnow) -> None:
        self.service = service
        self._clock = clock
        self.state = ListingsState()

    async def fetch_listings(self, params: Optional[Dict[str, Any]] = None) -> None:
        """Replace the current listings with a fresh page."""
        if self.state.is_loading:
            logger.info("Skipping fetch - already loading")
            return

        self.state.is_loading = True
        self.state.error = None
        search_params = {**self.state.search_params, **(params or {})}
        logger.info("Fetching listings", extra={"search_params": search_params})

        try:
            response = await self.service.get_listings(search_params)
        except CRMLSServiceError as e:
            logger.error(f"Listings fetch failed: {e}")
            self.state.error = friendly_error(e)
            self.state.listings = []
            self.state.total_count = 0
            self.state.has_more = False
            return
        finally:
            self.state.is_loading = False

        listings = list(response.data)
        if response.has_more is not None:
            has_more = response.has_more
        else:
            has_more = len(listings) == search_params.get("per_page", INITIAL_SEARCH_PARAMS["per_page"])

        self.state.listings = listings
        self.state.total_count = response.total or len(listings)
        self.state.current_page = response.page or 1
        self.state.has_more = has_more
        self.state.last_fetched = self._clock()
        self.state.search_params = search_params

        logger.info(
            f"Store updated with {len(listings)} listings "
            f"(total: {self.state.total_count}, page: {self.state.current_page}, has_more: {has_more})"
        )

    def should_fetch(self, max_age: float = DEFAULT_MAX_AGE) -> bool:
        """True when nothing is loading and there is no data younger than ``max_age`` seconds."""
        if self.state.is_loading:
            return False
        if not self.state.listings or self.state.last_fetched is None:
            return True
        age = (self._clock() - self.state.last_fetched).total_seconds()
        return age >= max_age

    async def ensure_fresh(self, max_age: float = DEFAULT_MAX_AGE) -> bool:
        """Fetch only when the held listings are missing or stale. Returns whether a fetch ran."""
        if not self.should_fetch(max_age):
            return False
        await self.fetch_listings()
        return True

    async def fetch_property(self, property_id: str) -> Optional[Property]:
        """Fetch a single property, refreshing it in place when it is already listed."""
        try:
            prop = await self.service.get_property(property_id)
        except CRMLSServiceError as e:
            logger.error(f"Error fetching property {property_id}: {e}")
            self.state.error = str(e) or "Failed to fetch property"
            return None

        if any(listing.id == property_id for listing in self.state.listings):
            self.state.listings = [
                prop if listing.id == property_id else listing
                for listing in self.state.listings
            ]
        return prop

    async def load_more_listings(self) -> None:
        """Append the next page to the current listings."""
        if self.state.is_loading or not self.state.has_more:
            return

        next_page = self.state.current_page + 1
        search_params = {**self.state.search_params, "page": next_page}

        self.state.is_loading = True
        self.state.error = None
        logger.info(f"Loading more listings, page {next_page}")

        try:
            response = await self.service.get_listings(search_params)
        except CRMLSServiceError as e:
            logger.error(f"Error loading more listings: {e}")
            self.state.error = str(e) or "Failed to load more listings"
            return
        finally:
            self.state.is_loading = False

        page = list(response.data)
        self.state.listings = self.state.listings + page
        self.state.current_page = next_page
        if response.has_more is not None:
            self.state.has_more = response.has_more
        else:
            self.state.has_more = len(page) == search_params.get("per_page")
        logger.info(f"Loaded {len(page)} more listings")

    async def refresh_listings(self) -> None:
        """Drop the held listings and fetch page one again."""
        refresh_params = {**self.state.search_params, "page": 1}
        self.state.listings = []
        self.state.current_page = 1
        self.state.has_more = True
        self.state.last_fetched = None
        await self.fetch_listings(refresh_params)

    def clear_listings(self) -> None:
        self.state = ListingsState()

    def set_error(self, error: Optional[str]) -> None:
        self.state.error = error

    def set_loading(self, loading: bool) -> None:
        self.state.is_loading = loading

    def update_search_params(self, params: Dict[str, Any]) -> None:
        """Merge new search params; pagination always restarts at page 1."""
        self.state.search_params = {**self.state.search_params, **params, "page": 1}

    def get_listings_by_status(self, status: str) -> List[Property]:
        wanted = status.lower()
        return [
            listing for listing in self.state.listings
            if listing.listing_status and listing.listing_status.lower() == wanted
        ]

    def get_listings_by_price_range(
        self,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Property]:
        result = []
        for listing in self.state.listings:
            price = listing.list_price
            if not price:
                continue
            if min_price and price < min_price:
                continue
            if max_price and price > max_price:
                continue
            result.append(listing)
        return result

    def sorted_listings(self, option: SortOption = SortOption.DEFAULT) -> List[Property]:
        return sort_properties(self.state.listings, option)

    def snapshot(self) -> Dict[str, Any]:
        """The persistable part of the state; loading and error flags are left out."""
        return {
            "listings": [listing.model_dump(exclude_none=True) for listing in self.state.listings],
            "search_params": dict(self.state.search_params),
            "last_fetched": self.state.last_fetched.isoformat() if self.state.last_fetched else None,
            "total_count": self.state.total_count,
        }


__all__ = ["ListingsStore", "ListingsState", "INITIAL_SEARCH_PARAMS", "friendly_error"]
