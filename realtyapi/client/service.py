"""
Client for the CRMLS proxy endpoints.

:class:`CRMLSService` talks to ``/api/crmls/token`` and ``/api/crmls/listings``
on a running Realty API and keeps the bearer token in an in-process cache
until five minutes before it expires.
"""
import json
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, ValidationError

from ..cache import Cache, create_memory_cache
from ..crmls.upstream import token_preview
from ..schemas.crmls import ListingsResponse, Property, SearchParams, TokenResponse

logger = logging.getLogger(__name__)

TOKEN_PATH = "/api/crmls/token"
LISTINGS_PATH = "/api/crmls/listings"

# Used when the token response has no usable expires_in
DEFAULT_EXPIRES_IN = 3600  # seconds

DEFAULT_SEARCH_PARAMS: Dict[str, Any] = {
    "page": 1,
    "per_page": 12,
    "sort_by": "list_price",
    "sort_order": "desc",
}


class CRMLSServiceError(Exception):
    """Error reported by the CRMLS proxy or raised while talking to it.

    ``str(error)`` is the most specific of ``raw_error``, ``message`` and
    ``error``.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Optional[str] = None,
        raw_error: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.error = error
        self.raw_error = raw_error
        self.status_code = status_code
        super().__init__(raw_error or message or error or "CRMLS request failed")

    @classmethod
    def from_response(cls, response: httpx.Response, fallback_error: str, default: str) -> "CRMLSServiceError":
        text = response.text
        try:
            body = json.loads(text)
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {
                "error": fallback_error,
                "message": f"HTTP {response.status_code}: {response.reason_phrase}",
            }

        error = body.get("error") or None
        message = body.get("message") or None
        raw_error = body.get("raw_error") or None
        if not (error or message or raw_error):
            message = default
        return cls(message, error=error, raw_error=raw_error, status_code=response.status_code)

    @property
    def details(self) -> str:
        """All reported fields joined, for matching on their contents."""
        return " ".join(p for p in (self.error, self.message, self.raw_error) if p)


class NetworkServiceError(CRMLSServiceError):
    """The proxy could not be reached."""


class TimeoutServiceError(CRMLSServiceError):
    """The proxy did not answer in time."""


SearchInput = Union[SearchParams, Mapping[str, Any], None]


def _search_dict(params: SearchInput) -> Dict[str, Any]:
    if params is None:
        return {}
    if isinstance(params, BaseModel):
        return params.model_dump(exclude_none=True)
    return dict(params)


class CRMLSService:
    """Async client for the Realty API CRMLS proxy."""

    TOKEN_KEY = "token"

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
        token_buffer: float = 300,
        cache: Optional[Cache] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.token_buffer = token_buffer
        self.token_expires_at: Optional[float] = None
        self._clock = clock
        self._cache = cache or create_memory_cache(key_prefix="crmls:", clock=clock)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        logger.debug(
            "CRMLS service configured",
            extra={"base_url": base_url, "token_endpoint": TOKEN_PATH, "listings_endpoint": LISTINGS_PATH},
        )

    async def __aenter__(self) -> "CRMLSService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, timeout=self.timeout, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"Request to {path} timed out after {self.timeout:g} seconds")
            raise TimeoutServiceError(
                f"Request timeout after {self.timeout:g} seconds",
                error="Request timeout",
            ) from e
        except httpx.TransportError as e:
            logger.error(f"Request to {path} failed: {e!r}")
            raise NetworkServiceError(
                f"Failed to fetch {path}: {e}",
                error="NetworkError",
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e!r}")
            raise CRMLSServiceError(
                f"Request to {path} failed: {e}",
                error=type(e).__name__,
            ) from e

    async def is_token_valid(self) -> bool:
        """True while a token is cached and more than ``token_buffer`` seconds from expiry."""
        return await self._cache.get(self.TOKEN_KEY) is not None

    async def authenticate(self) -> str:
        """Return a bearer token, fetching a new one when the cached one is stale."""
        token = await self._cache.get(self.TOKEN_KEY)
        if token is not None:
            logger.debug("Using existing valid CRMLS token")
            return token

        logger.info(f"Fetching new CRMLS token from {TOKEN_PATH}")
        try:
            response = await self._send("POST", TOKEN_PATH)
            text = response.text
            logger.debug(f"Token response: {response.status_code} {response.reason_phrase}")

            if not response.is_success:
                logger.error(f"Token fetch failed with {response.status_code}: {text}")
                raise CRMLSServiceError.from_response(response, "Authentication failed", "Authentication failed")

            try:
                token_data = json.loads(text)
            except ValueError:
                raise CRMLSServiceError(f"Failed to parse token response: {text}")

            try:
                token_response = TokenResponse.model_validate(token_data)
            except ValidationError as e:
                raise CRMLSServiceError("No access token received from CRMLS API") from e
            token = token_response.access_token
            if not token:
                raise CRMLSServiceError("No access token received from CRMLS API")

            expires_in = token_response.expires_in
            if not expires_in or expires_in <= 0:
                expires_in = DEFAULT_EXPIRES_IN
            self.token_expires_at = self._clock() + expires_in
            await self._cache.set(self.TOKEN_KEY, token, ttl=expires_in - self.token_buffer)
        except CRMLSServiceError as e:
            logger.error(f"CRMLS authentication failed: {e}")
            await self.clear_auth()
            raise

        logger.info(f"CRMLS authentication successful, token {token_preview(token)} expires in {expires_in}s")
        return token

    async def get_listings(self, params: SearchInput = None) -> ListingsResponse:
        """Fetch a page of listings through the proxy."""
        search_params = {**DEFAULT_SEARCH_PARAMS, **_search_dict(params)}
        logger.info(f"Fetching CRMLS listings from {LISTINGS_PATH}", extra={"search_params": search_params})

        response = await self._send("POST", LISTINGS_PATH, json=search_params)
        text = response.text
        logger.debug(f"Listings response: {response.status_code} {text[:500]}")

        if not response.is_success:
            logger.error(f"Listings fetch failed with {response.status_code}: {text}")
            raise CRMLSServiceError.from_response(response, "Listings fetch failed", "Failed to fetch listings")

        try:
            payload = json.loads(text)
        except ValueError:
            raise CRMLSServiceError(f"Failed to parse listings response: {text}")

        if not isinstance(payload, dict) or payload.get("data") is None:
            logger.error(f"Invalid listings response structure: {text[:500]}")
            raise CRMLSServiceError("Invalid response received from listings API")

        try:
            listings = ListingsResponse.model_validate(payload)
        except ValidationError as e:
            raise CRMLSServiceError("Invalid response received from listings API", raw_error=str(e))

        logger.info(
            f"Fetched {len(listings.data)} listings "
            f"(total: {listings.total or len(listings.data)}, page: {listings.page or 1}, "
            f"has_more: {bool(listings.has_more)})"
        )
        return listings

    async def get_property(self, property_id: str) -> Property:
        """Fetch a single listing by id."""
        logger.info(f"Fetching CRMLS property {property_id}")
        response = await self._send("GET", LISTINGS_PATH, params={"id": property_id})

        if not response.is_success:
            raise CRMLSServiceError(
                f"Failed to fetch property: {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise CRMLSServiceError(f"Failed to parse property response: {response.text}")

        if isinstance(data, dict):
            items = data.get("data")
            if isinstance(items, list) and items and isinstance(items[0], dict):
                return Property.model_validate(items[0])
            if data.get("id"):
                return Property.model_validate(data)

        raise CRMLSServiceError("Property not found", status_code=404)

    async def test_connection(self) -> bool:
        """Check that the proxy can obtain a token; never raises."""
        try:
            response = await self._send("POST", TOKEN_PATH)
        except CRMLSServiceError as e:
            logger.error(f"CRMLS proxy connection test failed: {e}")
            return False

        if not response.is_success:
            logger.error(
                f"CRMLS proxy connection test failed: {response.status_code} "
                f"{response.reason_phrase} {response.text}"
            )
            return False

        logger.info("CRMLS proxy connection test successful")
        return True

    async def clear_auth(self) -> None:
        """Forget the cached token."""
        await self._cache.delete(self.TOKEN_KEY)
        self.token_expires_at = None

    async def close(self) -> None:
        await self._client.aclose()


__all__ = [
    "CRMLSService", "CRMLSServiceError", "NetworkServiceError", "TimeoutServiceError",
    "DEFAULT_SEARCH_PARAMS", "TOKEN_PATH", "LISTINGS_PATH",
]
