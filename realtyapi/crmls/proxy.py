"""
Request handling for the CRMLS proxy endpoints.

These functions carry the behaviour of the two serverless handlers; the
FastAPI routes in :mod:`realtyapi.api.crmls` only adapt HTTP in and out.
"""
import logging
from typing import Any, Dict, Mapping

from ..core.config import Settings
from .normalize import build_search_body, normalize_listings
from .upstream import Credentials, UpstreamClient

logger = logging.getLogger(__name__)


async def issue_token(upstream: UpstreamClient, settings: Settings) -> Dict[str, Any]:
    """Exchange the configured client credentials for an upstream token."""
    credentials = Credentials.from_settings(settings, include_debug=True)
    return await upstream.fetch_token(credentials)


async def search_listings(
    upstream: UpstreamClient,
    settings: Settings,
    params: Mapping[str, Any],
) -> Dict[str, Any]:
    """Authenticate, search the properties endpoint and normalize the result."""
    credentials = Credentials.from_settings(settings)

    logger.info("Step 1: fetching OAuth token")
    token = await upstream.access_token(credentials)

    logger.info("Step 2: fetching listings")
    body = build_search_body(params, default_per_page=settings.CRMLS_DEFAULT_PER_PAGE)
    payload, text = await upstream.search_properties(credentials, token, body)

    result = normalize_listings(payload, per_page=body["per_page"], raw_text=text)
    logger.info(
        f"Returning {len(result['data'])} listings "
        f"(total: {result['total']}, page: {result['page']}, has_more: {result['has_more']})"
    )
    return result


__all__ = ["issue_token", "search_listings"]
