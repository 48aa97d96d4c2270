"""
Request shaping and response normalization for the CRMLS properties endpoint.
"""
import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional

from ..core import Pagination
from .exceptions import InvalidResponseError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_SORT_BY = "list_price"
DEFAULT_SORT_ORDER = "desc"

INT_FILTERS = (
    "min_price", "max_price",
    "bedrooms", "bathrooms",
    "min_bedrooms", "max_bedrooms",
    "min_bathrooms", "max_bathrooms",
    "min_sqft", "max_sqft",
)
STR_FILTERS = ("id", "property_type", "city", "state", "postal_code", "listing_status")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of ``value`` ("12abc" -> 12), None if there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _is_set(value: Any) -> bool:
    return value not in (None, "", 0, False)


def _positive_int(value: Any, default: int) -> int:
    parsed = parse_int(value)
    if parsed is None or parsed < 1:
        return default
    return parsed


def build_search_body(params: Mapping[str, Any], default_per_page: int = 12) -> Dict[str, Any]:
    """Build the JSON body POSTed to the properties endpoint.

    Pagination and sort keys are always present; filters are included only
    when the caller supplied a non-empty value.
    """
    body: Dict[str, Any] = {
        "page": _positive_int(params.get("page"), DEFAULT_PAGE),
        "per_page": _positive_int(params.get("per_page"), default_per_page),
        "sort_by": str(params.get("sort_by") or DEFAULT_SORT_BY),
        "sort_order": str(params.get("sort_order") or DEFAULT_SORT_ORDER),
    }

    for key in INT_FILTERS:
        value = params.get(key)
        if not _is_set(value):
            continue
        parsed = parse_int(value)
        if parsed is None:
            logger.debug(f"Dropping non-numeric filter {key}={value!r}")
            continue
        body[key] = parsed

    for key in STR_FILTERS:
        value = params.get(key)
        if _is_set(value):
            body[key] = str(value)

    return body


def _extract(payload: Any) -> Optional[Dict[str, Any]]:
    """Pull listings and paging hints out of one of the known payload shapes."""
    if isinstance(payload, list):
        logger.debug("Using direct array format")
        return {"listings": payload, "total": len(payload), "page": 1, "has_more": False}

    if not isinstance(payload, dict):
        return None

    for key in ("data", "listings"):
        listings = payload.get(key)
        if isinstance(listings, list):
            logger.debug(f"Using wrapped '{key}' format")
            return {
                "listings": listings,
                "total": parse_int(payload.get("total")) or len(listings),
                "page": parse_int(payload.get("page")) or 1,
                "has_more": bool(payload.get("has_more") or False),
            }
    return None


def normalize_listings(payload: Any, per_page: int, raw_text: str = "") -> Dict[str, Any]:
    """Normalize an upstream listings payload into the proxy response shape.

    Accepts a bare array, ``{"data": [...]}`` or ``{"listings": [...]}``.

    Raises:
        InvalidResponseError: for any other shape.
    """
    extracted = _extract(payload)
    if extracted is None:
        keys = list(payload.keys()) if isinstance(payload, dict) else type(payload).__name__
        logger.error(f"Invalid response format from CRMLS API: {keys}")
        raise InvalidResponseError(
            "Unexpected response format from CRMLS API",
            raw_error=raw_text,
        )

    listings: List[Any] = extracted["listings"]
    pagination = Pagination(page=extracted["page"], per_page=per_page, total=extracted["total"])
    return {
        "data": listings,
        "total": pagination.total,
        "page": pagination.page,
        "per_page": pagination.per_page,
        "total_pages": pagination.total_pages,
        "has_more": extracted["has_more"],
    }


__all__ = ["build_search_body", "normalize_listings", "parse_int"]
