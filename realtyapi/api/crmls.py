"""
CRMLS proxy routes: token exchange and listings search.
"""
import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core.config import Settings
from ..crmls import CRMLSError, issue_token, search_listings
from ..crmls.upstream import UpstreamClient
from .deps import get_settings, get_upstream

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/crmls", tags=["crmls"])

_METHOD_NOT_ALLOWED = {"error": "Method not allowed"}


def _internal_error(exc: Exception) -> CRMLSError:
    logger.exception(f"Unexpected CRMLS proxy error: {exc}")
    return CRMLSError(str(exc) or type(exc).__name__, raw_error=repr(exc))


async def _listing_params(request: Request) -> Dict[str, Any]:
    """Search parameters from the query string (GET) or the JSON body (POST)."""
    if request.method == "GET":
        return dict(request.query_params)

    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@router.post(
    "/token",
    summary="Exchange the configured client credentials for a CRMLS token",
    response_description="The upstream token JSON",
)
async def crmls_token(
    settings: Settings = Depends(get_settings),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    logger.info("CRMLS token request received")
    try:
        return await issue_token(upstream, settings)
    except CRMLSError:
        raise
    except Exception as e:
        raise _internal_error(e) from e


@router.api_route("/token", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def crmls_token_method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content=_METHOD_NOT_ALLOWED)


@router.api_route(
    "/listings",
    methods=["GET", "POST"],
    summary="Search CRMLS listings",
    response_description="Normalized page of listings",
)
async def crmls_listings(
    request: Request,
    settings: Settings = Depends(get_settings),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    """
    Search listings. Parameters are read from the query string on GET and
    from the JSON body on POST.

    - **page** / **per_page**: pagination (defaults 1 and 12)
    - **sort_by** / **sort_order**: defaults `list_price` / `desc`
    - price, bedroom, bathroom and square-footage bounds, location and status filters
    """
    logger.info(f"CRMLS listings request received ({request.method})")
    try:
        params = await _listing_params(request)
        return await search_listings(upstream, settings, params)
    except CRMLSError:
        raise
    except Exception as e:
        raise _internal_error(e) from e


@router.api_route("/listings", methods=["PUT", "PATCH", "DELETE"], include_in_schema=False)
async def crmls_listings_method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content=_METHOD_NOT_ALLOWED)
