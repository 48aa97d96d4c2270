"""
FastAPI dependencies resolving per-application context from ``app.state``.
"""
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from ..core.config import Settings
from ..crmls.upstream import UpstreamClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream(request: Request) -> UpstreamClient:
    upstream: Optional[UpstreamClient] = getattr(request.app.state, "upstream", None)
    if upstream is None:
        raise RuntimeError("CRMLS upstream client not initialized")
    return upstream


async def get_optional_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """User id forwarded by the auth gateway, if any."""
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """User id forwarded by the auth gateway; 401 when absent."""
    user_id = await get_optional_user_id(x_user_id)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user_id
