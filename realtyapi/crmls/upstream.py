"""
HTTP client for the upstream CRMLS (Realtyna) API.

Two calls are made: a ``client_credentials`` token exchange and a property
search. Neither is retried; every failure is reported to the caller as a
:class:`~realtyapi.crmls.exceptions.CRMLSError`.
"""
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

from ..core.config import Settings
from .exceptions import (
    ConfigurationError,
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def token_preview(token: Optional[str]) -> str:
    """Loggable prefix of a token."""
    return f"{token[:10]}..." if token else "[MISSING]"


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str
    api_key: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings, include_debug: bool = False) -> "Credentials":
        """Read credentials, raising ConfigurationError when id or secret is missing."""
        client_id = settings.VITE_CRMLS_CLIENT_ID
        client_secret = settings.VITE_CRMLS_CLIENT_SECRET

        logger.info(
            "CRMLS environment check",
            extra={
                "has_client_id": bool(client_id),
                "has_client_secret": bool(client_secret),
                "has_api_key": bool(settings.VITE_CRMLS_API_KEY),
                "env": settings.ENV,
            },
        )

        if not client_id or not client_secret:
            logger.error("Missing CRMLS credentials")
            debug_info = None
            if include_debug:
                debug_info = {
                    "hasClientId": bool(client_id),
                    "hasClientSecret": bool(client_secret),
                    "env_keys": sorted(k for k in os.environ if "CRMLS" in k),
                }
            raise ConfigurationError(
                "CRMLS credentials not configured",
                raw_error="Missing environment variables: VITE_CRMLS_CLIENT_ID or VITE_CRMLS_CLIENT_SECRET",
                debug_info=debug_info,
            )
        return cls(client_id=client_id, client_secret=client_secret, api_key=settings.VITE_CRMLS_API_KEY)


def _error_body(response: httpx.Response, fallback_error: str) -> Dict[str, Any]:
    """Upstream error JSON with ``raw_error`` attached, or a synthesized body."""
    text = response.text
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        parsed["raw_error"] = text
        return parsed
    return {
        "error": fallback_error,
        "message": f"HTTP {response.status_code}: {response.reason_phrase}",
        "raw_error": text,
    }


class UpstreamClient:
    """Client for the CRMLS token and properties endpoints."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(transport=transport)

    def _headers(self, credentials: Credentials, **extra: str) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self._settings.CRMLS_USER_AGENT,
            **extra,
        }
        if credentials.api_key:
            headers["X-API-Key"] = credentials.api_key
        return headers

    async def _send(self, method: str, url: str, timeout: float, **kwargs: Any) -> httpx.Response:
        """Send a request, translating transport failures into CRMLS errors."""
        try:
            return await self._client.request(method, url, timeout=timeout, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"CRMLS request to {url} timed out after {timeout:g} seconds")
            raise RequestTimeoutError(
                f"Request to CRMLS API timed out after {timeout:g} seconds",
                raw_error=str(e) or type(e).__name__,
            ) from e
        except httpx.TransportError as e:
            logger.error(f"CRMLS network error for {url}: {e!r}")
            raise NetworkError(
                "Unable to connect to CRMLS API - network issue",
                raw_error=str(e) or type(e).__name__,
                debug_info={"error_name": type(e).__name__},
            ) from e

    async def request_token(self, credentials: Credentials) -> Tuple[httpx.Response, str]:
        """POST the client_credentials grant and return the raw response and body text."""
        form = {
            "grant_type": "client_credentials",
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
        }
        logger.info(
            "Requesting CRMLS OAuth token",
            extra={"endpoint": self._settings.CRMLS_TOKEN_URL, "client_id": credentials.client_id,
                   "client_secret": "[HIDDEN]"},
        )
        response = await self._send(
            "POST",
            self._settings.CRMLS_TOKEN_URL,
            self._settings.CRMLS_TOKEN_TIMEOUT,
            data=form,
            headers=self._headers(credentials),
        )
        logger.info(f"CRMLS token response: {response.status_code} {response.reason_phrase}")
        return response, response.text

    async def fetch_token(self, credentials: Credentials) -> Dict[str, Any]:
        """Exchange credentials for a token, passing upstream errors through.

        Returns:
            The upstream token JSON.
        """
        response, text = await self.request_token(credentials)

        if not response.is_success:
            logger.error(f"CRMLS token request failed with {response.status_code}: {text}")
            raise UpstreamError(
                "Authentication failed",
                status_code=response.status_code,
                body=_error_body(response, "Authentication failed"),
            )

        try:
            token_data = json.loads(text)
        except ValueError:
            raise InvalidResponseError(
                "Failed to parse token response from CRMLS API",
                raw_error=text,
            )

        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            logger.error("No access token in CRMLS token response")
            raise InvalidResponseError(
                "No access token received from CRMLS API",
                error="Invalid token response",
                raw_error=text,
            )

        logger.info(
            f"CRMLS token obtained: type={token_data.get('token_type')} "
            f"expires_in={token_data.get('expires_in')} "
            f"preview={token_preview(token_data['access_token'])}"
        )
        return token_data

    async def access_token(self, credentials: Credentials) -> str:
        """Exchange credentials for a bearer token on behalf of the listings handler."""
        response, text = await self.request_token(credentials)

        if not response.is_success:
            logger.error(f"CRMLS token fetch failed with {response.status_code}: {text}")
            raise UpstreamError(
                "Unable to authenticate with CRMLS API",
                error="Authentication failed",
                status_code=response.status_code,
                raw_error=text,
            )

        try:
            token_data = json.loads(text)
        except ValueError:
            raise InvalidResponseError(
                "Failed to parse token response from CRMLS API",
                error="Invalid token response",
                raw_error=text,
            )

        token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not token:
            raise InvalidResponseError(
                "No access token received from CRMLS API",
                error="Authentication failed",
                raw_error=text,
            )
        return token

    async def search_properties(
        self,
        credentials: Credentials,
        token: str,
        body: Dict[str, Any],
    ) -> Tuple[Any, str]:
        """POST a property search and return the parsed payload and raw text."""
        url = self._settings.CRMLS_PROPERTIES_URL
        logger.info(f"POST {url} with token {token_preview(token)}", extra={"request_body": body})

        response = await self._send(
            "POST",
            url,
            self._settings.CRMLS_LISTINGS_TIMEOUT,
            json=body,
            headers=self._headers(credentials, Authorization=f"Bearer {token}"),
        )
        text = response.text
        logger.info(f"CRMLS listings response: {response.status_code} ({len(text)} bytes)")

        if not response.is_success:
            logger.error(f"CRMLS listings request failed with {response.status_code}: {text[:500]}")
            raise UpstreamError(
                "Listings fetch failed",
                status_code=response.status_code,
                body=_error_body(response, "Listings fetch failed"),
            )

        try:
            return json.loads(text), text
        except ValueError:
            raise InvalidResponseError(
                "Failed to parse listings response from CRMLS API",
                error="Invalid listings response",
                raw_error=text,
            )

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["Credentials", "UpstreamClient", "token_preview"]
