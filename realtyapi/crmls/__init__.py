"""
CRMLS proxy: token exchange and property search against the upstream MLS API.
"""
from .exceptions import (
    CRMLSError, ConfigurationError, UpstreamError,
    InvalidResponseError, RequestTimeoutError, NetworkError,
)
from .normalize import build_search_body, normalize_listings
from .proxy import issue_token, search_listings
from .upstream import Credentials, UpstreamClient

__all__ = [
    "CRMLSError", "ConfigurationError", "UpstreamError",
    "InvalidResponseError", "RequestTimeoutError", "NetworkError",
    "build_search_body", "normalize_listings",
    "issue_token", "search_listings",
    "Credentials", "UpstreamClient",
]
