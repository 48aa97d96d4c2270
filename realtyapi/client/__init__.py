"""
Client-side access to the CRMLS proxy: the service wrapper, the listings
store built on it and listing sort options.
"""
from .service import (
    CRMLSService,
    CRMLSServiceError,
    NetworkServiceError,
    TimeoutServiceError,
)
from .sorting import SortOption, normalize_price, sort_properties
from .store import ListingsState, ListingsStore

__all__ = [
    "CRMLSService", "CRMLSServiceError", "NetworkServiceError", "TimeoutServiceError",
    "SortOption", "normalize_price", "sort_properties",
    "ListingsState", "ListingsStore",
]
