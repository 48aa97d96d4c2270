"""
Pydantic schemas for request/response validation.
"""
from .crmls import (
    ListingsResponse,
    Property,
    PropertyAddress,
    PropertyImage,
    ListingAgent,
    ListingOffice,
    SearchParams,
    TokenResponse,
)
from .favorite import FavoritesList, FavoriteStatus, FavoriteToggleResult
from .lead import (
    BuyerQuestionnaire,
    BuyerQuestionnaireCreate,
    SellerLead,
    SellerLeadCreate,
)

__all__ = [
    'ListingsResponse', 'Property', 'PropertyAddress',
    'PropertyImage', 'ListingAgent', 'ListingOffice', 'SearchParams', 'TokenResponse',
    'FavoritesList', 'FavoriteStatus', 'FavoriteToggleResult',
    'BuyerQuestionnaire', 'BuyerQuestionnaireCreate', 'SellerLead', 'SellerLeadCreate',
]
