"""
CRMLS-related Pydantic models.
"""
import logging
import re
from typing import Any, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from ..crmls.normalize import parse_int

logger = logging.getLogger(__name__)

# Fields the client compares, sorts or formats: a malformed value becomes None
_TYPED_FIELDS = {
    "id", "mls_number", "address", "listing_status", "listing_date",
    "list_price", "original_list_price", "bedrooms", "bathrooms", "half_bathrooms",
    "living_area", "lot_size", "year_built", "days_on_market", "parking_spaces",
    "garage_spaces", "hoa_fee", "tax_amount", "tax_year", "latitude", "longitude",
}


class TokenResponse(BaseModel):
    """OAuth token returned by the CRMLS token endpoint."""
    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    scope: Optional[str] = None

    @field_validator("expires_in", mode="before")
    def coerce_expires_in(cls, v: Any) -> Optional[int]:
        # Many OAuth servers send "3600"
        return parse_int(v)


class PropertyAddress(BaseModel):
    model_config = ConfigDict(extra="allow")

    street_number: Optional[str] = None
    street_name: Optional[str] = None
    unit_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    full_address: Optional[str] = None


class PropertyImage(BaseModel):
    url: str
    description: Optional[str] = None
    order: Optional[int] = None


class ListingAgent(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    license: Optional[str] = None


class ListingOffice(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class Property(BaseModel):
    """A single MLS listing.

    Upstream payloads carry many more fields than the ones declared here;
    unknown fields are kept as extras.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    mls_number: Optional[str] = None
    list_price: Optional[float] = None
    original_list_price: Optional[float] = None
    property_type: Optional[str] = None
    property_subtype: Optional[str] = None
    address: Optional[PropertyAddress] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    half_bathrooms: Optional[float] = None
    living_area: Optional[float] = None
    lot_size: Optional[float] = None
    year_built: Optional[int] = None
    listing_status: Optional[str] = None
    listing_date: Optional[str] = None
    days_on_market: Optional[int] = None
    property_images: Optional[List[str]] = None
    images: Optional[List[PropertyImage]] = None
    description: Optional[str] = None
    features: Optional[List[str]] = None
    parking_spaces: Optional[int] = None
    garage_spaces: Optional[int] = None
    pool: Optional[bool] = None
    fireplace: Optional[bool] = None
    air_conditioning: Optional[bool] = None
    heating: Optional[str] = None
    hoa_fee: Optional[float] = None
    tax_amount: Optional[float] = None
    tax_year: Optional[int] = None
    listing_agent: Optional[ListingAgent] = None
    listing_office: Optional[ListingOffice] = None
    virtual_tour_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", "mls_number", mode="before")
    def coerce_identifier(cls, v: Any) -> Any:
        # Some feeds send numeric ids
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v

    @field_validator("list_price", "original_list_price", mode="before")
    def strip_price_formatting(cls, v: Any) -> Any:
        if isinstance(v, str):
            digits = re.sub(r"[^\d.]", "", v)
            return float(digits) if digits.strip(".") else None
        return v

    @field_validator("*", mode="wrap")
    def tolerate_feed_variations(
        cls, v: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """Keep a listing whose optional fields do not match the declared types.

        Feeds disagree on shapes such as ``"pool": "Community"`` or a list of
        image URLs. One odd field must not reject the listing (or its page).
        """
        try:
            return handler(v)
        except ValidationError:
            logger.debug(f"Unexpected value for listing field {info.field_name}: {v!r}")
            return None if info.field_name in _TYPED_FIELDS else v

    @property
    def display_address(self) -> str:
        if self.address is None:
            return ""
        if self.address.full_address:
            return self.address.full_address
        parts = [self.address.city, self.address.state, self.address.postal_code]
        return ", ".join(p for p in parts if p)


class ListingsResponse(BaseModel):
    """Normalized listings page returned by the proxy."""
    data: List[Property]
    total: Optional[int] = None
    page: Optional[int] = None
    per_page: Optional[int] = None
    total_pages: Optional[int] = None
    has_more: Optional[bool] = None


class SearchParams(BaseModel):
    """Search parameters understood by the listings endpoint."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    min_bedrooms: Optional[int] = None
    max_bedrooms: Optional[int] = None
    min_bathrooms: Optional[int] = None
    max_bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    listing_status: Optional[str] = None
    min_sqft: Optional[int] = None
    max_sqft: Optional[int] = None
    page: Optional[int] = None
    per_page: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None
