"""
Lead-related Pydantic models for request/response validation.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.validation import format_phone_number, is_valid_email, is_valid_phone


class SellerLeadBase(BaseModel):
    """Fields collected by the sell-your-home form."""
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip: str = Field(..., min_length=3, max_length=10)

    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[float] = Field(None, ge=0, le=100)
    square_feet: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1600, le=2100)
    lot_size: Optional[float] = Field(None, ge=0)
    additional_features: Optional[str] = Field(None, max_length=5000)

    name: str = Field(..., min_length=1, max_length=100)
    phone: str
    email: str


class SellerLeadCreate(SellerLeadBase):
    """Model for creating a seller lead."""

    @field_validator("street", "city", "state", "zip", "name")
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("email")
    def check_email(cls, v: str) -> str:
        v = v.strip()
        if not is_valid_email(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("phone")
    def check_phone(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Phone number must have 10 digits")
        return format_phone_number(v)


class SellerLead(SellerLeadBase):
    """Seller lead returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class BuyerQuestionnaireBase(BaseModel):
    """Answers to the buyer "one last step" form; every question is required."""
    first_time_buyer: str = Field(..., min_length=1, max_length=20)
    timeframe: str = Field(..., min_length=1, max_length=50)
    pre_qualified: str = Field(..., min_length=1, max_length=20)
    house_to_sell: str = Field(..., min_length=1, max_length=20)
    has_agent: str = Field(..., min_length=1, max_length=20)


class BuyerQuestionnaireCreate(BuyerQuestionnaireBase):
    @field_validator("first_time_buyer", "timeframe", "pre_qualified", "house_to_sell", "has_agent")
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please answer every question")
        return v


class BuyerQuestionnaire(BuyerQuestionnaireBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[str] = None
    created_at: datetime
