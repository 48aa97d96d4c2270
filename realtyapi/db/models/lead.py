"""
Lead capture models: "sell your home" requests and buyer questionnaires.
"""
from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SellerLead(Base):
    """Home details and contact information from the sell-your-home form."""
    __tablename__ = "seller_leads"

    # Property address
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    zip: Mapped[str] = mapped_column(String(10), nullable=False)

    # Property details
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    square_feet: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    lot_size: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    additional_features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Contact
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)

    def __repr__(self) -> str:
        return f"<SellerLead {self.email} {self.street}, {self.city}>"


class BuyerQuestionnaire(Base):
    """Answers to the buyer "one last step" questions."""
    __tablename__ = "buyer_questionnaires"

    user_id: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    first_time_buyer: Mapped[str] = mapped_column(String(20), nullable=False)
    timeframe: Mapped[str] = mapped_column(String(50), nullable=False)
    pre_qualified: Mapped[str] = mapped_column(String(20), nullable=False)
    house_to_sell: Mapped[str] = mapped_column(String(20), nullable=False)
    has_agent: Mapped[str] = mapped_column(String(20), nullable=False)
