from .base import Base
from .favorite import Favorite
from .lead import BuyerQuestionnaire, SellerLead

__all__ = ["Base", "Favorite", "SellerLead", "BuyerQuestionnaire"]
