"""
Favorite-related Pydantic models.
"""
from typing import List

from pydantic import BaseModel, Field


class FavoritesList(BaseModel):
    """Property ids a user has favorited, oldest first."""
    favorites: List[str] = Field(default_factory=list)


class FavoriteStatus(BaseModel):
    property_id: str
    is_favorite: bool


class FavoriteToggleResult(FavoriteStatus):
    """Outcome of a toggle along with the user's updated list."""
    favorites: List[str] = Field(default_factory=list)
