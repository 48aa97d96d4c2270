"""
Core building blocks shared across the Realty API.
"""
from pydantic import BaseModel

from .config import Settings, get_settings


class Pagination(BaseModel):
    """Pagination helper for listing responses."""

    page: int = 1
    per_page: int = 12
    total: int = 0

    @property
    def total_pages(self) -> int:
        """Calculate the total number of pages."""
        if self.total == 0 or self.per_page <= 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page


__all__ = ["Pagination", "Settings", "get_settings"]
