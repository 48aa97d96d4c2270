"""
Client-side ordering of listing results.
"""
import re
from enum import Enum
from typing import Any, Iterable, List, Union

from ..schemas.crmls import Property

_NON_DIGIT_RE = re.compile(r"[^0-9]")


class SortOption(str, Enum):
    DEFAULT = "default"
    PRICE_DESC = "price-desc"
    PRICE_ASC = "price-asc"
    NEWEST = "newest"
    BEDS_DESC = "beds-desc"
    BATHS_DESC = "baths-desc"
    YEAR_DESC = "year-desc"
    SQFT_DESC = "sqft-desc"

    @property
    def label(self) -> str:
        return SORT_LABELS[self]


SORT_LABELS = {
    SortOption.DEFAULT: "Default",
    SortOption.PRICE_DESC: "Price - High to Low",
    SortOption.PRICE_ASC: "Price - Low to High",
    SortOption.NEWEST: "Newest Listings",
    SortOption.BEDS_DESC: "Beds (Most)",
    SortOption.BATHS_DESC: "Baths (Most)",
    SortOption.YEAR_DESC: "Year Built (Newest)",
    SortOption.SQFT_DESC: "Square Feet (Biggest)",
}


def normalize_price(price: Union[str, int, float, None]) -> float:
    """Numeric value of a price that may be formatted, e.g. ``"$1,250,000"``."""
    if price is None:
        return 0
    if isinstance(price, (int, float)):
        return price
    digits = _NON_DIGIT_RE.sub("", str(price))
    return int(digits) if digits else 0


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _number(item: Any, name: str) -> float:
    value = _field(item, name)
    return value if isinstance(value, (int, float)) else 0


# option -> (key, descending)
_SORT_KEYS = {
    SortOption.PRICE_DESC: (lambda p: normalize_price(_field(p, "list_price")), True),
    SortOption.PRICE_ASC: (lambda p: normalize_price(_field(p, "list_price")), False),
    SortOption.NEWEST: (lambda p: _field(p, "listing_date") or "", True),
    SortOption.BEDS_DESC: (lambda p: _number(p, "bedrooms"), True),
    SortOption.BATHS_DESC: (lambda p: _number(p, "bathrooms"), True),
    SortOption.YEAR_DESC: (lambda p: _number(p, "year_built"), True),
    SortOption.SQFT_DESC: (lambda p: _number(p, "living_area"), True),
}


def sort_properties(
    properties: Iterable[Property],
    option: Union[SortOption, str] = SortOption.DEFAULT,
) -> List[Property]:
    """Return a new list of properties in the requested order.

    The input is never mutated. ``default`` keeps the original order and
    ties keep their relative order for every other option.
    """
    option = SortOption(option)
    result = list(properties)
    if option is SortOption.DEFAULT:
        return result

    key, descending = _SORT_KEYS[option]
    result.sort(key=key, reverse=descending)
    return result


__all__ = ["SortOption", "SORT_LABELS", "normalize_price", "sort_properties"]
