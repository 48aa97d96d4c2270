"""
Unit tests for listing sort options.
"""
import pytest

from realtyapi.client import SortOption, normalize_price, sort_properties
from realtyapi.schemas.crmls import Property


@pytest.fixture
def properties():
    return [
        Property(id="a", list_price=500000, bedrooms=2, bathrooms=1, living_area=900,
                 year_built=1985, listing_date="2024-03-01"),
        Property(id="b", list_price="$1,200,000", bedrooms=4, bathrooms=3, living_area=2400,
                 year_built=2015, listing_date="2024-05-20"),
        Property(id="c", bedrooms=3, living_area=1500, year_built=2001),
        Property(id="d", list_price=750000, bedrooms=4, bathrooms=2, living_area=1600,
                 listing_date="2024-04-11"),
    ]


def _ids(items):
    return [p.id for p in items]


def test_labels():
    assert SortOption.PRICE_DESC.label == "Price - High to Low"
    assert SortOption.YEAR_DESC.label == "Year Built (Newest)"
    assert [o.value for o in SortOption] == [
        "default", "price-desc", "price-asc", "newest",
        "beds-desc", "baths-desc", "year-desc", "sqft-desc",
    ]


@pytest.mark.parametrize("value, expected", [
    (450000, 450000),
    ("$1,250,000", 1250000),
    ("Call for price", 0),
    (None, 0),
])
def test_normalize_price(value, expected):
    assert normalize_price(value) == expected


def test_formatted_price_is_parsed_on_the_model():
    assert Property(list_price="$1,200,000").list_price == 1200000


@pytest.mark.parametrize("option, expected", [
    (SortOption.DEFAULT, ["a", "b", "c", "d"]),
    (SortOption.PRICE_DESC, ["b", "d", "a", "c"]),
    (SortOption.PRICE_ASC, ["c", "a", "d", "b"]),
    (SortOption.NEWEST, ["b", "d", "a", "c"]),
    (SortOption.BEDS_DESC, ["b", "d", "c", "a"]),
    (SortOption.BATHS_DESC, ["b", "d", "a", "c"]),
    (SortOption.YEAR_DESC, ["b", "c", "a", "d"]),
    (SortOption.SQFT_DESC, ["b", "d", "c", "a"]),
])
def test_sort_orders(properties, option, expected):
    assert _ids(sort_properties(properties, option)) == expected


def test_accepts_option_values(properties):
    assert _ids(sort_properties(properties, "price-asc")) == ["c", "a", "d", "b"]


def test_does_not_mutate_input(properties):
    original = list(properties)
    result = sort_properties(properties, SortOption.PRICE_DESC)

    assert properties == original
    assert result is not properties


def test_dicts_with_string_prices():
    items = [{"id": "x", "list_price": "$300,000"}, {"id": "y", "list_price": "$900,000"}]
    assert _ids_from_dicts(sort_properties(items, SortOption.PRICE_DESC)) == ["y", "x"]


def _ids_from_dicts(items):
    return [item["id"] for item in items]


def test_unknown_option():
    with pytest.raises(ValueError):
        sort_properties([], "cheapest")
