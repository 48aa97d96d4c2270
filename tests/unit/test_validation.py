"""
Unit tests for contact field validation and lead schemas.
"""
import pytest
from pydantic import ValidationError

from realtyapi.schemas.lead import BuyerQuestionnaireCreate, SellerLeadCreate
from realtyapi.utils import digits_only, format_phone_number, is_valid_email, is_valid_phone


@pytest.mark.parametrize("email, valid", [
    ("jane@example.com", True),
    ("first.last+tag@mail.example.co", True),
    ("jane@example", False),
    ("jane example@example.com", False),
    ("@example.com", False),
    ("", False),
])
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


@pytest.mark.parametrize("phone, valid", [
    ("5551234567", True),
    ("(555) 123-4567", True),
    ("555.123.4567", True),
    ("555-1234", False),
    ("15551234567", False),
    ("", False),
])
def test_is_valid_phone(phone, valid):
    assert is_valid_phone(phone) is valid


@pytest.mark.parametrize("value, expected", [
    ("", ""),
    ("5", "5"),
    ("555", "555"),
    ("5551", "(555) 1"),
    ("555123", "(555) 123"),
    ("5551234", "(555) 123-4"),
    ("5551234567", "(555) 123-4567"),
    ("555-123-45678999", "(555) 123-4567"),
    ("abc", ""),
])
def test_format_phone_number(value, expected):
    assert format_phone_number(value) == expected


def test_digits_only():
    assert digits_only("(555) 123-4567") == "5551234567"
    assert digits_only(None) == ""


def _lead(**overrides):
    data = {
        "street": " 1 Elm St ",
        "city": "Irvine",
        "state": "CA",
        "zip": "92618",
        "name": "Jane",
        "phone": "5551234567",
        "email": " jane@example.com ",
    }
    data.update(overrides)
    return data


def test_seller_lead_normalizes_fields():
    lead = SellerLeadCreate(**_lead())

    assert lead.street == "1 Elm St"
    assert lead.email == "jane@example.com"
    assert lead.phone == "(555) 123-4567"
    assert lead.bedrooms is None


def test_seller_lead_rejects_bad_contact():
    with pytest.raises(ValidationError):
        SellerLeadCreate(**_lead(email="not-an-email"))
    with pytest.raises(ValidationError):
        SellerLeadCreate(**_lead(phone="12345"))


def test_buyer_questionnaire_requires_answers():
    with pytest.raises(ValidationError):
        BuyerQuestionnaireCreate(
            first_time_buyer="yes", timeframe="", pre_qualified="no",
            house_to_sell="no", has_agent="no",
        )
