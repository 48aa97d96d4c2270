"""
Contact field validation helpers used by the lead capture forms.
"""
import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NON_DIGIT_RE = re.compile(r"\D")


def digits_only(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value or "")


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def is_valid_phone(phone: str) -> bool:
    """A phone number is valid when it has exactly 10 digits, ignoring punctuation."""
    return len(digits_only(phone)) == 10


def format_phone_number(value: str) -> str:
    """Format digits progressively as ``(XXX) XXX-XXXX``, keeping at most 10 digits."""
    digits = digits_only(value)[:10]

    if len(digits) == 0:
        return ""
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
