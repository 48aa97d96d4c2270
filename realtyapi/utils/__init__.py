from .validation import digits_only, format_phone_number, is_valid_email, is_valid_phone

__all__ = ["digits_only", "format_phone_number", "is_valid_email", "is_valid_phone"]
