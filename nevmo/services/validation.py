"""
Input rules shared by the donate, save and withdraw operations.

Used by the request schemas at the HTTP boundary and by the operations
themselves, so a non-HTTP caller gets the same checks.
"""
import math
import re
from typing import Any

from nevmo.errors import ValidationError

MIN_AMOUNT = 100
MIN_PHONE_DIGITS = 10

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: Any) -> str:
    """Strip everything but digits; at least 10 must remain."""
    if isinstance(phone, int) and not isinstance(phone, bool):
        phone = str(phone)
    if not isinstance(phone, str) or not phone.strip():
        raise ValidationError("Valid phone number required")
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) < MIN_PHONE_DIGITS:
        raise ValidationError("Invalid phone number")
    return digits


def check_amount(amount: Any) -> float:
    """Numbers and numeric strings are accepted; booleans are not."""
    if isinstance(amount, bool) or amount is None:
        raise ValidationError(f"Amount (min {MIN_AMOUNT}) required")
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if not math.isfinite(value) or value < MIN_AMOUNT:
        raise ValidationError(f"Amount must be at least {MIN_AMOUNT}")
    return value


def require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()
