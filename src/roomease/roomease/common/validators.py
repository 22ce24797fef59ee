from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_email(value: str) -> str:
    value = require_non_empty(value, "Email")
    if not EMAIL_RE.match(value):
        raise ValidationError("Please enter a valid email address")
    return value


def parse_capacity(value) -> int:
    """Parse a user-entered room capacity (non-negative integer)."""
    try:
        capacity = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("Please enter a valid capacity")
    if capacity < 0:
        raise ValidationError("Please enter a valid capacity")
    return capacity


def normalize_phone(phone_no: str) -> str:
    """Local 10-digit numbers (0XXXXXXXXX) are stored with the country prefix: 60XXXXXXXXX."""
    phone_no = (phone_no or "").strip()
    if phone_no.startswith("0") and len(phone_no) == 10:
        return f"6{phone_no}"
    return phone_no


def to_e164(phone_no: Optional[str]) -> Optional[str]:
    """Format a stored phone number for the SMS provider."""
    phone_no = str(phone_no or "").strip()
    if not phone_no:
        return None
    if phone_no.startswith("+"):
        return phone_no
    if phone_no.startswith("60"):
        return f"+{phone_no}"
    if phone_no.startswith("0"):
        return f"+6{phone_no}"
    return f"+{phone_no}"
