from __future__ import annotations

from datetime import datetime


def format_date(value) -> str:
    """Render a stored timestamp as a short date for API rows."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]
