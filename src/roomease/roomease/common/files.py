from __future__ import annotations

from typing import Optional


def build_file_url(base_url: str, collection: str, record_id: int, filename: Optional[str]) -> Optional[str]:
    """Public URL of an uploaded file (avatar, timetable) kept on the file server."""
    if not filename:
        return None
    return f"{base_url.rstrip('/')}/{collection}/{record_id}/{filename}"
