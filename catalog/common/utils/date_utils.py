"""
Date and time utility functions.
"""

from datetime import datetime, timezone


def now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Gắn UTC cho datetime naive (SQLite trả về giá trị không có tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
