from __future__ import annotations
from datetime import datetime, timezone

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utc_now() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_slug_date(value: datetime) -> str:
    d = to_naive_utc(value)
    return f"{d.day:02d}-{d.month:02d}-{d.year:04d}"


def format_display_date(value: datetime) -> str:
    """Display form, e.g. "March 5, 2024". Same UTC calendar day as the slug suffix."""
    d = to_naive_utc(value)
    return f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
