"""Date and datetime helpers for submitted values and stored timestamps."""

from __future__ import annotations

from datetime import date, datetime, timezone

DATE_FORMATS: list[str] = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
]


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC.

    SQLite drops tzinfo on round-trip, so every comparison against "now"
    goes through here.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date_value(value: object) -> date | None:
    """Parse a submitted date-of-birth style value into a date.

    Accepts date/datetime objects, ISO dates, ISO timestamps (with or without
    a trailing Z) and the common month/day/year layouts. Returns None for
    anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    iso_candidate = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(iso_candidate).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def format_display_date(value: datetime | date | None) -> str:
    """Human-readable date used in notification emails (e.g. 6/15/2024)."""
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"
