"""Date helpers for catalog payloads and year ranges."""

from __future__ import annotations

from datetime import date


def parse_date(value: str | None) -> date | None:
    """Parse YYYY, YYYY-MM, or YYYY-MM-DD strings into dates."""
    if not value:
        return None
    try:
        if len(value) == 4:
            return date.fromisoformat(f"{value}-01-01")
        if len(value) == 7:
            return date.fromisoformat(f"{value}-01")
        return date.fromisoformat(value)
    except ValueError:
        return None


def release_year(value: str | None) -> int | None:
    """Return the year component of a catalog release date, if any."""
    parsed = parse_date(value)
    return parsed.year if parsed else None


def year_start_bound(year: int) -> str:
    return f"{year}-01-01"


def year_end_bound(year: int, *, today: date | None = None) -> str:
    """Close a year range, capping open-ended or current years at today."""
    today = today or date.today()
    if year >= today.year:
        return today.isoformat()
    return f"{year}-12-31"
