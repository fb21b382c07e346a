"""Generic helpers shared across layers."""

from datetime import date, datetime, timezone
from pathlib import Path


def get_project_root() -> Path:
    """Return the repository root directory."""
    return Path(__file__).resolve().parents[2]


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def parse_datetime(value) -> datetime | None:
    """Read a timestamp returned by the database driver.

    PostgreSQL drivers return datetime objects while SQLite hands back the
    ISO strings written by the repositories.

    Args:
        value: Raw column value.

    Returns:
        datetime | None: Parsed timestamp, or None for NULL columns.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def parse_date(value) -> date | None:
    """Read a calendar date from a driver value or ISO string.

    Args:
        value: Raw column or caller value.

    Returns:
        date | None: Parsed date, or None for NULL columns.

    Raises:
        ValueError: If the value is not a date, datetime or ISO string.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(
        "Dates must be provided as ISO strings or date/datetime instances."
    )


__all__ = ["get_project_root", "utc_now", "parse_datetime", "parse_date"]
