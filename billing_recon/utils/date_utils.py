"""Helpers for date normalization of SQL rows."""

from datetime import date, datetime


def coerce_date(value) -> date | None:
    """Normalize a raw date value.

    Args:
        value: Date, datetime or ISO string returned by a driver.

    Returns:
        date | None: Parsed date, or None when absent.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def coerce_datetime(value) -> datetime | None:
    """Normalize a raw timestamp value.

    Args:
        value: Datetime or ISO string returned by a driver.

    Returns:
        datetime | None: Parsed timestamp, or None when absent.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


__all__ = ["coerce_date", "coerce_datetime"]
