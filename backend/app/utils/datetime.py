"""
Timezone-aware datetime utilities.

Columns are TIMESTAMP WITHOUT TIME ZONE, so stored values are naive UTC.
datetime.utcnow() is deprecated in Python 3.12+; these helpers derive
everything from datetime.now(timezone.utc) instead.
"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """
    Get current UTC time as a timezone-aware datetime object.

    Example:
        >>> from app.utils.datetime import utcnow
        >>> now = utcnow()
        >>> print(now.tzinfo)  # UTC
    """
    return datetime.now(timezone.utc)


def utcnow_naive() -> datetime:
    """
    Get current UTC time as a timezone-naive datetime object.

    Use this for SQLAlchemy column defaults when the database column
    is TIMESTAMP WITHOUT TIME ZONE (which is the default in PostgreSQL).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_ago_naive(days: int) -> datetime:
    """Naive UTC timestamp `days` days before now (dashboard "recent" window)."""
    return utcnow_naive() - timedelta(days=days)
