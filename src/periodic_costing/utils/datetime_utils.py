"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from periodic_costing.utils.datetime_utils import utc_now

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    This is the replacement for the deprecated datetime.utcnow().

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def format_period_timestamp(value: datetime) -> str:
    """Format a period boundary for display names.

    Uses ISO formatting so names do not depend on locale settings.

    Args:
        value: Period start or end timestamp

    Returns:
        String like "2024-01-05 08:00"
    """
    return value.strftime("%Y-%m-%d %H:%M")
