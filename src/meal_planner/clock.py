"""Calendar helpers shared by services and routes."""

from datetime import UTC, date, datetime


def utc_today() -> date:
    """Return the current date in UTC."""
    return datetime.now(tz=UTC).date()
