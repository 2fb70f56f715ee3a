"""Shared helpers for Supabase repositories."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from uuid import UUID

import httpx
from postgrest.exceptions import APIError

from meal_planner.errors import StoreError

UNIQUE_VIOLATION = "23505"

_logger = logging.getLogger(__name__)


@contextmanager
def store_call(action: str) -> Iterator[None]:
    """Translate PostgREST and transport failures into StoreError."""
    try:
        yield
    except APIError as exc:
        _logger.error(
            "Supabase %s failed: code=%s message=%s", action, exc.code, exc.message
        )
        raise StoreError(action) from exc
    except httpx.HTTPError as exc:
        _logger.error("Supabase %s failed: %s", action, exc)
        raise StoreError(action) from exc


def parse_uuid(value: object) -> UUID | None:
    """Return a UUID for a non-empty column value."""
    if not value:
        return None
    return UUID(str(value))


def parse_date(value: object) -> date | None:
    """Return a date from an ISO date or timestamp column."""
    if not isinstance(value, str) or not value:
        return None
    if len(value) == 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value).date()


def parse_datetime(value: object) -> datetime | None:
    """Return a datetime from an ISO timestamp column."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def optional_float(value: object) -> float | None:
    """Return a float, preserving nulls."""
    if value is None:
        return None
    return float(value)
