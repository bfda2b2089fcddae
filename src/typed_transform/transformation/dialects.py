"""Destination-specific serialization of temporal and boolean values."""

from datetime import date, datetime, time, timezone
from typing import Any, Union

from typed_transform.transformation.types import Dialect


def _as_utc(value: Union[datetime, date]) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        # Naive values are taken to be UTC already
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_instant(value: Union[datetime, date]) -> str:
    """ISO-8601 UTC instant with milliseconds, e.g. ``2024-01-01T00:00:00.000Z``."""
    instant = _as_utc(value)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


def space_separated(value: Union[datetime, date]) -> str:
    """Date and time joined by a space, fractions and zone dropped."""
    return _as_utc(value).strftime("%Y-%m-%d %H:%M:%S")


def _resolve(dialect: Union[Dialect, str, None]):
    try:
        return Dialect.parse(dialect)
    except ValueError:
        return None


def format_temporal(value: Union[datetime, date], dialect: Union[Dialect, str, None]) -> str:
    if _resolve(dialect) == Dialect.MYSQL:
        return space_separated(value)
    # PostgreSQL, SQL Server, SQLite and anything unrecognized
    return iso_instant(value)


def format_boolean(value: bool, dialect: Union[Dialect, str, None]) -> Union[bool, int]:
    if _resolve(dialect) == Dialect.POSTGRESQL:
        return value
    return 1 if value else 0


def format_for_dialect(value: Any, dialect: Union[Dialect, str, None]) -> Any:
    """Apply dialect formatting to temporal and boolean values; pass others through."""
    if isinstance(value, (datetime, date)):
        return format_temporal(value, dialect)
    if isinstance(value, bool):
        return format_boolean(value, dialect)
    return value
