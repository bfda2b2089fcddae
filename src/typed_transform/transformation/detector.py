"""Source type detection and target type normalization."""

import json
import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from numbers import Integral, Real
from typing import Any
from urllib.parse import urlparse

from dateutil import parser as date_parser

from typed_transform.transformation.types import SourceType, TargetType

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{10,}$")
TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?(\s?(AM|PM))?$", re.IGNORECASE)
URL_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

TRUE_TOKENS = frozenset({"true", "1", "yes", "y", "on"})
FALSE_TOKENS = frozenset({"false", "0", "no", "n", "off"})
BOOLEAN_TOKENS = TRUE_TOKENS | FALSE_TOKENS

# Two distinct fallbacks: a string names a full calendar date only when the
# parsed date does not depend on which fallback was supplied.
_DATE_PROBES = (datetime(1904, 2, 29), datetime(2001, 11, 7))


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


def is_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_url(value: str) -> bool:
    """True when the string parses as an absolute URI (scheme plus a body)."""
    if any(ch.isspace() for ch in value):
        return False
    parsed = urlparse(value)
    if not parsed.scheme or not URL_SCHEME_PATTERN.match(parsed.scheme):
        return False
    return bool(parsed.netloc or parsed.path)


def is_phone_number(value: str) -> bool:
    if not PHONE_PATTERN.match(value):
        return False
    return sum(ch.isdigit() for ch in value) >= 10


def parse_plain_float(value: str) -> float:
    """
    Parse a trimmed string as a float, without Python-only literal forms.

    Raises:
        ValueError: If the string is not a number or uses digit-group
            underscores such as ``1_000``
    """
    stripped = value.strip()
    if "_" in stripped:
        raise ValueError(f"Digit separators are not allowed: {value!r}")
    return float(stripped)


def is_numeric(value: str) -> bool:
    """True when the whole (trimmed) string parses as a finite or infinite number."""
    stripped = value.strip()
    if not stripped:
        return False
    try:
        parse_plain_float(stripped)
    except ValueError:
        return False
    return stripped.lower() not in {"nan", "+nan", "-nan"}


def parse_calendar_date(value: str) -> datetime:
    """
    Parse a string that names a calendar date.

    Raises:
        ValueError: If the string is numeric-only, partial (e.g. only a time
            or only a year) or not a date at all.
    """
    stripped = value.strip()
    if not stripped or is_numeric(stripped):
        raise ValueError(f"Not a calendar date: {value!r}")
    try:
        first, second = (date_parser.parse(stripped, default=probe) for probe in _DATE_PROBES)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Not a calendar date: {value!r}") from e
    if first.date() != second.date():
        raise ValueError(f"Incomplete calendar date: {value!r}")
    return first


def is_date(value: str) -> bool:
    try:
        parse_calendar_date(value)
    except ValueError:
        return False
    return True


def is_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value))


def is_boolean(value: str) -> bool:
    return value.lower() in BOOLEAN_TOKENS


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def is_json(value: str) -> bool:
    try:
        json.loads(value, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True


# Fixed priority order, first match wins
_STRING_CHECKS = (
    (is_uuid, SourceType.UUID),
    (is_email, SourceType.EMAIL),
    (is_url, SourceType.URL),
    (is_phone_number, SourceType.PHONE),
    (is_date, SourceType.DATE_STRING),
    (is_time, SourceType.TIME_STRING),
    (is_numeric, SourceType.NUMERIC_STRING),
    (is_boolean, SourceType.BOOLEAN_STRING),
    (is_json, SourceType.JSON_STRING),
)


def detect_string_type(value: str) -> SourceType:
    for check, source_type in _STRING_CHECKS:
        if check(value):
            return source_type
    return SourceType.STRING


def is_integral_number(value: Any) -> bool:
    """True for numbers without a fractional part (bools excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, Integral):
        return True
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    if isinstance(value, Real):
        return math.isfinite(value) and float(value).is_integer()
    return False


def detect_type(value: Any) -> SourceType:
    """
    Classify a raw value into a source type tag.

    Never raises; ``None`` is expected to be handled by the caller.
    """
    if isinstance(value, str):
        return detect_string_type(value)
    if isinstance(value, bool):
        return SourceType.BOOLEAN
    if isinstance(value, (Real, Decimal)):
        return SourceType.INTEGER if is_integral_number(value) else SourceType.FLOAT
    if isinstance(value, (datetime, date)):
        return SourceType.DATE_OBJECT
    if isinstance(value, (list, tuple, set, frozenset)):
        return SourceType.ARRAY
    if isinstance(value, Mapping):
        return SourceType.OBJECT
    return SourceType.UNKNOWN


def normalize_target_type(declared_type: str) -> TargetType:
    """
    Map a declared column type onto a canonical target type.

    Substring checks run in a fixed order; DATE is tested before TIME so
    ``DATETIME`` normalizes to DATE.
    """
    type_upper = (declared_type or "").upper()

    if "VARCHAR" in type_upper or "TEXT" in type_upper or "CHAR" in type_upper:
        return TargetType.STRING
    if "INT" in type_upper or "BIGINT" in type_upper or "SMALLINT" in type_upper:
        return TargetType.INTEGER
    if any(token in type_upper for token in ("DECIMAL", "NUMERIC", "FLOAT", "DOUBLE")):
        return TargetType.FLOAT
    if "BOOLEAN" in type_upper or "BIT" in type_upper:
        return TargetType.BOOLEAN
    if "DATE" in type_upper:
        return TargetType.DATE
    if "TIME" in type_upper or "TIMESTAMP" in type_upper:
        return TargetType.DATETIME
    if "UUID" in type_upper:
        return TargetType.UUID
    if "JSON" in type_upper:
        return TargetType.JSON

    return TargetType.STRING
