"""Canonical type tags, severities and destination dialects."""

from enum import Enum
from typing import Union


class SourceType(str, Enum):
    """Semantic classification of a raw input value."""

    UUID = "UUID"
    EMAIL = "EMAIL"
    URL = "URL"
    PHONE = "PHONE"
    DATE_STRING = "DATE_STRING"
    TIME_STRING = "TIME_STRING"
    NUMERIC_STRING = "NUMERIC_STRING"
    BOOLEAN_STRING = "BOOLEAN_STRING"
    JSON_STRING = "JSON_STRING"
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    DATE_OBJECT = "DATE_OBJECT"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"
    UNKNOWN = "UNKNOWN"

    @property
    def is_string_derived(self) -> bool:
        """True for tags that only ever classify ``str`` values."""
        return self in _STRING_DERIVED

    def __str__(self) -> str:
        return self.value


_STRING_DERIVED = frozenset(
    {
        SourceType.UUID,
        SourceType.EMAIL,
        SourceType.URL,
        SourceType.PHONE,
        SourceType.DATE_STRING,
        SourceType.TIME_STRING,
        SourceType.NUMERIC_STRING,
        SourceType.BOOLEAN_STRING,
        SourceType.JSON_STRING,
        SourceType.STRING,
    }
)


class TargetType(str, Enum):
    """Canonical classification of a destination column type."""

    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DATETIME = "DATETIME"
    UUID = "UUID"
    JSON = "JSON"

    def __str__(self) -> str:
        return self.value


class Severity(str, Enum):
    """Severity of a failed validation rule."""

    ERROR = "ERROR"  # Aborts the transformation
    WARNING = "WARNING"
    INFO = "INFO"


class Dialect(str, Enum):
    """Destination systems with their own temporal/boolean conventions."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLSERVER = "sqlserver"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, value: Union["Dialect", str]) -> "Dialect":
        """Parse a dialect tag case-insensitively."""
        if isinstance(value, Dialect):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = [d.value for d in cls]
            raise ValueError(f"Unknown dialect: {value}. Must be one of {valid}") from None


def as_source_type(value: Union[SourceType, str]) -> SourceType:
    """Coerce a tag name into a SourceType."""
    if isinstance(value, SourceType):
        return value
    return SourceType(str(value).upper())


def as_target_type(value: Union[TargetType, str]) -> TargetType:
    """Coerce a tag name into a TargetType."""
    if isinstance(value, TargetType):
        return value
    return TargetType(str(value).upper())
