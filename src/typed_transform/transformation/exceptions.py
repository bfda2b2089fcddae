"""Hard failures raised by the transformation engine."""

from typing import Any, List, Optional


class TransformationError(Exception):
    """Base exception for a value that cannot be transformed."""

    def __init__(self, message: str, column: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.column = column
        self.value = value


class ValidationError(TransformationError):
    """Raised when an ERROR-severity validation rule fails."""

    def __init__(
        self,
        errors: List[str],
        column: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(f"Validation failed: {', '.join(errors)}", column=column, value=value)
        self.errors = list(errors)


class ConversionError(TransformationError):
    """Raised when the selected converter cannot coerce a value."""

    def __init__(
        self,
        message: str,
        source_type: Optional[str] = None,
        target_type: Optional[str] = None,
        column: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message, column=column, value=value)
        self.source_type = source_type
        self.target_type = target_type
