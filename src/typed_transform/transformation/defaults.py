"""Null handling and default value synthesis for non-nullable columns."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from typed_transform.transformation.detector import normalize_target_type
from typed_transform.transformation.models import TransformationContext, TransformationResult
from typed_transform.transformation.types import TargetType

logger = logging.getLogger(__name__)

NULL_UUID = "00000000-0000-0000-0000-000000000000"
DEFAULT_CONFIDENCE = 0.5


def _now() -> datetime:
    return datetime.now(timezone.utc)


# Every TargetType must have an entry
DEFAULT_FACTORIES: Dict[TargetType, Callable[[], Any]] = {
    TargetType.STRING: lambda: "",
    TargetType.INTEGER: lambda: 0,
    TargetType.FLOAT: lambda: 0,
    TargetType.BOOLEAN: lambda: False,
    TargetType.DATE: _now,
    TargetType.DATETIME: _now,
    TargetType.UUID: lambda: NULL_UUID,
    TargetType.JSON: lambda: "",
}


def default_value_for(target_type: TargetType) -> Any:
    """Synthesize the canonical default for a target type."""
    return DEFAULT_FACTORIES[target_type]()


def resolve_null(context: TransformationContext) -> TransformationResult:
    """
    Decide the outcome for an absent value.

    Nullable columns keep ``None``. Non-nullable columns receive a
    type-appropriate default, flagged with a warning and reduced confidence.
    """
    column = context.target_column
    if column.nullable:
        return TransformationResult(value=None)

    target_type = normalize_target_type(column.type)
    default_value = default_value_for(target_type)
    logger.debug(
        f"Substituting default {default_value!r} for NOT NULL column {column.name}"
    )
    return TransformationResult(
        value=default_value,
        warnings=[f"Column {column.name} is NOT NULL, using default value: {default_value}"],
        transformations=["NULL_TO_DEFAULT"],
        confidence=DEFAULT_CONFIDENCE,
    )
