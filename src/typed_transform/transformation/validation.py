"""Validation rules evaluated against raw values before conversion."""

import logging
import re
import threading
from decimal import Decimal, InvalidOperation
from numbers import Integral, Real
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from typed_transform.transformation.detector import normalize_target_type
from typed_transform.transformation.models import TransformationContext
from typed_transform.transformation.types import Severity, TargetType, as_target_type

logger = logging.getLogger(__name__)

SMALLINT_RANGE = (-32768, 32767)
INTEGER_RANGE = (-2147483648, 2147483647)
BIGINT_RANGE = (-9223372036854775808, 9223372036854775807)

UUID_SHAPE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
DECLARED_LENGTH = re.compile(r"CHAR\s*\(\s*(\d+)\s*\)", re.IGNORECASE)


class ValidationRule(BaseModel):
    """Named, severity-tagged predicate over (value, context)."""

    model_config = ConfigDict(frozen=True)

    name: str
    predicate: Callable[[Any, TransformationContext], bool]
    message: str
    severity: Severity = Severity.ERROR


class ValidationReport(BaseModel):
    """Aggregate outcome of every rule registered for a target type."""

    has_errors: bool = False
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


def _numeric_value(value: Any) -> Optional[Decimal]:
    """Extract a comparable number from a raw value, or None when it has none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        # No string round-trip: str() refuses very long ints
        return Decimal(int(value))
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, Real):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
        if "_" in text:
            return None
    else:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def integer_range_for(declared_type: str) -> Tuple[int, int]:
    """Valid range for an integer column, keyed to its declared subtype."""
    type_upper = declared_type.upper()
    if "SMALLINT" in type_upper:
        return SMALLINT_RANGE
    if "BIGINT" in type_upper:
        return BIGINT_RANGE
    return INTEGER_RANGE


def _non_empty(value: Any, context: TransformationContext) -> bool:
    return not isinstance(value, str) or len(value) > 0


def _within_declared_length(value: Any, context: TransformationContext) -> bool:
    if not isinstance(value, str):
        return True
    match = DECLARED_LENGTH.search(context.target_column.type)
    if match is None:
        return True
    return len(value) <= int(match.group(1))


def _within_integer_range(value: Any, context: TransformationContext) -> bool:
    number = _numeric_value(value)
    if number is None:
        # Non-numeric input is left for the converter to reject
        return True
    low, high = integer_range_for(context.target_column.type)
    return low <= number <= high


def _uuid_shape(value: Any, context: TransformationContext) -> bool:
    return bool(UUID_SHAPE.match(str(value)))


def builtin_rules() -> Dict[TargetType, Tuple[ValidationRule, ...]]:
    return {
        TargetType.STRING: (
            ValidationRule(
                name="NON_EMPTY",
                predicate=_non_empty,
                message="String cannot be empty",
                severity=Severity.WARNING,
            ),
            ValidationRule(
                name="LENGTH_LIMIT",
                predicate=_within_declared_length,
                message="String exceeds maximum length",
                severity=Severity.ERROR,
            ),
        ),
        TargetType.INTEGER: (
            ValidationRule(
                name="RANGE_CHECK",
                predicate=_within_integer_range,
                message="Value outside valid range for integer type",
                severity=Severity.ERROR,
            ),
        ),
        TargetType.UUID: (
            ValidationRule(
                name="VALID_UUID_FORMAT",
                predicate=_uuid_shape,
                message="Invalid UUID format",
                severity=Severity.ERROR,
            ),
        ),
    }


class ValidationRuleEngine:
    """Append-only registry of validation rules per target type."""

    def __init__(self, include_builtins: bool = True):
        self._lock = threading.Lock()
        self._rules: Dict[TargetType, Tuple[ValidationRule, ...]] = (
            builtin_rules() if include_builtins else {}
        )

    def add_rule(self, target_type: Union[TargetType, str], rule: ValidationRule) -> None:
        """Register a rule; it is evaluated after every earlier rule for the type."""
        target = as_target_type(target_type)
        with self._lock:
            rules = dict(self._rules)
            rules[target] = rules.get(target, ()) + (rule,)
            self._rules = rules
        logger.debug(f"Registered validation rule {rule.name} for {target.value}")

    def rules_for(self, target_type: Union[TargetType, str]) -> Tuple[ValidationRule, ...]:
        return self._rules.get(as_target_type(target_type), ())

    def snapshot(self) -> Dict[TargetType, Tuple[ValidationRule, ...]]:
        return dict(self._rules)

    def validate(self, value: Any, context: TransformationContext) -> ValidationReport:
        """
        Evaluate every rule registered for the column's normalized type.

        A predicate that raises is reported as a warning so a broken rule
        cannot block legitimate data.
        """
        target_type = normalize_target_type(context.target_column.type)
        report = ValidationReport()

        for rule in self.rules_for(target_type):
            try:
                passed = rule.predicate(value, context)
            except Exception as e:
                logger.warning(f"Validation rule {rule.name} failed to evaluate: {e}")
                report.warnings.append(f"Validation rule {rule.name} failed to evaluate: {e}")
                continue

            if passed:
                continue

            message = f"{rule.name}: {rule.message}"
            if rule.severity == Severity.ERROR:
                report.errors.append(message)
            else:
                report.warnings.append(message)

        report.has_errors = bool(report.errors)
        return report
