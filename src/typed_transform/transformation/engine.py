"""Transformation orchestrator: the single per-value entry point."""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from typed_transform.transformation.converters import Converter, ConverterKey, ConverterRegistry
from typed_transform.transformation.custom import CustomTransformer, CustomTransformerRegistry
from typed_transform.transformation.defaults import resolve_null
from typed_transform.transformation.detector import detect_type, normalize_target_type
from typed_transform.transformation.dialects import format_for_dialect
from typed_transform.transformation.exceptions import TransformationError, ValidationError
from typed_transform.transformation.models import (
    TransformationContext,
    TransformationOutcome,
    TransformationResult,
)
from typed_transform.transformation.types import SourceType, TargetType
from typed_transform.transformation.validation import (
    ValidationReport,
    ValidationRule,
    ValidationRuleEngine,
)

logger = logging.getLogger(__name__)


class RegistrySnapshot(BaseModel):
    """Point-in-time, read-only view of every engine registry."""

    model_config = ConfigDict(frozen=True)

    converters: Dict[ConverterKey, Tuple[Converter, ...]]
    validation_rules: Dict[TargetType, Tuple[ValidationRule, ...]]
    custom_transformers: Dict[str, Callable[[Any], Any]]


class DataTransformationEngine:
    """
    Transforms loosely-typed values into values fit for a destination column.

    Pipeline per value: null check, type detection, validation, conversion
    (only when source and target types differ), custom column hook and
    dialect formatting. Validation and conversion failures abort the value;
    every other anomaly degrades to a warning on the result.
    """

    def __init__(
        self,
        converters: Optional[ConverterRegistry] = None,
        validation_rules: Optional[ValidationRuleEngine] = None,
        custom_transformers: Optional[CustomTransformerRegistry] = None,
    ):
        self.converters = converters or ConverterRegistry()
        self.validation_rules = validation_rules or ValidationRuleEngine()
        self.custom_transformers = custom_transformers or CustomTransformerRegistry()

    def transform(self, value: Any, context: TransformationContext) -> TransformationResult:
        """
        Transform a value to match the target column specification.

        Args:
            value: Raw value, as produced by JSON parsing
            context: Per-value transformation context

        Returns:
            TransformationResult with final value, warnings, tags and confidence

        Raises:
            ValidationError: If an ERROR-severity rule fails
            ConversionError: If the selected converter cannot coerce the value
        """
        column = context.target_column

        if value is None:
            return resolve_null(context)

        source_type = detect_type(value)
        target_type = normalize_target_type(column.type)
        logger.debug(
            f"Transforming {column.name}[{context.record_index}]: "
            f"{source_type.value} -> {target_type.value}"
        )

        result = TransformationResult(value=value)

        report = self.validation_rules.validate(value, context)
        result.warnings.extend(report.warnings)
        if report.has_errors:
            logger.debug(f"Validation failed for column {column.name}: {report.errors}")
            raise ValidationError(report.errors, column=column.name, value=value)

        if not self._types_match(source_type, target_type):
            result.merge(self.converters.convert(value, source_type, target_type, context))

        result.merge(self.custom_transformers.apply(result.value, context))

        result.value = format_for_dialect(result.value, context.database_type)
        return result

    def try_transform(self, value: Any, context: TransformationContext) -> TransformationOutcome:
        """Like transform(), but hard failures are returned instead of raised."""
        try:
            return TransformationOutcome.success(self.transform(value, context))
        except TransformationError as e:
            return TransformationOutcome.failure(e)

    @staticmethod
    def _types_match(source_type: SourceType, target_type: TargetType) -> bool:
        # Source and target tags share names where they overlap (UUID, STRING, ...)
        return source_type.value == target_type.value

    def validate(self, value: Any, context: TransformationContext) -> ValidationReport:
        return self.validation_rules.validate(value, context)

    def detect_type(self, value: Any) -> SourceType:
        return detect_type(value)

    def normalize_target_type(self, declared_type: str) -> TargetType:
        return normalize_target_type(declared_type)

    def add_custom_transformer(self, column_name: str, transformer: CustomTransformer) -> None:
        """Register a hook applied to every converted value of a column."""
        self.custom_transformers.add(column_name, transformer)

    def add_validation_rule(
        self, target_type: Union[TargetType, str], rule: ValidationRule
    ) -> None:
        """Register a validation rule for a canonical target type."""
        self.validation_rules.add_rule(target_type, rule)

    def add_type_converter(
        self,
        source_type: Union[SourceType, str],
        target_type: Union[TargetType, str],
        converter: Union[Converter, Callable[[Any, TransformationContext], Any]],
        confidence: float = 1.0,
    ) -> Converter:
        """Register an additional converter; built-ins are never removed."""
        return self.converters.register(source_type, target_type, converter, confidence)

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            converters=self.converters.snapshot(),
            validation_rules=self.validation_rules.snapshot(),
            custom_transformers=self.custom_transformers.snapshot(),
        )


_default_engine: Optional[DataTransformationEngine] = None
_default_engine_lock = threading.Lock()


def get_engine() -> DataTransformationEngine:
    """Process-wide engine, created with built-ins on first use."""
    global _default_engine
    if _default_engine is None:
        with _default_engine_lock:
            if _default_engine is None:
                _default_engine = DataTransformationEngine()
    return _default_engine


def transform(value: Any, context: TransformationContext) -> TransformationResult:
    """Transform a value with the process-wide engine."""
    return get_engine().transform(value, context)
