"""Typed data transformation module."""

from typed_transform.transformation.converters import Converter, ConverterRegistry
from typed_transform.transformation.custom import CustomTransformerRegistry
from typed_transform.transformation.defaults import default_value_for, resolve_null
from typed_transform.transformation.detector import detect_type, normalize_target_type
from typed_transform.transformation.dialects import format_for_dialect
from typed_transform.transformation.engine import (
    DataTransformationEngine,
    RegistrySnapshot,
    get_engine,
    transform,
)
from typed_transform.transformation.exceptions import (
    ConversionError,
    TransformationError,
    ValidationError,
)
from typed_transform.transformation.models import (
    ColumnSpecification,
    TransformationContext,
    TransformationOutcome,
    TransformationResult,
)
from typed_transform.transformation.record_transformer import (
    BatchStatistics,
    BatchTransformationResult,
    RecordError,
    RecordErrorType,
    RecordTransformer,
    transform_records,
)
from typed_transform.transformation.table_spec import (
    TableColumn,
    TableSpecification,
    load_table_spec,
)
from typed_transform.transformation.types import Dialect, Severity, SourceType, TargetType
from typed_transform.transformation.validation import (
    ValidationReport,
    ValidationRule,
    ValidationRuleEngine,
)

__all__ = [
    "BatchStatistics",
    "BatchTransformationResult",
    "ColumnSpecification",
    "ConversionError",
    "Converter",
    "ConverterRegistry",
    "CustomTransformerRegistry",
    "DataTransformationEngine",
    "Dialect",
    "RecordError",
    "RecordErrorType",
    "RecordTransformer",
    "RegistrySnapshot",
    "Severity",
    "SourceType",
    "TableColumn",
    "TableSpecification",
    "TargetType",
    "TransformationContext",
    "TransformationError",
    "TransformationOutcome",
    "TransformationResult",
    "ValidationError",
    "ValidationReport",
    "ValidationRule",
    "ValidationRuleEngine",
    "default_value_for",
    "detect_type",
    "format_for_dialect",
    "get_engine",
    "load_table_spec",
    "normalize_target_type",
    "resolve_null",
    "transform",
    "transform_records",
]
