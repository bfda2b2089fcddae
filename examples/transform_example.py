"""Example demonstrating value and batch transformation."""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from typed_transform.transformation import (
    ColumnSpecification,
    DataTransformationEngine,
    RecordTransformer,
    Severity,
    TransformationContext,
    ValidationRule,
)
from typed_transform.utils.logging import get_logger, setup_logging

# Setup logging
setup_logging(level="INFO", format_type="console")

logger = get_logger(__name__)


def example_single_values():
    """Transform individual values into typed columns."""
    engine = DataTransformationEngine()

    samples = [
        ("42", ColumnSpecification(name="age", type="INTEGER")),
        ({"a": 1}, ColumnSpecification(name="payload", type="JSONB")),
        (datetime(2024, 1, 1, tzinfo=timezone.utc), ColumnSpecification(name="created", type="TIMESTAMP")),
        (None, ColumnSpecification(name="nickname", type="VARCHAR(32)", nullable=False)),
    ]

    for value, column in samples:
        context = TransformationContext(
            source_path=column.name,
            target_column=column,
            database_type="mysql",
            original_value=value,
        )
        result = engine.transform(value, context)
        logger.info(
            f"{column.name}: {value!r} -> {result.value!r} "
            f"{result.transformations} confidence={result.confidence}"
        )
        for warning in result.warnings:
            logger.warning(warning)


def example_extended_engine():
    """Register a custom hook and validation rule."""
    engine = DataTransformationEngine()
    engine.add_custom_transformer("email", str.lower)
    engine.add_validation_rule(
        "STRING",
        ValidationRule(
            name="NO_TEST_ADDRESSES",
            predicate=lambda value, ctx: "@test." not in str(value),
            message="Test address",
            severity=Severity.WARNING,
        ),
    )

    context = TransformationContext(
        target_column=ColumnSpecification(name="email", type="VARCHAR(255)"),
    )
    result = engine.transform("Alice@Test.Example", context)
    logger.info(f"email -> {result.value} warnings={result.warnings}")


def example_batch():
    """Transform a batch of records against a table specification."""
    table = {
        "name": "users",
        "columns": [
            {"name": "id", "type": "UUID", "nullable": False},
            {"name": "age", "type": "SMALLINT"},
            {"name": "city", "type": "VARCHAR(64)", "source_path": "address.city"},
        ],
    }
    records = [
        {"id": "550e8400-e29b-41d4-a716-446655440000", "age": "31", "address": {"city": "Oslo"}},
        {"id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8", "age": 99999},
    ]

    result = RecordTransformer(dialect="postgresql").transform_records(records, table)
    logger.info(f"Rows: {result.rows}")
    for error in result.errors:
        logger.warning(f"Record {error.record_index} {error.column_name}: {error.message}")


if __name__ == "__main__":
    example_single_values()
    example_extended_engine()
    example_batch()
