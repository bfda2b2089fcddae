"""Unit tests for engine models and exceptions."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from typed_transform.transformation.exceptions import ConversionError, ValidationError
from typed_transform.transformation.models import (
    ColumnSpecification,
    TransformationContext,
    TransformationOutcome,
    TransformationResult,
)
from typed_transform.transformation.types import Dialect, SourceType, as_source_type


@pytest.mark.unit
class TestModels:
    """Test model behavior."""

    def test_context_parses_dialect(self):
        """Test known dialect names become Dialect members."""
        context = TransformationContext(
            target_column=ColumnSpecification(name="a", type="TEXT"), database_type="MySQL"
        )
        assert context.database_type == Dialect.MYSQL

    def test_context_keeps_unknown_dialect(self):
        """Test unknown dialect names are kept verbatim."""
        context = TransformationContext(
            target_column=ColumnSpecification(name="a", type="TEXT"), database_type="oracle"
        )
        assert context.database_type == "oracle"

    def test_context_is_frozen(self):
        """Test contexts are immutable."""
        context = TransformationContext(target_column=ColumnSpecification(name="a", type="TEXT"))
        with pytest.raises(PydanticValidationError):
            context.record_index = 5

    def test_column_defaults(self):
        """Test columns are nullable unless declared otherwise."""
        assert ColumnSpecification(name="a", type="TEXT").nullable is True

    def test_merge_takes_minimum_confidence(self):
        """Test confidence never increases when steps are merged."""
        result = TransformationResult(value="42", confidence=0.9, transformations=["A"])
        result.merge(TransformationResult(value=42, confidence=1.0, transformations=["B"], warnings=["w"]))

        assert result.value == 42
        assert result.confidence == 0.9
        assert result.transformations == ["A", "B"]
        assert result.warnings == ["w"]

    def test_confidence_bounds(self):
        """Test confidence is limited to [0, 1]."""
        with pytest.raises(PydanticValidationError):
            TransformationResult(value=1, confidence=1.2)

    def test_outcome(self):
        """Test success and failure outcomes."""
        ok = TransformationOutcome.success(TransformationResult(value=1))
        failed = TransformationOutcome.failure(ConversionError("nope"))

        assert ok.ok
        assert ok.unwrap().value == 1
        assert not failed.ok
        assert failed.result is None
        with pytest.raises(ConversionError):
            failed.unwrap()

    def test_validation_error_message(self):
        """Test ValidationError lists every failed rule."""
        error = ValidationError(["A: first", "B: second"], column="c", value=1)

        assert str(error) == "Validation failed: A: first, B: second"
        assert error.errors == ["A: first", "B: second"]
        assert error.column == "c"

    def test_as_source_type(self):
        """Test tag coercion."""
        assert as_source_type("numeric_string") == SourceType.NUMERIC_STRING
        assert SourceType.NUMERIC_STRING.is_string_derived
        assert not SourceType.INTEGER.is_string_derived
