"""Unit tests for null handling and default values."""

from datetime import datetime

import pytest

from typed_transform.transformation.defaults import (
    DEFAULT_FACTORIES,
    NULL_UUID,
    default_value_for,
    resolve_null,
)
from typed_transform.transformation.types import TargetType


@pytest.mark.unit
class TestDefaults:
    """Test default value synthesis."""

    def test_every_target_type_has_default(self):
        """Test the default table is total."""
        assert set(DEFAULT_FACTORIES) == set(TargetType)

    def test_scalar_defaults(self):
        """Test scalar defaults."""
        assert default_value_for(TargetType.STRING) == ""
        assert default_value_for(TargetType.INTEGER) == 0
        assert default_value_for(TargetType.FLOAT) == 0
        assert default_value_for(TargetType.BOOLEAN) is False
        assert default_value_for(TargetType.UUID) == NULL_UUID
        assert default_value_for(TargetType.JSON) == ""

    def test_temporal_defaults_are_current_utc(self):
        """Test temporal defaults are timezone-aware now()."""
        for target_type in (TargetType.DATE, TargetType.DATETIME):
            value = default_value_for(target_type)
            assert isinstance(value, datetime)
            assert value.utcoffset().total_seconds() == 0


@pytest.mark.unit
class TestResolveNull:
    """Test null resolution."""

    def test_nullable_column_keeps_none(self, make_context):
        """Test nullable columns pass None through untouched."""
        result = resolve_null(make_context("INTEGER", nullable=True))

        assert result.value is None
        assert result.warnings == []
        assert result.transformations == []
        assert result.confidence == 1.0

    def test_not_null_column_gets_default(self, make_context):
        """Test NOT NULL columns get a flagged default."""
        result = resolve_null(make_context("INTEGER", nullable=False, name="age"))

        assert result.value == 0
        assert result.transformations == ["NULL_TO_DEFAULT"]
        assert result.confidence == 0.5
        assert result.warnings == ["Column age is NOT NULL, using default value: 0"]

    def test_not_null_uuid_column(self, make_context):
        """Test the nil UUID default."""
        result = resolve_null(make_context("UUID", nullable=False))
        assert result.value == NULL_UUID
