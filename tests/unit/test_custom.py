"""Unit tests for custom column transformers."""

import pytest

from typed_transform.transformation.custom import CustomTransformerRegistry


@pytest.mark.unit
class TestCustomTransformerRegistry:
    """Test CustomTransformerRegistry."""

    def test_no_hook(self, make_context):
        """Test columns without a hook pass through."""
        result = CustomTransformerRegistry().apply("value", make_context("TEXT"))

        assert result.value == "value"
        assert result.transformations == []

    def test_apply_hook(self, make_context):
        """Test a registered hook rewrites the value."""
        registry = CustomTransformerRegistry()
        registry.add("email", str.lower)

        result = registry.apply("Alice@Example.COM", make_context("TEXT", name="email"))

        assert result.value == "alice@example.com"
        assert result.transformations == ["CUSTOM_TRANSFORMER"]
        assert result.confidence == 1.0

    def test_hook_scoped_to_column(self, make_context):
        """Test hooks only apply to their own column."""
        registry = CustomTransformerRegistry()
        registry.add("email", str.lower)

        result = registry.apply("KEEP", make_context("TEXT", name="name"))
        assert result.value == "KEEP"

    def test_failing_hook_keeps_value(self, make_context):
        """Test a raising hook degrades to a warning."""
        registry = CustomTransformerRegistry()

        def explode(value):
            raise ValueError("bad input")

        registry.add("name", explode)
        result = registry.apply("Alice", make_context("TEXT", name="name"))

        assert result.value == "Alice"
        assert result.transformations == []
        assert result.warnings == ["Custom transformer for column name failed: bad input"]

    def test_later_registration_replaces(self, make_context):
        """Test re-registering a column replaces its hook."""
        registry = CustomTransformerRegistry()
        registry.add("name", str.lower)
        registry.add("name", str.upper)

        assert registry.apply("Alice", make_context("TEXT", name="name")).value == "ALICE"

    def test_rejects_non_callable(self):
        """Test hooks must be callable."""
        with pytest.raises(TypeError):
            CustomTransformerRegistry().add("name", "not callable")

    def test_snapshot(self):
        """Test snapshots are copies."""
        registry = CustomTransformerRegistry()
        before = registry.snapshot()
        registry.add("name", str.strip)

        assert before == {}
        assert registry.get("name") is str.strip
