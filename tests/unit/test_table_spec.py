"""Unit tests for table specifications."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from typed_transform.transformation.table_spec import (
    TableColumn,
    TableSpecification,
    load_table_spec,
)
from typed_transform.transformation.types import TargetType


@pytest.mark.unit
class TestTableSpecification:
    """Test TableSpecification."""

    def test_from_dict(self, sample_table_spec):
        """Test loading from a dict."""
        table = load_table_spec(sample_table_spec)

        assert table.name == "users"
        assert table.get_column_names() == ["id", "name", "age", "active", "signup", "city", "tags"]
        assert table.get_column("id").nullable is False
        assert table.get_column("missing") is None

    def test_model_passthrough(self, sample_table_spec):
        """Test an existing model is returned as is."""
        table = TableSpecification(**sample_table_spec)
        assert load_table_spec(table) is table

    def test_column_paths(self):
        """Test source paths default to the column name."""
        plain = TableColumn(name="age", type="SMALLINT")
        nested = TableColumn(name="city", type="TEXT", source_path="address.city")

        assert plain.path == "age"
        assert nested.path == "address.city"
        assert plain.target_type == TargetType.INTEGER

    def test_duplicate_columns(self):
        """Test duplicate column names are rejected."""
        with pytest.raises(PydanticValidationError):
            TableSpecification(
                name="t",
                columns=[{"name": "a", "type": "TEXT"}, {"name": "a", "type": "INT"}],
            )

    def test_from_yaml_file(self, temp_yaml_table_file):
        """Test loading from YAML."""
        table = load_table_spec(str(temp_yaml_table_file))

        assert table.name == "users"
        assert table.get_column("city").source_path == "address.city"

    def test_from_json_file(self, temp_json_table_file):
        """Test loading from JSON."""
        table = load_table_spec(temp_json_table_file)
        assert len(table.columns) == 7

    def test_missing_file(self, tmp_path):
        """Test missing files."""
        with pytest.raises(FileNotFoundError):
            load_table_spec(str(tmp_path / "missing.yaml"))

    def test_unsupported_format(self, tmp_path):
        """Test unsupported file suffixes."""
        spec_file = tmp_path / "users.txt"
        spec_file.write_text("name: users")

        with pytest.raises(ValueError):
            load_table_spec(spec_file)

    def test_non_mapping_file(self, tmp_path):
        """Test files must contain a mapping."""
        spec_file = tmp_path / "users.yaml"
        spec_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError):
            load_table_spec(spec_file)

    def test_invalid_type(self):
        """Test unsupported spec objects."""
        with pytest.raises(ValueError):
            load_table_spec(42)
