"""Pytest configuration and shared fixtures."""

import json
import os
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Set test environment variables before importing typed_transform modules
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_FORMAT"] = "text"

from typed_transform.transformation.engine import DataTransformationEngine  # noqa: E402
from typed_transform.transformation.models import (  # noqa: E402
    ColumnSpecification,
    TransformationContext,
)

USER_ID_1 = "550e8400-e29b-41d4-a716-446655440000"
USER_ID_2 = "6ba7b810-9dad-11d1-80b4-00c04fd430c8"
USER_ID_3 = "123e4567-e89b-42d3-a456-426614174000"


@pytest.fixture
def engine() -> DataTransformationEngine:
    """Fresh engine holding only the built-in converters and rules."""
    return DataTransformationEngine()


@pytest.fixture
def make_context():
    """Factory for transformation contexts around a single column."""

    def _make(
        column_type: str,
        nullable: bool = True,
        name: str = "col",
        dialect: str = "postgresql",
        value=None,
    ) -> TransformationContext:
        return TransformationContext(
            source_path=name,
            target_column=ColumnSpecification(name=name, type=column_type, nullable=nullable),
            database_type=dialect,
            original_value=value,
            table_name="test_table",
        )

    return _make


@pytest.fixture
def sample_table_spec() -> dict:
    """Destination table used by batch tests."""
    return {
        "name": "users",
        "description": "Registered users",
        "columns": [
            {"name": "id", "type": "UUID", "nullable": False},
            {"name": "name", "type": "VARCHAR(50)", "nullable": False},
            {"name": "age", "type": "SMALLINT"},
            {"name": "active", "type": "BOOLEAN"},
            {"name": "signup", "type": "DATE"},
            {"name": "city", "type": "VARCHAR(64)", "source_path": "address.city"},
            {"name": "tags", "type": "JSONB"},
        ],
    }


@pytest.fixture
def sample_records() -> list:
    """Three parsed JSON records: one clean, one out of range, one sparse."""
    return [
        {
            "id": USER_ID_1,
            "name": "Alice",
            "age": "30",
            "active": "yes",
            "signup": "2024-01-15",
            "address": {"city": "Paris"},
            "tags": ["a", "b"],
        },
        {
            "id": USER_ID_2,
            "name": "Bob",
            "age": 40000,
            "active": "no",
            "signup": "2024-02-01",
            "address": {"city": "Lyon"},
            "tags": ["c"],
        },
        {
            "id": USER_ID_3,
            "name": None,
            "age": None,
            "active": False,
            "signup": None,
            "address": {},
            "tags": [],
        },
    ]


@pytest.fixture
def temp_yaml_table_file(tmp_path) -> Path:
    """Create a temporary YAML table specification."""
    spec_file = tmp_path / "users.yaml"
    spec_file.write_text(
        """
name: users
columns:
  - name: id
    type: UUID
    nullable: false
  - name: name
    type: VARCHAR(50)
    nullable: false
  - name: age
    type: SMALLINT
  - name: active
    type: BOOLEAN
  - name: signup
    type: DATE
  - name: city
    type: VARCHAR(64)
    source_path: address.city
  - name: tags
    type: JSONB
"""
    )
    return spec_file


@pytest.fixture
def temp_json_table_file(tmp_path, sample_table_spec) -> Path:
    """Create a temporary JSON table specification."""
    spec_file = tmp_path / "users.json"
    spec_file.write_text(json.dumps(sample_table_spec))
    return spec_file


@pytest.fixture
def temp_records_file(tmp_path, sample_records) -> Path:
    """Create a temporary JSON records file."""
    records_file = tmp_path / "records.json"
    records_file.write_text(json.dumps(sample_records))
    return records_file


@pytest.fixture
def temp_jsonl_records_file(tmp_path, sample_records) -> Path:
    """Create a temporary JSON Lines records file."""
    records_file = tmp_path / "records.jsonl"
    records_file.write_text("\n".join(json.dumps(record) for record in sample_records) + "\n")
    return records_file
