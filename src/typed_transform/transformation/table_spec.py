"""Destination table specifications loaded from dicts or YAML/JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from typed_transform.transformation.detector import normalize_target_type
from typed_transform.transformation.models import ColumnSpecification
from typed_transform.transformation.types import TargetType

logger = logging.getLogger(__name__)


class TableColumn(ColumnSpecification):
    """Column specification plus where to find its value in a source record."""

    source_path: Optional[str] = Field(
        default=None, description="Dotted path into the record; defaults to the column name"
    )

    @property
    def path(self) -> str:
        return self.source_path or self.name

    @property
    def target_type(self) -> TargetType:
        return normalize_target_type(self.type)


class TableSpecification(BaseModel):
    """Complete destination table definition."""

    name: str
    columns: List[TableColumn]
    description: Optional[str] = None

    @field_validator("columns")
    @classmethod
    def validate_unique_columns(cls, v: List[TableColumn]) -> List[TableColumn]:
        """Reject duplicate column names."""
        seen: Set[str] = set()
        for column in v:
            if column.name in seen:
                raise ValueError(f"Duplicate column name: {column.name}")
            seen.add(column.name)
        return v

    def get_column_names(self) -> List[str]:
        """Get column names in declaration order."""
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> Optional[TableColumn]:
        """Get column specification by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None


def load_table_spec(spec: Union[TableSpecification, Dict[str, Any], str, Path]) -> TableSpecification:
    """
    Load a table specification from a model, dict, or YAML/JSON file.

    Args:
        spec: TableSpecification, dict, or path to a .yaml/.yml/.json file

    Returns:
        TableSpecification

    Example file:
        name: users
        columns:
          - {name: id, type: UUID, nullable: false}
          - {name: age, type: SMALLINT}
          - {name: city, type: VARCHAR(64), source_path: address.city}
    """
    if isinstance(spec, TableSpecification):
        return spec
    if isinstance(spec, dict):
        return TableSpecification(**spec)
    if not isinstance(spec, (str, Path)):
        raise ValueError(f"Invalid table spec type: {type(spec)}")

    spec_path = Path(spec)
    if not spec_path.exists():
        raise FileNotFoundError(f"Table spec file not found: {spec_path}")

    with open(spec_path, "r", encoding="utf-8") as f:
        if spec_path.suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif spec_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported table spec file format: {spec_path.suffix}")

    if not isinstance(data, dict):
        raise ValueError(f"Table spec file must contain a mapping: {spec_path}")

    table = TableSpecification(**data)
    logger.debug(f"Loaded table spec '{table.name}' with {len(table.columns)} columns")
    return table
