"""Per-invocation records exchanged with the transformation engine."""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from typed_transform.transformation.exceptions import TransformationError
from typed_transform.transformation.types import Dialect


class ColumnSpecification(BaseModel):
    """Destination column as declared by the schema subsystem."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = Field(..., description="Declared type string, e.g. VARCHAR(255)")
    nullable: bool = True
    description: Optional[str] = None


class TransformationContext(BaseModel):
    """Immutable description of one value being transformed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source_path: str = ""
    target_column: ColumnSpecification
    database_type: Union[Dialect, str] = Dialect.POSTGRESQL
    original_value: Any = None
    record_index: int = 0
    table_name: str = ""

    @field_validator("database_type", mode="before")
    @classmethod
    def parse_database_type(cls, v: Any) -> Union[Dialect, str]:
        """Map known dialect names onto Dialect, keep anything else verbatim."""
        try:
            return Dialect.parse(v)
        except ValueError:
            return str(v)


class TransformationResult(BaseModel):
    """Value produced by a transformation together with its audit trail."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: Any = None
    warnings: List[str] = Field(default_factory=list)
    transformations: List[str] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    def merge(self, step: "TransformationResult") -> "TransformationResult":
        """
        Fold a pipeline step into this result.

        The step's value replaces the running value, its warnings and
        transformation tags are appended, and confidence becomes the minimum
        of both so it never increases within one transformation.
        """
        self.value = step.value
        self.warnings.extend(step.warnings)
        self.transformations.extend(step.transformations)
        self.confidence = min(self.confidence, step.confidence)
        return self


class TransformationOutcome(BaseModel):
    """Either a successful result or the hard failure that prevented one."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    result: Optional[TransformationResult] = None
    error: Optional[TransformationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, result: TransformationResult) -> "TransformationOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, error: TransformationError) -> "TransformationOutcome":
        return cls(error=error)

    def unwrap(self) -> TransformationResult:
        """Return the result or raise the recorded failure."""
        if self.error is not None:
            raise self.error
        return self.result
