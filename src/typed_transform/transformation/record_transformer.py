"""Batch transformation of parsed JSON records into typed table rows."""

import time
from collections import Counter
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from typed_transform.config.settings import settings
from typed_transform.transformation.engine import DataTransformationEngine, get_engine
from typed_transform.transformation.exceptions import TransformationError, ValidationError
from typed_transform.transformation.models import TransformationContext
from typed_transform.transformation.table_spec import TableSpecification, load_table_spec
from typed_transform.transformation.types import Dialect
from typed_transform.utils.logging import get_logger, set_record_index

logger = get_logger(__name__)


class RecordErrorType(str, Enum):
    """Why a value could not be written."""

    VALIDATION = "VALIDATION"  # An ERROR-severity rule failed
    TYPE_MISMATCH = "TYPE_MISMATCH"  # The selected converter rejected the value


class RecordError(BaseModel):
    """A hard failure for one (record, column) pair."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    record_index: int
    table_name: str
    column_name: Optional[str] = None
    error_type: RecordErrorType
    message: str
    original_value: Any = None


class BatchStatistics(BaseModel):
    """Counters collected while transforming a batch."""

    total_records: int = 0
    processed_records: int = 0
    failed_records: int = 0
    null_value_count: int = 0
    transformation_count: int = 0
    warning_count: int = 0
    source_type_distribution: Dict[str, int] = Field(default_factory=dict)
    average_confidence: float = 1.0
    processing_time_ms: float = 0.0
    records_per_second: float = 0.0


class BatchTransformationResult(BaseModel):
    """Rows that transformed cleanly plus everything that went wrong."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    table_name: str
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    errors: List[RecordError] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    statistics: BatchStatistics = Field(default_factory=BatchStatistics)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def resolve_path(record: Any, path: str) -> Any:
    """
    Look up a value in a record by column name or dotted path.

    An exact key match wins over path splitting so flattened records work
    too. Missing keys resolve to None.
    """
    if not isinstance(record, Mapping):
        return None
    if path in record:
        return record[path]

    current: Any = record
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current


def _is_null(value: Any) -> bool:
    if value is None:
        return True
    # pandas NA, NaN and NaT count as absent
    return pd.api.types.is_scalar(value) and bool(pd.isna(value))


def _chunks(records: Sequence[Any], size: int) -> Iterator[Tuple[int, Sequence[Any]]]:
    for start in range(0, len(records), size):
        yield start, records[start : start + size]


class RecordTransformer:
    """Applies the transformation engine to every column of every record."""

    def __init__(
        self,
        engine: Optional[DataTransformationEngine] = None,
        dialect: Optional[Union[Dialect, str]] = None,
        on_error: Optional[str] = None,
        batch_size: Optional[int] = None,
        include_warnings: Optional[bool] = None,
    ):
        """
        Initialize record transformer.

        Args:
            engine: Engine to use (process-wide engine if not provided)
            dialect: Destination dialect (uses settings if not provided)
            on_error: "skip" drops failing rows, "raise" re-raises the first failure
            batch_size: Records per progress chunk (uses settings if not provided)
            include_warnings: Collect per-value warnings into the batch result
        """
        self.engine = engine or get_engine()
        self.dialect = Dialect.parse(dialect or settings.DEFAULT_DIALECT)
        self.on_error = settings.validate_on_error(on_error or settings.ON_ERROR)
        self.batch_size = batch_size or settings.BATCH_SIZE
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        self.include_warnings = (
            settings.INCLUDE_WARNINGS if include_warnings is None else include_warnings
        )

    def transform_records(
        self,
        records: Union[Iterable[Any], Any],
        table: Union[TableSpecification, Dict[str, Any], str],
    ) -> BatchTransformationResult:
        """
        Transform records into rows for one destination table.

        Args:
            records: List of records (a single mapping is treated as one record)
            table: Table specification, dict, or path to a spec file

        Returns:
            BatchTransformationResult

        Raises:
            TransformationError: On the first hard failure when on_error="raise"
        """
        table_spec = load_table_spec(table)
        if isinstance(records, Mapping):
            records = [records]
        records = list(records)

        result = BatchTransformationResult(table_name=table_spec.name)
        stats = result.statistics
        stats.total_records = len(records)
        type_counts: Counter = Counter()
        confidences: List[float] = []
        start_time = time.perf_counter()

        try:
            with logger.with_table(table_spec.name):
                for offset, chunk in _chunks(records, self.batch_size):
                    for position, record in enumerate(chunk):
                        record_index = offset + position
                        set_record_index(record_index)
                        row, errors = self._transform_record(
                            record, record_index, table_spec, result, type_counts, confidences
                        )
                        if errors:
                            stats.failed_records += 1
                            result.errors.extend(errors)
                        else:
                            result.rows.append(row)
                        stats.processed_records += 1
                    logger.debug(
                        f"Processed {min(offset + self.batch_size, len(records))}/{len(records)} "
                        f"records for {table_spec.name}"
                    )
        finally:
            set_record_index(None)

        elapsed = time.perf_counter() - start_time
        stats.processing_time_ms = elapsed * 1000
        stats.records_per_second = stats.processed_records / elapsed if elapsed > 0 else 0.0
        stats.source_type_distribution = dict(type_counts)
        if confidences:
            stats.average_confidence = sum(confidences) / len(confidences)

        logger.info(
            f"Transformed {len(result.rows)}/{stats.total_records} records for "
            f"{table_spec.name} ({len(result.errors)} errors, {stats.warning_count} warnings)"
        )
        return result

    def _transform_record(
        self,
        record: Any,
        record_index: int,
        table: TableSpecification,
        result: BatchTransformationResult,
        type_counts: Counter,
        confidences: List[float],
    ) -> Tuple[Dict[str, Any], List[RecordError]]:
        row: Dict[str, Any] = {}
        errors: List[RecordError] = []
        stats = result.statistics

        for column in table.columns:
            with logger.with_column(column.name):
                raw_value = resolve_path(record, column.path)
                if _is_null(raw_value):
                    raw_value = None
                    stats.null_value_count += 1
                else:
                    type_counts[self.engine.detect_type(raw_value).value] += 1

                context = TransformationContext(
                    source_path=column.path,
                    target_column=column,
                    database_type=self.dialect,
                    original_value=raw_value,
                    record_index=record_index,
                    table_name=table.name,
                )
                outcome = self.engine.try_transform(raw_value, context)

                if not outcome.ok:
                    error = outcome.error
                    if self.on_error == "raise":
                        logger.error(
                            f"Record {record_index} column {column.name} failed: {error}",
                            exc_info=False,
                        )
                        raise error
                    errors.append(
                        self._record_error(error, record_index, table.name, column.name)
                    )
                    continue

                value_result = outcome.result
                row[column.name] = value_result.value
                stats.transformation_count += len(value_result.transformations)
                stats.warning_count += len(value_result.warnings)
                confidences.append(value_result.confidence)
                if self.include_warnings:
                    result.warnings.extend(
                        f"[{record_index}] {column.name}: {warning}"
                        for warning in value_result.warnings
                    )

        return row, errors

    @staticmethod
    def _record_error(
        error: TransformationError, record_index: int, table_name: str, column_name: str
    ) -> RecordError:
        error_type = (
            RecordErrorType.VALIDATION
            if isinstance(error, ValidationError)
            else RecordErrorType.TYPE_MISMATCH
        )
        return RecordError(
            record_index=record_index,
            table_name=table_name,
            column_name=column_name,
            error_type=error_type,
            message=str(error),
            original_value=error.value,
        )

    def transform_dataframe(
        self,
        data: pd.DataFrame,
        table: Union[TableSpecification, Dict[str, Any], str],
    ) -> Tuple[pd.DataFrame, BatchTransformationResult]:
        """
        Transform DataFrame rows into a typed DataFrame.

        Args:
            data: Input DataFrame, one record per row
            table: Table specification, dict, or path to a spec file

        Returns:
            Tuple of (transformed DataFrame in column order, batch result)
        """
        table_spec = load_table_spec(table)
        if data.empty:
            logger.warning("Input DataFrame is empty, returning empty DataFrame")
            return (
                pd.DataFrame(columns=table_spec.get_column_names()),
                BatchTransformationResult(table_name=table_spec.name),
            )

        records = data.to_dict(orient="records")
        batch = self.transform_records(records, table_spec)
        frame = pd.DataFrame(batch.rows, columns=table_spec.get_column_names())
        return frame, batch


def transform_records(
    records: Union[Iterable[Any], Any],
    table: Union[TableSpecification, Dict[str, Any], str],
    dialect: Optional[Union[Dialect, str]] = None,
    on_error: Optional[str] = None,
) -> BatchTransformationResult:
    """Transform records with the process-wide engine."""
    return RecordTransformer(dialect=dialect, on_error=on_error).transform_records(records, table)
