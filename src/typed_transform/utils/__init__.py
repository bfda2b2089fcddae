"""Utility modules."""

from typed_transform.utils.logging import (
    TransformLogger,
    generate_correlation_id,
    get_column_name,
    get_correlation_id,
    get_logger,
    get_record_index,
    get_table_name,
    set_column_name,
    set_correlation_id,
    set_record_index,
    set_table_name,
    setup_logging,
)

__all__ = [
    "TransformLogger",
    "get_logger",
    "setup_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "get_table_name",
    "set_table_name",
    "get_column_name",
    "set_column_name",
    "get_record_index",
    "set_record_index",
]
