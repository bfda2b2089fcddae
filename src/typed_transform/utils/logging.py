"""Structured logging with correlation IDs and table/column tracking."""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import colorama
import structlog

from typed_transform.config.settings import settings

# Context variables for correlation tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
table_name_var: ContextVar[Optional[str]] = ContextVar("table_name", default=None)
column_name_var: ContextVar[Optional[str]] = ContextVar("column_name", default=None)
record_index_var: ContextVar[Optional[int]] = ContextVar("record_index", default=None)

_RESERVED_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
    "correlation_id",
    "table_name",
    "column_name",
    "record_index",
}


class CorrelationFilter(logging.Filter):
    """Logging filter that adds correlation IDs to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation context to log record."""
        record.correlation_id = correlation_id_var.get() or "N/A"
        record.table_name = table_name_var.get() or "N/A"
        record.column_name = column_name_var.get() or "N/A"
        index = record_index_var.get()
        record.record_index = "N/A" if index is None else index
        return True


class StructuredFormatter(logging.Formatter):
    """Structured formatter that formats logs as JSON or text."""

    def __init__(self, format_type: str = "json"):
        """
        Initialize formatter.

        Args:
            format_type: Format type ("json", "text", or "console")
        """
        super().__init__()
        self.format_type = format_type.lower()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record."""
        if self.format_type == "json":
            return self._format_json(record)
        elif self.format_type == "text":
            return self._format_text(record)
        elif self.format_type == "console":
            return self._format_console(record)
        else:
            return super().format(record)

    def _format_json(self, record: logging.LogRecord) -> str:
        """Format as JSON."""
        log_data = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "N/A"),
            "table_name": getattr(record, "table_name", "N/A"),
            "column_name": getattr(record, "column_name", "N/A"),
            "record_index": getattr(record, "record_index", "N/A"),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def _format_text(self, record: logging.LogRecord) -> str:
        """Format as structured text."""
        msg = (
            f"{self.formatTime(record)} | "
            f"{record.levelname:8s} | "
            f"correlation_id={getattr(record, 'correlation_id', 'N/A')} | "
            f"table={getattr(record, 'table_name', 'N/A')} | "
            f"column={getattr(record, 'column_name', 'N/A')} | "
            f"record={getattr(record, 'record_index', 'N/A')} | "
            f"{record.name} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            msg += f"\n{self.formatException(record.exc_info)}"

        return msg

    def _format_console(self, record: logging.LogRecord) -> str:
        """Format for console output with colors."""
        colors = {
            "DEBUG": colorama.Fore.CYAN,
            "INFO": colorama.Fore.GREEN,
            "WARNING": colorama.Fore.YELLOW,
            "ERROR": colorama.Fore.RED,
            "CRITICAL": colorama.Fore.RED + colorama.Style.BRIGHT,
        }

        reset = colorama.Style.RESET_ALL
        color = colors.get(record.levelname, "")

        correlation_id = str(getattr(record, "correlation_id", "N/A"))

        msg = (
            f"{color}{self.formatTime(record)} | "
            f"{record.levelname:8s}{reset} | "
            f"cid={correlation_id[:8]} | "
            f"{getattr(record, 'table_name', 'N/A')}.{getattr(record, 'column_name', 'N/A')} | "
            f"{record.name} | "
            f"{record.getMessage()}{reset}"
        )

        if record.exc_info:
            msg += f"\n{color}{self.formatException(record.exc_info)}{reset}"

        return msg


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID from context."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID in context."""
    correlation_id_var.set(correlation_id)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_table_name() -> Optional[str]:
    """Get current table name from context."""
    return table_name_var.get()


def set_table_name(table_name: Optional[str]) -> None:
    """Set table name in context."""
    table_name_var.set(table_name)


def get_column_name() -> Optional[str]:
    """Get current column name from context."""
    return column_name_var.get()


def set_column_name(column_name: Optional[str]) -> None:
    """Set column name in context."""
    column_name_var.set(column_name)


def get_record_index() -> Optional[int]:
    """Get current record index from context."""
    return record_index_var.get()


def set_record_index(record_index: Optional[int]) -> None:
    """Set record index in context."""
    record_index_var.set(record_index)


class TransformLogger:
    """Logger wrapper with table/column context management."""

    def __init__(self, name: str, correlation_id: Optional[str] = None):
        """
        Initialize transform logger.

        Args:
            name: Logger name
            correlation_id: Optional correlation ID (generated if not provided)
        """
        self.name = name
        self.logger = logging.getLogger(name)

        if correlation_id:
            set_correlation_id(correlation_id)
        elif not get_correlation_id():
            set_correlation_id(generate_correlation_id())

    def _add_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Add transformation context to log extra fields."""
        context: Dict[str, Any] = {}
        if extra:
            context.update(
                {key: value for key, value in extra.items() if key not in _RESERVED_RECORD_KEYS}
            )
        return context

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(message, extra=self._add_context(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(message, extra=self._add_context(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(message, extra=self._add_context(kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(message, extra=self._add_context(kwargs), exc_info=exc_info)

    def with_table(self, table_name: str):
        """Create a context manager for a destination table."""
        return TableContext(self, table_name)

    def with_column(self, column_name: str):
        """Create a context manager for a destination column."""
        return ColumnContext(self, column_name)


class TableContext:
    """Context manager for table-scoped logging."""

    def __init__(self, logger: TransformLogger, table_name: str):
        self.logger = logger
        self.table_name = table_name
        self.previous_table_name = None

    def __enter__(self):
        self.previous_table_name = get_table_name()
        set_table_name(self.table_name)
        self.logger.info(f"Table transformation started: {self.table_name}")
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(
                f"Table transformation failed: {self.table_name}", exc_info=True
            )
        else:
            self.logger.info(f"Table transformation completed: {self.table_name}")

        set_table_name(self.previous_table_name)
        return False


class ColumnContext:
    """Context manager for column-scoped logging."""

    def __init__(self, logger: TransformLogger, column_name: str):
        self.logger = logger
        self.column_name = column_name
        self.previous_column_name = None

    def __enter__(self):
        self.previous_column_name = get_column_name()
        set_column_name(self.column_name)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_column_name(self.previous_column_name)
        return False


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    use_structlog: bool = False,
) -> None:
    """
    Set up structured logging for the application.

    Args:
        level: Log level (uses settings if not provided)
        format_type: Log format type (uses settings if not provided)
        use_structlog: If True, use structlog instead of standard logging
    """
    log_level = level or settings.LOG_LEVEL
    log_format = format_type or settings.LOG_FORMAT

    valid_levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    numeric_level = valid_levels.get(log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.addFilter(CorrelationFilter())

    if use_structlog:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
                if log_format == "json"
                else structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
    else:
        if log_format == "console":
            colorama.init()
        console_handler.setFormatter(StructuredFormatter(format_type=log_format))

    root_logger.addHandler(console_handler)

    logging.debug(
        f"Logging configured: level={log_level}, format={log_format}, structlog={use_structlog}"
    )


def get_logger(name: str, correlation_id: Optional[str] = None) -> TransformLogger:
    """
    Get a transform logger instance.

    Args:
        name: Logger name
        correlation_id: Optional correlation ID

    Returns:
        TransformLogger instance
    """
    return TransformLogger(name, correlation_id=correlation_id)
