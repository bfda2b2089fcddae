"""Per-column custom transformer hooks."""

import logging
import threading
from typing import Any, Callable, Dict

from typed_transform.transformation.models import TransformationContext, TransformationResult

logger = logging.getLogger(__name__)

CustomTransformer = Callable[[Any], Any]


class CustomTransformerRegistry:
    """Column name to hook mapping; a later registration for a column replaces the earlier one."""

    def __init__(self):
        self._lock = threading.Lock()
        self._transformers: Dict[str, CustomTransformer] = {}

    def add(self, column_name: str, transformer: CustomTransformer) -> None:
        if not callable(transformer):
            raise TypeError(f"Custom transformer for {column_name} is not callable")
        with self._lock:
            transformers = dict(self._transformers)
            transformers[column_name] = transformer
            self._transformers = transformers
        logger.debug(f"Registered custom transformer for column {column_name}")

    def get(self, column_name: str):
        return self._transformers.get(column_name)

    def snapshot(self) -> Dict[str, CustomTransformer]:
        return dict(self._transformers)

    def apply(self, value: Any, context: TransformationContext) -> TransformationResult:
        """
        Run the hook registered for the context's column, if any.

        A hook that raises never aborts the transformation: the failure is
        recorded as a warning and the pre-hook value is kept.
        """
        column_name = context.target_column.name
        transformer = self.get(column_name)
        if transformer is None:
            return TransformationResult(value=value)

        try:
            transformed = transformer(value)
        except Exception as e:
            logger.warning(f"Custom transformer for column {column_name} failed: {e}")
            return TransformationResult(
                value=value,
                warnings=[f"Custom transformer for column {column_name} failed: {e}"],
            )

        return TransformationResult(value=transformed, transformations=["CUSTOM_TRANSFORMER"])
