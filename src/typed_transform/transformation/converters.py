"""Converter registry and built-in type converters."""

import json
import logging
import math
import threading
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from typed_transform.transformation.detector import (
    FALSE_TOKENS,
    TRUE_TOKENS,
    parse_calendar_date,
    parse_plain_float,
)
from typed_transform.transformation.exceptions import ConversionError
from typed_transform.transformation.models import TransformationContext, TransformationResult
from typed_transform.transformation.types import (
    SourceType,
    TargetType,
    as_source_type,
    as_target_type,
)

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.3

ConverterKey = Tuple[SourceType, TargetType]


class Converter(BaseModel):
    """
    A conversion strategy for one (source, target) pair.

    ``func`` receives ``(value, context)`` and returns either a
    TransformationResult or the converted value. It raises ConversionError
    (or any other exception) when the value cannot be coerced.
    """

    model_config = ConfigDict(frozen=True)

    source_type: SourceType
    target_type: TargetType
    confidence: float = Field(..., ge=0.0, le=1.0)
    func: Callable[[Any, TransformationContext], Any]

    @property
    def tag(self) -> str:
        return f"{self.source_type.value}_TO_{self.target_type.value}"


def to_generic_string(value: Any) -> str:
    """Generic string coercion used when no converter is registered."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return to_json(value)
    return str(value)


def _json_safe(value: Any) -> Any:
    # NaN and infinities have no JSON form; they serialize as null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(item) for item in value]
    return value


def to_json(value: Any) -> str:
    """Compact structural serialization that always yields valid JSON."""
    return json.dumps(
        _json_safe(value),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=str,
    )


def _string_to_integer(value: Any, context: TransformationContext) -> TransformationResult:
    text = str(value).strip()
    if "_" in text:
        raise ConversionError(f'Cannot convert "{value}" to integer')
    try:
        number = int(text)
    except ValueError:
        try:
            as_float = parse_plain_float(text)
        except ValueError:
            raise ConversionError(f'Cannot convert "{value}" to integer') from None
        if not as_float.is_integer():
            raise ConversionError(f'Cannot convert "{value}" to integer without losing precision')
        number = int(as_float)
    return TransformationResult(
        value=number, transformations=["STRING_TO_INTEGER"], confidence=0.9
    )


def _string_to_float(value: Any, context: TransformationContext) -> TransformationResult:
    try:
        number = parse_plain_float(str(value))
    except ValueError:
        raise ConversionError(f'Cannot convert "{value}" to float') from None
    return TransformationResult(value=number, transformations=["STRING_TO_FLOAT"], confidence=0.9)


def _string_to_boolean(value: Any, context: TransformationContext) -> TransformationResult:
    token = str(value).strip().lower()
    if token in TRUE_TOKENS:
        flag = True
    elif token in FALSE_TOKENS:
        flag = False
    else:
        raise ConversionError(f'Cannot convert "{value}" to boolean')
    return TransformationResult(value=flag, transformations=["STRING_TO_BOOLEAN"], confidence=0.8)


def _string_to_date(value: Any, context: TransformationContext) -> TransformationResult:
    try:
        parsed = parse_calendar_date(str(value))
    except ValueError:
        raise ConversionError(f'Cannot convert "{value}" to date') from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return TransformationResult(value=parsed, transformations=["STRING_TO_DATE"], confidence=0.8)


def _date_object_passthrough(tag: str) -> Callable[[Any, TransformationContext], TransformationResult]:
    # Temporal objects are already in their final shape; the dialect step renders them
    def convert(value: Any, context: TransformationContext) -> TransformationResult:
        return TransformationResult(value=value, transformations=[tag], confidence=1.0)

    return convert


def _structure_to_json(tag: str) -> Callable[[Any, TransformationContext], TransformationResult]:
    def convert(value: Any, context: TransformationContext) -> TransformationResult:
        try:
            serialized = to_json(value if not isinstance(value, (set, frozenset)) else list(value))
        except (TypeError, ValueError) as e:
            raise ConversionError(f"Cannot convert {tag.split('_')[0].lower()} to JSON: {e}") from e
        return TransformationResult(value=serialized, transformations=[tag], confidence=1.0)

    return convert


def builtin_converters() -> Tuple[Converter, ...]:
    return (
        Converter(
            source_type=SourceType.STRING,
            target_type=TargetType.INTEGER,
            confidence=0.9,
            func=_string_to_integer,
        ),
        Converter(
            source_type=SourceType.STRING,
            target_type=TargetType.FLOAT,
            confidence=0.9,
            func=_string_to_float,
        ),
        Converter(
            source_type=SourceType.STRING,
            target_type=TargetType.BOOLEAN,
            confidence=0.8,
            func=_string_to_boolean,
        ),
        Converter(
            source_type=SourceType.STRING,
            target_type=TargetType.DATE,
            confidence=0.8,
            func=_string_to_date,
        ),
        Converter(
            source_type=SourceType.OBJECT,
            target_type=TargetType.JSON,
            confidence=1.0,
            func=_structure_to_json("OBJECT_TO_JSON"),
        ),
        Converter(
            source_type=SourceType.ARRAY,
            target_type=TargetType.JSON,
            confidence=1.0,
            func=_structure_to_json("ARRAY_TO_JSON"),
        ),
        Converter(
            source_type=SourceType.DATE_OBJECT,
            target_type=TargetType.DATE,
            confidence=1.0,
            func=_date_object_passthrough("DATE_OBJECT_TO_DATE"),
        ),
        Converter(
            source_type=SourceType.DATE_OBJECT,
            target_type=TargetType.DATETIME,
            confidence=1.0,
            func=_date_object_passthrough("DATE_OBJECT_TO_DATETIME"),
        ),
    )


class ConverterRegistry:
    """
    Ordered converters per (source, target) pair.

    Registration replaces the stored tuple under a lock; lookups read the
    current mapping without locking and never see a half-appended list.
    """

    def __init__(self, include_builtins: bool = True):
        self._lock = threading.Lock()
        self._converters: Dict[ConverterKey, Tuple[Converter, ...]] = {}
        if include_builtins:
            for converter in builtin_converters():
                self.add(converter)

    def add(self, converter: Converter) -> None:
        key = (converter.source_type, converter.target_type)
        with self._lock:
            converters = dict(self._converters)
            converters[key] = converters.get(key, ()) + (converter,)
            self._converters = converters
        logger.debug(
            f"Registered converter {converter.tag} with confidence {converter.confidence}"
        )

    def register(
        self,
        source_type: Union[SourceType, str],
        target_type: Union[TargetType, str],
        converter: Union[Converter, Callable[[Any, TransformationContext], Any]],
        confidence: float = 1.0,
    ) -> Converter:
        """Register a Converter, or wrap a plain callable into one."""
        source = as_source_type(source_type)
        target = as_target_type(target_type)
        if isinstance(converter, Converter):
            if (converter.source_type, converter.target_type) != (source, target):
                converter = converter.model_copy(
                    update={"source_type": source, "target_type": target}
                )
        else:
            converter = Converter(
                source_type=source, target_type=target, confidence=confidence, func=converter
            )
        self.add(converter)
        return converter

    def converters_for(
        self, source_type: SourceType, target_type: TargetType
    ) -> Tuple[Converter, ...]:
        """
        Converters for a pair, falling back to the plain STRING family.

        String sub-classifications (NUMERIC_STRING, DATE_STRING, ...) have no
        converters of their own unless one is registered for them.
        """
        converters = self._converters
        found = converters.get((source_type, target_type), ())
        if not found and source_type.is_string_derived and source_type != SourceType.STRING:
            found = converters.get((SourceType.STRING, target_type), ())
        return found

    def select(self, source_type: SourceType, target_type: TargetType) -> Optional[Converter]:
        """Highest confidence wins; the first registered wins ties."""
        best = None
        for converter in self.converters_for(source_type, target_type):
            if best is None or converter.confidence > best.confidence:
                best = converter
        return best

    def snapshot(self) -> Dict[ConverterKey, Tuple[Converter, ...]]:
        return dict(self._converters)

    def convert(
        self,
        value: Any,
        source_type: SourceType,
        target_type: TargetType,
        context: TransformationContext,
    ) -> TransformationResult:
        """
        Convert a value between two types.

        Raises:
            ConversionError: If the selected converter cannot coerce the value
        """
        converter = self.select(source_type, target_type)
        column_name = context.target_column.name

        if converter is None:
            logger.warning(
                f"No converter for {source_type.value} to {target_type.value} "
                f"(column {column_name}), using string conversion"
            )
            return TransformationResult(
                value=to_generic_string(value),
                warnings=[
                    f"No specific converter found for {source_type.value} to "
                    f"{target_type.value}, using string conversion"
                ],
                transformations=[f"TYPE_CONVERSION: {source_type.value} -> {target_type.value}"],
                confidence=FALLBACK_CONFIDENCE,
            )

        try:
            output = converter.func(value, context)
        except ConversionError as e:
            e.source_type = e.source_type or source_type.value
            e.target_type = e.target_type or target_type.value
            e.column = e.column or column_name
            e.value = value
            raise
        except Exception as e:
            raise ConversionError(
                f'Cannot convert "{value}" from {source_type.value} to {target_type.value}: {e}',
                source_type=source_type.value,
                target_type=target_type.value,
                column=column_name,
                value=value,
            ) from e

        if isinstance(output, TransformationResult):
            return output
        return TransformationResult(
            value=output, transformations=[converter.tag], confidence=converter.confidence
        )
