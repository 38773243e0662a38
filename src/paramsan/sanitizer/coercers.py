"""Built-in type coercers.

Each coercer converts a raw value (typically a string from a query string,
form body or header) to one target type, or raises ``CoercionError``. None of
them returns a sentinel on failure; the compiler relies on the exception to
tell "coerced to this value" apart from "did not apply".

Repeated query-string keys usually arrive as lists. The scalar coercers for
numbers, integers, booleans and dates therefore unwrap a single-element
sequence before converting it.
"""

import json
import math
import numbers
from collections.abc import Mapping
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import numpy as np

from ._types import Coercer
from .errors import CoercionError

_FALSE_STRINGS = ("", "0", "false")


def schema_type_name(value: Any) -> str:
    """Map a Python value to the schema type name used in messages."""
    type_map = {
        "str": "string",
        "int": "integer",
        "float": "number",
        "bool": "boolean",
        "list": "array",
        "tuple": "array",
        "dict": "object",
        "datetime": "date-time",
        "date": "date",
        "NoneType": "null",
    }
    python_type = type(value).__name__
    return type_map.get(python_type, python_type)


def _unwrap(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return value[0]
    return value


def _parse_numeric_string(value: str) -> int | float:
    text = value.strip()
    # int() and float() accept digit separators, form input never does
    if not text or "_" in text:
        raise CoercionError(f"Expected number, got {value!r}")
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise CoercionError(f"Expected number, got {value!r}") from None


def to_string(value: Any) -> str:
    """Stringify a value. Never fails."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_string(item) for item in value)
    return str(value)


def to_number(value: Any) -> int | float:
    """Convert a value to a finite number.

    Integral input (``5``, ``"5"``) stays an ``int``; everything else becomes
    a ``float``.
    """
    value = _unwrap(value)
    if isinstance(value, bool):
        raise CoercionError("Expected number, got boolean")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        result: int | float = float(value)
    elif isinstance(value, str):
        result = _parse_numeric_string(value)
    else:
        raise CoercionError(f"Expected number, got {schema_type_name(value)}")
    if isinstance(result, float) and not math.isfinite(result):
        raise CoercionError(f"Number is not finite: {value!r}")
    return result


def to_integer(value: Any) -> int:
    """Convert a value that is an exact multiple of 1 to ``int``."""
    value = _unwrap(value)
    if isinstance(value, bool):
        raise CoercionError("Expected integer, got boolean")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        number: int | float = float(value)
    elif isinstance(value, str):
        number = _parse_numeric_string(value)
    else:
        raise CoercionError(f"Expected integer, got {schema_type_name(value)}")
    if isinstance(number, int):
        return number
    if not number.is_integer():
        raise CoercionError(f"Value is not a multiple of 1: {value!r}")
    return int(number)


def to_boolean(value: Any) -> bool:
    """Return ``False`` for ``0``, ``False``, ``""``, ``"0"`` and ``"false"``.

    Any other value is ``True``. The match is exact: ``"False"`` and ``"no"``
    are ``True``.
    """
    value = _unwrap(value)
    if isinstance(value, str):
        return value not in _FALSE_STRINGS
    if isinstance(value, numbers.Number):
        return value != 0
    return True


def to_date(value: Any) -> date:
    """Parse ISO 8601 or RFC 2822 (HTTP) date strings."""
    value = _unwrap(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise CoercionError(f"Expected date string, got {schema_type_name(value)}")
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        raise CoercionError(f"Value is not a parsable date: {value!r}") from None


def to_array(value: Any) -> list[Any] | tuple[Any, ...]:
    """Return sequences as-is; parse JSON arrays from strings."""
    if isinstance(value, (list, tuple)):
        return value
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (str, bytes, bytearray)):
        try:
            parsed = json.loads(value)
        except (ValueError, RecursionError) as e:
            raise CoercionError(f"Invalid JSON array: {value!r}") from e
        if isinstance(parsed, list):
            return parsed
        raise CoercionError(f"Parsed value is not an array: {value!r}")
    raise CoercionError(f"Expected array, got {schema_type_name(value)}")


def to_object(value: Any) -> Mapping[str, Any]:
    """Return dicts as-is; parse JSON objects from strings."""
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, bytes, bytearray)):
        try:
            parsed = json.loads(value)
        except (ValueError, RecursionError) as e:
            raise CoercionError(f"Invalid JSON object: {value!r}") from e
        if isinstance(parsed, dict):
            return parsed
        raise CoercionError(f"Parsed value is not an object: {value!r}")
    raise CoercionError(f"Expected object, got {schema_type_name(value)}")


BUILTIN_TYPES: dict[str, Coercer] = {
    "string": to_string,
    "number": to_number,
    "integer": to_integer,
    "boolean": to_boolean,
    "array": to_array,
    "object": to_object,
    "date": to_date,
    "dateOnly": to_date,
    "dateTime": to_date,
    "dateTimeOnly": to_date,
    "date-time": to_date,
    "datetime-only": to_date,
}
