"""Built-in rule factories.

A rule factory receives ``(rule_value, rule_name, schema)`` when a schema is
compiled and returns a function ``(value, key, record) -> value``. The
returned function either passes the value through (possibly transformed) or
raises ``RuleError``.

Rules follow JSON Schema applicability: a numeric bound ignores strings, a
length bound ignores numbers, and so on. This keeps a rule shared by every
member of a union (``type: [integer, string]``) meaningful for each of them.
"""

import math
import numbers
import re
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from ._types import RuleFactory, RuleFunction
from .errors import RuleError
from .models import SchemaModel

_EMAIL_RE = re.compile(r"[^@]+@[^@]+\.[^@]+")
_URI_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:.*$")
_DURATION_RE = re.compile(r"^P(?:\d+Y)?(?:\d+M)?(?:\d+D)?(?:T(?:\d+H)?(?:\d+M)?(?:\d+S)?)?$")

_INTEGER_FORMAT_RANGES = {
    "int8": (-(2**7), 2**7 - 1),
    "int16": (-(2**15), 2**15 - 1),
    "int32": (-(2**31), 2**31 - 1),
    "int64": (-(2**63), 2**63 - 1),
    "long": (-(2**63), 2**63 - 1),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _numeric_bound(
    check: Callable[[Any, Any], bool], message: str
) -> RuleFactory:
    def factory(limit: Any, name: str, schema: SchemaModel) -> RuleFunction:
        def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
            if _is_number(value) and not check(value, limit):
                raise RuleError(message.format(limit=limit))
            return value

        return rule

    return factory


def multiple_of(divisor: Any, name: str, schema: SchemaModel) -> RuleFunction:
    if not _is_number(divisor) or divisor <= 0:
        raise ValueError(f"'{name}' must be a positive number, got {divisor!r}")

    def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        if not _is_number(value):
            return value
        remainder = math.fmod(value, divisor)
        if not (
            math.isclose(remainder, 0, abs_tol=1e-9)
            or math.isclose(abs(remainder), divisor, rel_tol=1e-9)
        ):
            raise RuleError(f"Value must be multiple of {divisor}")
        return value

    return rule


def _length_bound(
    applies: Callable[[Any], bool], check: Callable[[int, int], bool], message: str
) -> RuleFactory:
    def factory(limit: Any, name: str, schema: SchemaModel) -> RuleFunction:
        def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
            if applies(value) and not check(len(value), limit):
                raise RuleError(message.format(limit=limit))
            return value

        return rule

    return factory


def unique_items(enabled: Any, name: str, schema: SchemaModel) -> RuleFunction:
    def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        if enabled and _is_sequence(value) and len(value) != len({repr(v) for v in value}):
            raise RuleError("Array must contain unique items")
        return value

    return rule


def pattern(expression: Any, name: str, schema: SchemaModel) -> RuleFunction:
    try:
        compiled = re.compile(expression)
    except (re.error, TypeError) as e:
        raise ValueError(f"Invalid '{name}' expression {expression!r}: {e}") from e

    def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        if isinstance(value, str) and not compiled.search(value):
            raise RuleError(f"Value does not match pattern {expression!r}")
        return value

    return rule


def enum(allowed: Any, name: str, schema: SchemaModel) -> RuleFunction:
    choices = list(allowed) if isinstance(allowed, (list, tuple, set, frozenset)) else [allowed]

    def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        if value not in choices:
            raise RuleError(f"Value must be one of: {choices}")
        return value

    return rule


_STRING_FORMATS = {
    "email": _EMAIL_RE,
    "uri": _URI_RE,
    "duration": _DURATION_RE,
}

_DATE_FORMATS: dict[str, Callable[[str], Any]] = {
    "date-time": lambda v: datetime.fromisoformat(v.replace("Z", "+00:00")),
    "date": lambda v: datetime.strptime(v, "%Y-%m-%d").date(),
    "time": lambda v: datetime.strptime(v, "%H:%M:%S").time(),
    "timestamp": lambda v: datetime.fromtimestamp(float(v)),
}


def format_(kind: Any, name: str, schema: SchemaModel) -> RuleFunction:
    """Check string formats and convert date/time formats.

    Unknown format names pass values through unchanged.
    """

    def rule(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        if kind in _INTEGER_FORMAT_RANGES and _is_number(value):
            low, high = _INTEGER_FORMAT_RANGES[kind]
            if (isinstance(value, float) and not value.is_integer()) or not low <= value <= high:
                raise RuleError(f"Value is out of range for format {kind}")
            return value
        if not isinstance(value, str):
            return value
        checker = _STRING_FORMATS.get(kind)
        if checker is not None:
            if not checker.match(value):
                raise RuleError(f"Invalid {kind} format: {value}")
            return value
        parser = _DATE_FORMATS.get(kind)
        if parser is None:
            return value
        try:
            return parser(value)
        except (ValueError, OverflowError, OSError) as e:
            raise RuleError(f"Invalid {kind} format: {value}") from e

    return rule


BUILTIN_RULES: dict[str, RuleFactory] = {
    "minimum": _numeric_bound(lambda v, limit: v >= limit, "Value must be >= {limit}"),
    "maximum": _numeric_bound(lambda v, limit: v <= limit, "Value must be <= {limit}"),
    "exclusiveMinimum": _numeric_bound(lambda v, limit: v > limit, "Value must be > {limit}"),
    "exclusiveMaximum": _numeric_bound(lambda v, limit: v < limit, "Value must be < {limit}"),
    "multipleOf": multiple_of,
    "minLength": _length_bound(
        lambda v: isinstance(v, str),
        lambda n, limit: n >= limit,
        "String must be at least {limit} characters long",
    ),
    "maxLength": _length_bound(
        lambda v: isinstance(v, str),
        lambda n, limit: n <= limit,
        "String must be at most {limit} characters long",
    ),
    "minItems": _length_bound(
        _is_sequence, lambda n, limit: n >= limit, "Array must have at least {limit} items"
    ),
    "maxItems": _length_bound(
        _is_sequence, lambda n, limit: n <= limit, "Array must have at most {limit} items"
    ),
    "uniqueItems": unique_items,
    "pattern": pattern,
    "enum": enum,
    "format": format_,
}
