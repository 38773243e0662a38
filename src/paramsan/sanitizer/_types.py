"""Type definitions for the paramsan sanitizer.

This module re-exports the Pydantic schema models and defines the callable
signatures shared by coercers, rules and compiled sanitizers.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Union

from .models import ParameterSchemaModel, SchemaModel

# Converts a raw value to one target type, raising CoercionError on failure.
Coercer = Callable[[Any], Any]

# (value, key, record) -> value; raises RuleError to reject the value.
RuleFunction = Callable[[Any, str | None, Mapping[str, Any] | None], Any]

# (rule_value, rule_name, schema) -> RuleFunction
RuleFactory = Callable[[Any, str, SchemaModel], RuleFunction]

# (value, key, record) -> sanitized value, or the original value on failure.
FieldSanitizer = Callable[[Any, str | None, Mapping[str, Any] | None], Any]

# A single schema or an ordered list of alternatives, as models or raw dicts.
SchemaLike = Union[SchemaModel, Mapping[str, Any]]
FieldSchema = Union[SchemaLike, Sequence[SchemaLike]]

# A list of named schemas, or a mapping from field name to field schema.
SchemaCollection = Union[Sequence[Union[ParameterSchemaModel, Mapping[str, Any]]], Mapping[str, FieldSchema]]

__all__ = [
    "Coercer",
    "RuleFunction",
    "RuleFactory",
    "FieldSanitizer",
    "SchemaLike",
    "FieldSchema",
    "SchemaCollection",
    "SchemaModel",
    "ParameterSchemaModel",
]
