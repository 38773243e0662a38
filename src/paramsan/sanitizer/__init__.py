"""paramsan sanitizer - schema-driven coercion of loosely-typed input.

This module turns "everything is a string" transport input (query strings,
form bodies, headers) into typed values described by a per-field schema:
- Type coercion (string, number, integer, boolean, date, array, object)
- Rule application (minimum, maximum, pattern, enum, ...)
- Union types resolved by first successful alternative
- Default values for missing or null fields
- Recursion into nested records and array items

Sanitization is best effort and never raises: a value that cannot be
sanitized is handed back unchanged. Callers that need guarantees must
validate the result separately.

## Key Components

- `Sanitizer`: Owns the type and rule registries and compiles schemas
- `RecordSanitizer`: Compiled callable producing clean records
- `SanitizationCompiler`: Builds per-field resolvers and sanitizers
- `SchemaModel` / `ParameterSchemaModel`: Schema data model

## Quick Examples

### Record Sanitization
```python
from paramsan.sanitizer import Sanitizer

sanitize = Sanitizer().compile(
    [
        {"name": "user_id", "type": "integer"},
        {"name": "tags", "type": "array", "items": {"type": "string"}},
        {"name": "active", "type": "boolean", "default": True},
    ]
)

sanitize({"user_id": "42", "tags": "red", "extra": "dropped"})
# Returns: {"user_id": 42, "tags": ["red"], "active": True}
```

### Custom Types
```python
sanitizer = Sanitizer()
sanitizer.register_type("csv", lambda value: value.split(","))
sanitize = sanitizer.compile({"ids": {"type": "csv"}})
```
"""

from ._types import (
    Coercer,
    FieldSanitizer,
    FieldSchema,
    ParameterSchemaModel,
    RuleFactory,
    RuleFunction,
    SchemaCollection,
    SchemaModel,
)
from .coercers import BUILTIN_TYPES
from .compiler import SanitizationCompiler
from .core import RecordSanitizer, Sanitizer, compile_schemas
from .errors import FAILED, CoercionError, RuleError, SanitizationError, is_failed
from .models import RESERVED_KEYS
from .rules import BUILTIN_RULES

__all__ = [
    # Types
    "Coercer",
    "RuleFunction",
    "RuleFactory",
    "FieldSanitizer",
    "FieldSchema",
    "SchemaCollection",
    "SchemaModel",
    "ParameterSchemaModel",
    "RESERVED_KEYS",
    # Registries
    "BUILTIN_TYPES",
    "BUILTIN_RULES",
    # Errors
    "SanitizationError",
    "CoercionError",
    "RuleError",
    "FAILED",
    "is_failed",
    # Engine
    "SanitizationCompiler",
    "RecordSanitizer",
    "Sanitizer",
    "compile_schemas",
]
