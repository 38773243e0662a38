"""Field dispatch and record sanitization.

``Sanitizer`` is the entry point. It owns a private copy of the type and rule
registries, compiles a collection of named schemas into a field map and
returns a ``RecordSanitizer`` that applies it to input records.
"""

import copy
import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from ._types import Coercer, FieldSanitizer, FieldSchema, RuleFactory, SchemaCollection
from .coercers import BUILTIN_TYPES, to_object
from .compiler import Resolver, SanitizationCompiler, to_schema_models
from .errors import FAILED, is_failed
from .models import RESERVED_KEYS, ParameterSchemaModel, SchemaModel
from .rules import BUILTIN_RULES

logger = logging.getLogger(__name__)


class RecordSanitizer:
    """Applies a field map to input records.

    The output holds only the fields of the field map, in field map order.
    A field present in the input is always included, even when its sanitized
    value is ``None``. A missing field is included only when sanitizing
    ``None`` yields a value, which is how defaults populate absent fields.

    Example:
        >>> sanitize = Sanitizer().compile([{"name": "limit", "type": "integer", "default": 10}])
        >>> sanitize({"limit": "25", "unknown": "x"})
        {'limit': 25}
        >>> sanitize(None)
        {'limit': 10}
    """

    def __init__(self, field_map: Mapping[str, FieldSanitizer]):
        self.field_map = MappingProxyType(dict(field_map))

    def __call__(self, record: Mapping[str, Any] | None = None) -> dict[str, Any]:
        if not isinstance(record, Mapping):
            if record is not None:
                logger.debug(f"Expected a mapping to sanitize, got {type(record).__name__}")
            record = {}

        sanitized: dict[str, Any] = {}
        for name, sanitize in self.field_map.items():
            has_field = name in record
            value = record[name] if has_field else None
            result = sanitize(value, name, record)
            if has_field or result is not None:
                sanitized[name] = result
        return sanitized

    @property
    def fields(self) -> list[str]:
        return list(self.field_map)


class Sanitizer:
    """Compiles schemas into record sanitizers.

    Each instance starts from a copy of the built-in registries, so types and
    rules registered on one instance do not leak into another. Register
    custom entries before compiling; sanitizers that are already compiled
    keep the registry content they were built with.

    Args:
        types: Extra or replacement type coercers, keyed by type name.
        rules: Extra or replacement rule factories, keyed by rule name.

    Example:
        >>> sanitizer = Sanitizer()
        >>> sanitizer.register_rule("trim", lambda enabled, name, schema: (
        ...     lambda value, key, record: value.strip() if enabled else value))
        >>> sanitize = sanitizer.compile({"q": {"type": "string", "trim": True}})
        >>> sanitize({"q": "  hello "})
        {'q': 'hello'}
    """

    def __init__(
        self,
        types: Mapping[str, Coercer] | None = None,
        rules: Mapping[str, RuleFactory] | None = None,
    ):
        self.types: dict[str, Coercer] = dict(BUILTIN_TYPES)
        self.rules: dict[str, RuleFactory] = dict(BUILTIN_RULES)
        for name, coercer in (types or {}).items():
            self.register_type(name, coercer)
        for name, factory in (rules or {}).items():
            self.register_rule(name, factory)

    def register_type(self, name: str, coercer: Coercer) -> None:
        """Register a type coercer under ``name``."""
        if not callable(coercer):
            raise TypeError(f"Coercer for type '{name}' must be callable")
        self.types[name] = coercer

    def register_rule(self, name: str, factory: RuleFactory) -> None:
        """Register a rule factory under ``name``.

        Raises:
            ValueError: If ``name`` is a reserved schema keyword.
        """
        if name in RESERVED_KEYS:
            raise ValueError(f"'{name}' is a reserved schema keyword and cannot be a rule")
        if not callable(factory):
            raise TypeError(f"Factory for rule '{name}' must be callable")
        self.rules[name] = factory

    def _compiler(self) -> SanitizationCompiler:
        # Snapshot the registries so later registrations leave compiled sanitizers alone
        return SanitizationCompiler(
            MappingProxyType(dict(self.types)),
            MappingProxyType(dict(self.rules)),
            nested=self._nested_resolver,
        )

    def compile_field(self, field_schema: FieldSchema) -> FieldSanitizer:
        """Compile one field schema (a schema or a list of alternatives)."""
        schemas = to_schema_models(field_schema)
        if len(schemas) == 1 and schemas[0].properties:
            return SanitizationCompiler.with_fallback(self._nested_resolver(schemas[0]))
        return self._compiler().compile_field(schemas)

    def build_field_map(self, schemas: SchemaCollection | None) -> dict[str, FieldSanitizer]:
        """Build the ordered field map for a collection of named schemas."""
        field_map: dict[str, FieldSanitizer] = {}
        for name, field_schema in _iter_named(schemas):
            field_map[name] = self.compile_field(field_schema)
        logger.debug(f"Built field map for fields {list(field_map)}")
        return field_map

    def compile(self, schemas: SchemaCollection | None) -> RecordSanitizer:
        """Compile named schemas into a record sanitizer.

        Args:
            schemas: A list of named schemas (dicts or ``ParameterSchemaModel``
                with a ``name``), or a mapping from field name to a schema or
                a list of alternative schemas.

        Returns:
            A ``RecordSanitizer``. With no schemas it always returns ``{}``.

        Raises:
            pydantic.ValidationError: If a schema description is malformed.
        """
        return RecordSanitizer(self.build_field_map(schemas))

    def _nested_resolver(self, schema: SchemaModel) -> Resolver:
        """Resolver for a schema declaring ``properties`` (a nested record)."""
        record_sanitizer = self.compile(schema.properties)
        coerce = self.types.get("object", to_object)
        default = schema.default if schema.has_default else None

        def resolve(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
            if value is None:
                if default is None:
                    # Only fields with defaults can appear here
                    populated = record_sanitizer({})
                    return populated or None
                value = copy.deepcopy(default)
                result = resolve(value, key, record)
                return value if is_failed(result) else result
            try:
                value = coerce(value)
            except Exception as e:
                logger.debug(f"Nested record '{key}' is not an object: {e}")
                return FAILED
            return record_sanitizer(value)

        return resolve


def _iter_named(schemas: SchemaCollection | None) -> list[tuple[str, FieldSchema]]:
    if not schemas:
        return []
    if isinstance(schemas, Mapping):
        return list(schemas.items())
    if isinstance(schemas, (SchemaModel, str)) or not isinstance(schemas, Sequence):
        schemas = [schemas]  # type: ignore[list-item]
    named: list[tuple[str, FieldSchema]] = []
    for entry in schemas:
        if not isinstance(entry, SchemaModel):
            entry = ParameterSchemaModel.model_validate(dict(entry))
        name = getattr(entry, "name", None) or (entry.model_extra or {}).get("name")
        if not name:
            raise ValueError("Schemas given as a list must each carry a 'name'")
        named.append((name, entry))
    return named


_default_sanitizer = Sanitizer()


def compile_schemas(schemas: SchemaCollection | None) -> RecordSanitizer:
    """Compile named schemas with the built-in types and rules."""
    return _default_sanitizer.compile(schemas)
