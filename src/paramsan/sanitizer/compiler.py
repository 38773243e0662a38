"""Compile field schemas into sanitization functions.

Compilation happens once per schema. For every alternative of a field the
compiler builds an ordered list of steps: the type coercer first, then one
function per rule keyword. Running an alternative requires every step to
succeed. A union field tries its alternatives in declared order and keeps the
first one that succeeds.

Two layers are produced:

- a *resolver* returns the sanitized value or ``FAILED``; resolvers nest
  (array items, union members) without losing the failure signal;
- a *field sanitizer* wraps a resolver and hands back the original input when
  the resolver fails. It never raises.
"""

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ._types import Coercer, FieldSanitizer, FieldSchema, RuleFactory, RuleFunction
from .errors import FAILED, is_failed
from .models import SchemaModel

logger = logging.getLogger(__name__)

Resolver = Callable[[Any, str | None, Mapping[str, Any] | None], Any]
NestedResolverFactory = Callable[[SchemaModel], Resolver]


def to_schema_models(field_schema: FieldSchema) -> list[SchemaModel]:
    """Normalize a field schema to its ordered list of alternatives."""
    if isinstance(field_schema, SchemaModel):
        return [field_schema]
    if isinstance(field_schema, Mapping):
        return [SchemaModel.model_validate(dict(field_schema))]
    if isinstance(field_schema, Sequence) and not isinstance(field_schema, (str, bytes)):
        models: list[SchemaModel] = []
        for entry in field_schema:
            models.extend(to_schema_models(entry))
        return models
    raise TypeError(f"Expected a schema or a list of schemas, got {type(field_schema).__name__}")


def _coercion_step(coercer: Coercer) -> RuleFunction:
    def step(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        return coercer(value)

    return step


def _wrapping_step(coercer: Coercer) -> RuleFunction:
    """Coerce to a sequence, wrapping values that cannot be normalized."""

    def step(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
        try:
            return coercer(value)
        except Exception:
            return [value]

    return step


class SanitizationCompiler:
    """Builds resolvers and field sanitizers from schemas.

    Args:
        types: Mapping of type name to coercer. Unregistered type names
            contribute no coercion step.
        rules: Mapping of rule name to rule factory. Unregistered keywords
            are ignored.
        nested: Factory used for schemas that declare ``properties``. Without
            it, ``properties`` is ignored and the schema compiles as a plain
            chain.
    """

    def __init__(
        self,
        types: Mapping[str, Coercer],
        rules: Mapping[str, RuleFactory],
        nested: NestedResolverFactory | None = None,
    ):
        self.types = types
        self.rules = rules
        self.nested = nested

    def compile_chain(self, schema: SchemaModel, wrap_scalars: bool = False) -> Resolver:
        """Compile a single-typed schema into an all-steps-required chain."""
        steps: list[RuleFunction] = []

        if isinstance(schema.type, str):
            coercer = self.types.get(schema.type)
            if coercer is None:
                logger.warning(f"Unknown type '{schema.type}', no coercion will be applied")
            elif schema.type == "array" and wrap_scalars:
                steps.append(_wrapping_step(coercer))
            else:
                steps.append(_coercion_step(coercer))

        for rule_name, rule_value in schema.iter_rules():
            factory = self.rules.get(rule_name)
            if factory is not None:
                steps.append(factory(rule_value, rule_name, schema))

        def chain(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
            for step in steps:
                try:
                    value = step(value, key, record)
                except Exception as e:
                    logger.debug(f"Sanitization step failed for '{key}': {e}")
                    return FAILED
                if is_failed(value):
                    return FAILED
            return value

        return chain

    def compile_alternative(self, schema: SchemaModel, wrap_scalars: bool = False) -> Resolver:
        """Compile one union member, including nested records and array items."""
        if schema.properties and self.nested is not None:
            return self.nested(schema)

        chain = self.compile_chain(schema, wrap_scalars=wrap_scalars)
        if schema.type != "array" or schema.items is None:
            return chain

        resolve_item = self.compile_resolver(schema.items)

        def resolve_array(
            value: Any, key: str | None = None, record: Mapping[str, Any] | None = None
        ) -> Any:
            value = chain(value, key, record)
            if is_failed(value):
                return FAILED
            if not isinstance(value, (list, tuple)):
                value = [value]
            result = []
            for item in value:
                sanitized = resolve_item(item, key, record)
                if is_failed(sanitized):
                    return FAILED
                result.append(sanitized)
            return result

        return resolve_array

    def compile_resolver(self, field_schema: FieldSchema) -> Resolver:
        """Compile a field schema into a resolver returning ``FAILED`` on failure."""
        schemas = to_schema_models(field_schema)
        alternatives: list[SchemaModel] = []
        for schema in schemas:
            if schema.is_union:
                alternatives.extend(schema.with_type(name) for name in schema.type_names)
            else:
                alternatives.append(schema)

        is_union = len(alternatives) > 1
        resolvers = [
            self.compile_alternative(schema, wrap_scalars=not is_union) for schema in alternatives
        ]
        default_schema = next((s for s in schemas if s.has_default), None)
        logger.debug(
            f"Compiled resolver for types {[s.type for s in alternatives]} "
            f"({'union' if is_union else 'single'})"
        )

        def resolve(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
            if value is None:
                if default_schema is not None and default_schema.default is not None:
                    default = copy.deepcopy(default_schema.default)
                    result = resolve(default, key, record)
                    return default if is_failed(result) else result
                return value
            for resolver in resolvers:
                result = resolver(value, key, record)
                if not is_failed(result):
                    return result
            return FAILED

        return resolve

    def compile_field(self, field_schema: FieldSchema) -> FieldSanitizer:
        """Compile a field schema into a sanitizer that never raises.

        When sanitization is not possible the original value is returned.
        """
        return self.with_fallback(self.compile_resolver(field_schema))

    @staticmethod
    def with_fallback(resolver: Resolver) -> FieldSanitizer:
        def sanitize(value: Any, key: str | None = None, record: Mapping[str, Any] | None = None) -> Any:
            result = resolver(value, key, record)
            if is_failed(result):
                logger.debug(f"Could not sanitize '{key}', keeping the original value")
                return value
            return result

        return sanitize
