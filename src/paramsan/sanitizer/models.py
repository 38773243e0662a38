"""Pydantic models for sanitization schemas.

A schema describes how a single field is sanitized. Only ``type``,
``default``, ``items`` and ``properties`` have a fixed meaning; every other
key is kept verbatim and treated as a rule keyword, looked up by name in the
rule registry when the schema is compiled.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import ConfigDict, model_validator

from paramsan.models import ParamsanBaseModel

RESERVED_KEYS = frozenset({"type", "default", "items", "properties"})


class SchemaModel(ParamsanBaseModel):
    """Schema definition for one field.

    Attributes:
        type: A type name, or an ordered list of type names (a union).
        default: Value substituted when the input is missing or null.
        has_default: Whether a default was explicitly provided.
        items: Schema applied to each element when ``type`` is ``array``.
        properties: Ordered child schemas of a nested record. Each value is a
            schema or a list of alternative schemas.

    Any other keyword (``minimum``, ``pattern``, ``enum``...) is stored as an
    extra field and exposed through :meth:`iter_rules`.

    Example:
        >>> schema = SchemaModel(type="integer", minimum=0, default=10)
        >>> list(schema.iter_rules())
        [('minimum', 0)]
        >>> schema = SchemaModel.model_validate({
        ...     "type": "object",
        ...     "properties": [{"name": "id", "type": "integer"}],
        ... })
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str | list[str] | None = None
    default: Any | None = None
    has_default: bool = False
    items: SchemaModel | None = None
    properties: dict[str, SchemaModel | list[SchemaModel]] | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_input(cls, values: Any) -> Any:
        """Track explicit defaults and accept properties given as a named list."""
        if not isinstance(values, dict):
            return values
        values = dict(values)
        if "default" in values:
            values["has_default"] = True
        properties = values.get("properties")
        if isinstance(properties, list):
            values["properties"] = _named_list_to_dict(properties)
        return values

    @property
    def is_union(self) -> bool:
        return isinstance(self.type, list)

    @property
    def type_names(self) -> list[str]:
        if self.type is None:
            return []
        return list(self.type) if isinstance(self.type, list) else [self.type]

    def iter_rules(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(rule_name, rule_value)`` for every non-reserved keyword."""
        for key, value in (self.model_extra or {}).items():
            if key not in RESERVED_KEYS:
                yield key, value

    def with_type(self, type_name: str) -> SchemaModel:
        """Return a copy of this schema restricted to a single type name."""
        return self.model_copy(update={"type": type_name})


class ParameterSchemaModel(SchemaModel):
    """Schema for a named top-level field.

    Example:
        >>> param = ParameterSchemaModel(name="limit", type="integer", default=10)
        >>> param.has_default
        True
    """

    name: str


def _named_list_to_dict(entries: list[Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for entry in entries:
        if isinstance(entry, SchemaModel):
            name = getattr(entry, "name", None) or (entry.model_extra or {}).get("name")
        elif isinstance(entry, dict):
            name = entry.get("name")
        else:
            name = None
        if not isinstance(name, str) or not name:
            raise ValueError("Entries of a 'properties' list must carry a 'name'")
        result[name] = entry
    return result


SchemaModel.model_rebuild()
ParameterSchemaModel.model_rebuild()
