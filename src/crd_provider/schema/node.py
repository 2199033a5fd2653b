"""Immutable view of an OpenAPI v3 schema object."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

PRESERVE_UNKNOWN_FIELDS = "x-kubernetes-preserve-unknown-fields"

PRIMITIVE_TYPES = frozenset({"string", "integer", "number", "boolean"})

# strconv.ParseBool spellings, which is what the API server accepts
_TRUE_STRINGS = {"1", "t", "true"}
_FALSE_STRINGS = {"0", "f", "false"}


@dataclass(frozen=True)
class AdditionalProperties:
    """The ``additionalProperties`` keyword: allowed or not, plus a value schema."""

    allows: bool
    schema: SchemaNode | None = None


@dataclass(frozen=True)
class SchemaNode:
    """One JSON-Schema node as served by the Kubernetes OpenAPI v3 endpoint."""

    types: frozenset[str] = frozenset()
    format: str = ""
    description: str = ""
    required: frozenset[str] = frozenset()
    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    additional_properties: AdditionalProperties | None = None
    items: SchemaNode | None = None
    extensions: Mapping[str, Any] = field(default_factory=dict)
    ref: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SchemaNode:
        """Build a node tree from a decoded OpenAPI schema mapping."""
        if not isinstance(raw, Mapping):
            raise TypeError(f"schema node must be a mapping, got {type(raw).__name__}")

        properties = {
            name: cls.from_dict(child)
            for name, child in (raw.get("properties") or {}).items()
            if isinstance(child, Mapping)
        }

        items = raw.get("items")
        if isinstance(items, list):
            # tuple-typed arrays: only the first position is representable
            items = items[0] if items else None
        items_node = cls.from_dict(items) if isinstance(items, Mapping) else None

        return cls(
            types=_parse_types(raw.get("type")),
            format=str(raw.get("format") or ""),
            description=str(raw.get("description") or ""),
            required=frozenset(raw.get("required") or ()),
            properties=properties,
            additional_properties=_parse_additional(raw.get("additionalProperties")),
            items=items_node,
            extensions={k: v for k, v in raw.items() if k.startswith("x-")},
            ref=_parse_ref(raw),
        )

    @property
    def is_primitive(self) -> bool:
        """True for a bare scalar node (no object or array tag)."""
        return bool(self.types & PRIMITIVE_TYPES) and not self.types & {"object", "array"}

    def preserves_unknown_fields(self) -> bool:
        """Read the preserve-unknown-fields flag.

        The flag may arrive as a boolean or as its string spelling. Raises
        ``ValueError`` for any other value.
        """
        value = self.extensions.get(PRESERVE_UNKNOWN_FIELDS)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise ValueError(f"invalid {PRESERVE_UNKNOWN_FIELDS} value: {value!r}")


def _parse_types(value: Any) -> frozenset[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return frozenset()
    return frozenset(t for t in value if isinstance(t, str) and t != "null")


def _parse_additional(value: Any) -> AdditionalProperties | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return AdditionalProperties(allows=value)
    if isinstance(value, Mapping):
        return AdditionalProperties(allows=True, schema=SchemaNode.from_dict(value))
    return None


def _parse_ref(raw: Mapping[str, Any]) -> str:
    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ref
    # the v3 endpoint wraps references as allOf: [{$ref: ...}] to keep descriptions
    for part in raw.get("allOf") or ():
        if isinstance(part, Mapping) and isinstance(part.get("$ref"), str):
            return part["$ref"]
    return ""
