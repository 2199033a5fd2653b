"""Typed attribute tree produced from CRD schemas."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class ElementType(Enum):
    """Native scalar types usable as List/Map element types."""

    STRING = "string"
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DYNAMIC = "dynamic"


@dataclass(frozen=True, kw_only=True)
class Attribute:
    """Common fields of every attribute variant.

    ``optional`` is always the negation of ``required``; the mapper never
    produces computed-only attributes.
    """

    type_name: ClassVar[str] = ""

    description: str = ""
    required: bool = False

    @property
    def optional(self) -> bool:
        return not self.required

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type_name,
            "required": self.required,
            "optional": self.optional,
        }
        if self.description:
            result["description"] = self.description
        return result


@dataclass(frozen=True, kw_only=True)
class StringAttribute(Attribute):
    type_name: ClassVar[str] = "string"


@dataclass(frozen=True, kw_only=True)
class BoolAttribute(Attribute):
    type_name: ClassVar[str] = "bool"


@dataclass(frozen=True, kw_only=True)
class Int32Attribute(Attribute):
    type_name: ClassVar[str] = "int32"


@dataclass(frozen=True, kw_only=True)
class Int64Attribute(Attribute):
    type_name: ClassVar[str] = "int64"


@dataclass(frozen=True, kw_only=True)
class Float32Attribute(Attribute):
    type_name: ClassVar[str] = "float32"


@dataclass(frozen=True, kw_only=True)
class Float64Attribute(Attribute):
    type_name: ClassVar[str] = "float64"


@dataclass(frozen=True, kw_only=True)
class DynamicAttribute(Attribute):
    type_name: ClassVar[str] = "dynamic"


@dataclass(frozen=True, kw_only=True)
class ListAttribute(Attribute):
    type_name: ClassVar[str] = "list"

    element_type: ElementType

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["element_type"] = self.element_type.value
        return result


@dataclass(frozen=True, kw_only=True)
class MapAttribute(Attribute):
    type_name: ClassVar[str] = "map"

    element_type: ElementType

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["element_type"] = self.element_type.value
        return result


@dataclass(frozen=True, kw_only=True)
class _NestedAttribute(Attribute):
    attributes: Mapping[str, Attribute] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["attributes"] = {
            name: attr.to_dict() for name, attr in self.attributes.items()
        }
        return result


@dataclass(frozen=True, kw_only=True)
class SingleNestedAttribute(_NestedAttribute):
    type_name: ClassVar[str] = "single_nested"


@dataclass(frozen=True, kw_only=True)
class ListNestedAttribute(_NestedAttribute):
    type_name: ClassVar[str] = "list_nested"


@dataclass(frozen=True, kw_only=True)
class MapNestedAttribute(_NestedAttribute):
    type_name: ClassVar[str] = "map_nested"


NESTED_TYPES = (SingleNestedAttribute, ListNestedAttribute, MapNestedAttribute)


def walk(
    attributes: Mapping[str, Attribute], prefix: str = ""
) -> Iterator[tuple[str, Attribute]]:
    """Yield ``(dotted path, attribute)`` for every node, depth first."""
    for name, attr in attributes.items():
        path = f"{prefix}.{name}" if prefix else name
        yield path, attr
        if isinstance(attr, NESTED_TYPES):
            yield from walk(attr.attributes, path)
