"""Translate OpenAPI v3 schema nodes into typed attributes.

Properties that cannot be classified (no type, unresolved ``$ref``, an
integer without a known format, ...) are dropped from their parent and
logged. Collections are stricter: a List or Map whose element type cannot be
resolved has no valid shape at all, so that raises ``MappingError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from crd_provider.errors import MappingError
from crd_provider.schema.attributes import (
    Attribute,
    BoolAttribute,
    DynamicAttribute,
    ElementType,
    Float32Attribute,
    Float64Attribute,
    Int32Attribute,
    Int64Attribute,
    ListAttribute,
    ListNestedAttribute,
    MapAttribute,
    MapNestedAttribute,
    SingleNestedAttribute,
    StringAttribute,
)
from crd_provider.schema.naming import normalize_field_name
from crd_provider.schema.node import PRIMITIVE_TYPES, SchemaNode

logger = logging.getLogger(__name__)

DEFAULT_SKIP_FIELDS = frozenset({"kind", "apiVersion", "status"})

_INTEGER_FORMATS = {
    "int32": ElementType.INT32,
    "int64": ElementType.INT64,
}

_NUMBER_FORMATS = {
    "float": ElementType.FLOAT32,
    "double": ElementType.FLOAT64,
}

_SCALAR_ATTRIBUTES: dict[ElementType, type[Attribute]] = {
    ElementType.STRING: StringAttribute,
    ElementType.BOOL: BoolAttribute,
    ElementType.INT32: Int32Attribute,
    ElementType.INT64: Int64Attribute,
    ElementType.FLOAT32: Float32Attribute,
    ElementType.FLOAT64: Float64Attribute,
}


@dataclass(frozen=True)
class MapperConfig:
    """Mapper settings.

    ``skip_fields`` are wire names dropped from a resource's top-level
    object before mapping.
    """

    skip_fields: frozenset[str] = DEFAULT_SKIP_FIELDS


class AttributeMapper:
    """Stateless translator from ``SchemaNode`` trees to attribute trees."""

    def __init__(self, config: MapperConfig | None = None) -> None:
        self.config = config or MapperConfig()

    def map_resource(self, node: SchemaNode) -> dict[str, Attribute]:
        """Map a resource's top-level object schema to its attribute set."""
        if "object" not in node.types:
            found = ",".join(sorted(node.types)) or "<none>"
            raise MappingError("", f"top-level schema must be an object, got type {found}")
        return self.map_object(node, skip=self.config.skip_fields)

    def map_object(
        self,
        node: SchemaNode,
        path: str = "",
        skip: frozenset[str] = frozenset(),
    ) -> dict[str, Attribute]:
        """Map every property of an object node, keyed by snake_case name."""
        attributes: dict[str, Attribute] = {}
        sources: dict[str, str] = {}
        for name, child in node.properties.items():
            if name in skip:
                continue
            key = normalize_field_name(name)
            child_path = f"{path}.{key}" if path else key
            attr = self.map_attribute(child, name in node.required, child_path)
            if attr is None:
                continue
            if key in attributes:
                raise MappingError(
                    child_path,
                    f"fields '{sources[key]}' and '{name}' both map to attribute '{key}'",
                )
            attributes[key] = attr
            sources[key] = name
        return attributes

    def map_attribute(
        self, node: SchemaNode, required: bool, path: str = ""
    ) -> Attribute | None:
        """Map a single schema node; ``None`` means the field is dropped."""
        if self._is_dynamic(node, path):
            return DynamicAttribute(description=node.description, required=required)

        types = node.types
        if types & PRIMITIVE_TYPES:
            element = _scalar_type(node)
            if element is None:
                _log_drop(path, node, f"unsupported format {node.format!r}")
                return None
            return _SCALAR_ATTRIBUTES[element](
                description=node.description, required=required
            )
        if "object" in types:
            return self._map_object_attribute(node, required, path)
        if "array" in types:
            return self._map_array_attribute(node, required, path)

        if types:
            _log_drop(path, node, f"unsupported type {','.join(sorted(types))}")
        else:
            _log_drop(path, node, "no type")
        return None

    def _map_object_attribute(
        self, node: SchemaNode, required: bool, path: str
    ) -> Attribute | None:
        if node.properties:
            return SingleNestedAttribute(
                description=node.description,
                required=required,
                attributes=self.map_object(node, path),
            )

        additional = node.additional_properties
        if additional is None or not additional.allows:
            _log_drop(path, node, "object without properties")
            return None
        if additional.schema is None:
            # additionalProperties: true carries no value schema to type
            return DynamicAttribute(description=node.description, required=required)

        return self._map_collection(
            additional.schema,
            description=node.description,
            required=required,
            path=f"{path}.*",
            flat=MapAttribute,
            nested=MapNestedAttribute,
        )

    def _map_array_attribute(
        self, node: SchemaNode, required: bool, path: str
    ) -> Attribute:
        if node.items is None:
            raise MappingError(path, "array schema has no items")
        return self._map_collection(
            node.items,
            description=node.description,
            required=required,
            path=f"{path}[*]",
            flat=ListAttribute,
            nested=ListNestedAttribute,
        )

    def _map_collection(
        self,
        element: SchemaNode,
        *,
        description: str,
        required: bool,
        path: str,
        flat: type[ListAttribute] | type[MapAttribute],
        nested: type[ListNestedAttribute] | type[MapNestedAttribute],
    ) -> Attribute:
        if self._is_dynamic(element, path):
            return flat(
                description=description,
                required=required,
                element_type=ElementType.DYNAMIC,
            )

        if element.is_primitive:
            element_type = _scalar_type(element)
            if element_type is None:
                raise MappingError(
                    path,
                    f"element type {_describe(element)} has no native scalar type",
                )
            return flat(
                description=description, required=required, element_type=element_type
            )

        if _is_closed_object(element):
            # elements still need a type even when they declare no fields
            return nested(description=description, required=required, attributes={})

        template = self.map_attribute(element, True, path)
        if not isinstance(template, SingleNestedAttribute):
            raise MappingError(
                path, f"element schema {_describe(element)} is not a typed object"
            )
        return nested(
            description=description,
            required=required,
            attributes=template.attributes,
        )

    @staticmethod
    def _is_dynamic(node: SchemaNode, path: str) -> bool:
        try:
            return node.preserves_unknown_fields()
        except ValueError as exc:
            raise MappingError(path, str(exc)) from exc


def _is_closed_object(node: SchemaNode) -> bool:
    """An object type with no properties and no open-ended values."""
    if "object" not in node.types or node.properties:
        return False
    additional = node.additional_properties
    return additional is None or not additional.allows


def _scalar_type(node: SchemaNode) -> ElementType | None:
    types = node.types
    if "string" in types:
        return ElementType.STRING
    if "integer" in types:
        return _INTEGER_FORMATS.get(node.format)
    if "number" in types:
        return _NUMBER_FORMATS.get(node.format)
    if "boolean" in types:
        return ElementType.BOOL
    return None


def _describe(node: SchemaNode) -> str:
    if node.ref:
        return f"$ref {node.ref}"
    if not node.types:
        return "<untyped>"
    desc = ",".join(sorted(node.types))
    if node.format:
        desc += f" ({node.format})"
    return desc


def _log_drop(path: str, node: SchemaNode, reason: str) -> None:
    if node.ref:
        reason = f"{reason}, unresolved $ref {node.ref}"
    logger.debug("Dropping attribute '%s': %s", path or "<root>", reason)
