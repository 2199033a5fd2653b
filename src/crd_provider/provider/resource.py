"""Resource descriptors and their translated schemas."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from crd_provider.errors import MappingError
from crd_provider.schema.attributes import Attribute
from crd_provider.schema.mapper import AttributeMapper
from crd_provider.schema.node import SchemaNode

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ResourceSchema:
    """Attribute set served for one resource type."""

    attributes: Mapping[str, Attribute] = field(default_factory=dict)
    version: int = SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "attributes": {name: a.to_dict() for name, a in self.attributes.items()},
        }


@dataclass(frozen=True)
class ResourceDescriptor:
    """One (group, version, kind) registered as a resource type.

    Building a descriptor is cheap; the attribute tree is translated each
    time ``schema`` is called.
    """

    name: str
    group: str
    version: str
    kind: str
    root: SchemaNode

    def schema(self, mapper: AttributeMapper) -> ResourceSchema:
        try:
            attributes = mapper.map_resource(self.root)
        except MappingError as e:
            raise e.for_resource(self.name) from e
        return ResourceSchema(attributes=attributes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "group": self.group,
            "version": self.version,
            "kind": self.kind,
        }
