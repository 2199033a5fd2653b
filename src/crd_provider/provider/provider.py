"""Provider facade: resource types and their schemas, keyed by type name."""

from __future__ import annotations

from crd_provider.errors import ProviderError
from crd_provider.provider.registry import RegistryResult, ResourceRegistry
from crd_provider.provider.resource import ResourceDescriptor, ResourceSchema
from crd_provider.schema.attributes import Attribute, StringAttribute
from crd_provider.schema.mapper import AttributeMapper
from crd_provider.schema.naming import type_name

PROVIDER_TYPE_NAME = "crd"


def provider_schema() -> dict[str, Attribute]:
    """Configuration attributes accepted by the provider block."""
    return {
        "kubeconfig": StringAttribute(
            description="Path to the kubeconfig file used to reach the cluster",
            required=False,
        ),
    }


class CrdProvider:
    """Answer resource-type and schema requests from registry output."""

    def __init__(
        self,
        registry: ResourceRegistry,
        mapper: AttributeMapper | None = None,
        provider_type_name: str = PROVIDER_TYPE_NAME,
    ) -> None:
        self.registry = registry
        self.mapper = mapper or AttributeMapper()
        self.provider_type_name = provider_type_name

    def resources(self) -> RegistryResult:
        return self.registry.list_resources()

    def type_name(self, descriptor: ResourceDescriptor) -> str:
        return type_name(self.provider_type_name, descriptor.name)

    def find(self, name: str) -> ResourceDescriptor:
        """Look up a descriptor by derived name or full type name."""
        for descriptor in self.resources().resources:
            if name in (descriptor.name, self.type_name(descriptor)):
                return descriptor
        raise ProviderError(f"Unknown resource type: {name}")

    def resource_schema(self, name: str) -> ResourceSchema:
        """Translate the schema of one resource type.

        Raises MappingError when the resource's schema cannot be typed.
        """
        return self.find(name).schema(self.mapper)
