"""JSON structured output."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from crd_provider.provider.registry import RegistryResult
from crd_provider.provider.resource import ResourceSchema
from crd_provider.schema.attributes import Attribute


def render_resources_json(result: RegistryResult, provider_type_name: str) -> str:
    """Registered resource types plus diagnostics."""
    output = result.to_dict()
    for entry in output["resources"]:
        entry["type_name"] = f"{provider_type_name}_{entry['name']}"
    output["summary"] = {
        "resources": len(result.resources),
        "errors": len(result.errors),
    }
    return json.dumps(output, indent=2)


def render_schema_json(type_name: str, schema: ResourceSchema) -> str:
    output: dict[str, Any] = {"type_name": type_name}
    output.update(schema.to_dict())
    return json.dumps(output, indent=2)


def render_attributes_json(attributes: Mapping[str, Attribute]) -> str:
    return json.dumps(
        {"attributes": {name: a.to_dict() for name, a in attributes.items()}},
        indent=2,
    )
