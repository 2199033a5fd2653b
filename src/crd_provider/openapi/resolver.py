"""Locate the component schema of a CRD version in its OpenAPI v3 document."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from crd_provider.errors import ResolutionError
from crd_provider.openapi.source import DocumentSource, RawDocument
from crd_provider.schema.node import SchemaNode

logger = logging.getLogger(__name__)

DEFAULT_REJECT_PREFIXES = (
    "io.k8s.apimachinery.pkg.apis.meta.v1",
    "io.k8s.api.admissionregistration.v1",
)

DEFAULT_REJECT_SUFFIXES = ("List", "Spec", "Status")


@dataclass(frozen=True)
class ResolverConfig:
    """Component-schema keys the resolver never selects."""

    reject_prefixes: tuple[str, ...] = DEFAULT_REJECT_PREFIXES
    reject_suffixes: tuple[str, ...] = DEFAULT_REJECT_SUFFIXES

    def rejects(self, key: str) -> bool:
        return key.endswith(self.reject_suffixes) or key.startswith(self.reject_prefixes)


def qualified_key(group: str, version: str, kind: str) -> str:
    """Component name the API server gives a CRD schema.

    >>> qualified_key("apps.example.com", "v1", "Widget")
    'com.example.apps.v1.Widget'
    """
    reversed_group = ".".join(reversed(group.split(".")))
    return f"{reversed_group}.{version}.{kind}"


class SchemaResolver:
    """Resolve (group, version, kind) to the root ``SchemaNode``."""

    def __init__(self, source: DocumentSource, config: ResolverConfig | None = None) -> None:
        self.source = source
        self.config = config or ResolverConfig()

    def resolve(self, group: str, version: str, kind: str) -> SchemaNode:
        raw = self.source.fetch(group, version)
        if raw is None:
            raise ResolutionError(group, version, kind, "no OpenAPI document for group-version")

        schemas = _component_schemas(_decode(raw, group, version, kind), group, version, kind)
        key = self.select_key(schemas, group, version, kind)
        if key is None:
            raise ResolutionError(group, version, kind, "no matching component schema")

        try:
            return SchemaNode.from_dict(schemas[key])
        except TypeError as e:
            raise ResolutionError(group, version, kind, f"schema '{key}': {e}") from e

    def select_key(
        self, schemas: Mapping[str, Any], group: str, version: str, kind: str
    ) -> str | None:
        """Pick the component key for ``kind``.

        The fully qualified key wins when present; otherwise the first
        non-rejected key ending with the kind name is taken.
        """
        exact = qualified_key(group, version, kind)
        if exact in schemas and not self.config.rejects(exact):
            return exact

        candidates = [
            key for key in schemas
            if key.endswith(kind) and not self.config.rejects(key)
        ]
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.warning(
                "Ambiguous schema for %s/%s %s: %s; using '%s'",
                group, version, kind, ", ".join(candidates), candidates[0],
            )
        return candidates[0]


def _decode(raw: RawDocument, group: str, version: str, kind: str) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResolutionError(group, version, kind, f"unparseable OpenAPI document: {e}") from e
    if not isinstance(document, Mapping):
        raise ResolutionError(group, version, kind, "OpenAPI document is not an object")
    return document


def _component_schemas(
    document: Mapping[str, Any], group: str, version: str, kind: str
) -> Mapping[str, Any]:
    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    if not isinstance(schemas, Mapping):
        raise ResolutionError(group, version, kind, "OpenAPI document has no components.schemas")
    return schemas
