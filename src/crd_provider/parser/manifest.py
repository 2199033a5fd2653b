"""Parse CustomResourceDefinition manifests into CrdInfo records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from crd_provider.errors import ManifestError

CRD_KIND = "CustomResourceDefinition"
CRD_LIST_KIND = "CustomResourceDefinitionList"


@dataclass(frozen=True)
class CrdInfo:
    """The parts of a CRD the registry needs."""

    name: str
    group: str
    kind: str
    singular: str
    plural: str
    served_versions: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> CrdInfo:
        """Build from a decoded CRD manifest.

        Versions with ``served: false`` are left out. A missing singular name
        falls back to the lower-cased kind, which is what the API server
        defaults it to.
        """
        spec = body.get("spec") or {}
        names = spec.get("names") or {}
        group = spec.get("group", "")
        kind = names.get("kind", "")
        if not group or not kind:
            name = (body.get("metadata") or {}).get("name", "<unknown>")
            raise ManifestError(f"CRD '{name}' is missing spec.group or spec.names.kind")

        served = tuple(
            v["name"]
            for v in spec.get("versions") or []
            if isinstance(v, Mapping) and v.get("name") and v.get("served", True)
        )
        return cls(
            name=(body.get("metadata") or {}).get("name", f"{names.get('plural', '')}.{group}"),
            group=group,
            kind=kind,
            singular=names.get("singular") or kind.lower(),
            plural=names.get("plural", ""),
            served_versions=served,
        )


def parse_multi_doc(text: str) -> list[dict[str, Any]]:
    """Split YAML text into manifest dicts, unwrapping ``List`` kinds."""
    try:
        docs = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML: {e}") from e

    manifests: list[dict[str, Any]] = []
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        # kubectl get -o yaml returns a List wrapper
        if str(doc.get("kind") or "").endswith("List") and isinstance(doc.get("items"), list):
            manifests.extend(item for item in doc["items"] if isinstance(item, dict))
        else:
            manifests.append(doc)
    return manifests


def parse_crds(text: str) -> list[CrdInfo]:
    """Parse every CRD found in YAML text; other kinds are ignored."""
    return [
        CrdInfo.from_body(doc)
        for doc in parse_multi_doc(text)
        if (doc.get("kind") or CRD_KIND) == CRD_KIND
    ]
