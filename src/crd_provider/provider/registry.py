"""Enumerate CRD versions into resource descriptors."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from crd_provider.errors import ProviderError
from crd_provider.openapi.resolver import SchemaResolver
from crd_provider.parser.manifest import CrdInfo
from crd_provider.provider.resource import ResourceDescriptor
from crd_provider.schema.naming import derive_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A problem attributable to one resource type."""

    severity: str  # "error" or "warning"
    summary: str
    detail: str
    resource: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "summary": self.summary,
            "detail": self.detail,
            "resource": self.resource,
        }


class RegistryError(ProviderError):
    """Raised by ``RegistryResult.raise_for_errors``."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        lines = [f"{d.resource}: {d.detail}" for d in diagnostics]
        super().__init__(f"{len(diagnostics)} resource(s) failed to register: " + "; ".join(lines))


@dataclass
class RegistryResult:
    """Descriptors that registered plus diagnostics for those that did not."""

    resources: list[ResourceDescriptor] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def raise_for_errors(self) -> None:
        """Abort the whole registration if any resource failed."""
        if self.has_errors:
            raise RegistryError(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "resources": [r.to_dict() for r in self.resources],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class ResourceRegistry:
    """Produce one descriptor per CRD x served version."""

    def __init__(self, crds: Iterable[CrdInfo], resolver: SchemaResolver) -> None:
        self.crds = list(crds)
        self.resolver = resolver

    def list_resources(self) -> RegistryResult:
        """Resolve every served version.

        Failures are collected as diagnostics and enumeration continues. A
        name already registered by an earlier descriptor is reported and the
        later one dropped.
        """
        result = RegistryResult()
        registered: dict[str, ResourceDescriptor] = {}

        for crd in self.crds:
            for version in crd.served_versions:
                name = derive_name(crd.group, version, crd.singular)
                try:
                    root = self.resolver.resolve(crd.group, version, crd.kind)
                except ProviderError as e:
                    logger.warning("Skipping %s: %s", name, e)
                    result.diagnostics.append(Diagnostic(
                        severity="error",
                        summary=f"Failed to resolve schema for resource {name!r}",
                        detail=str(e),
                        resource=name,
                    ))
                    continue

                if name in registered:
                    first = registered[name]
                    result.diagnostics.append(Diagnostic(
                        severity="error",
                        summary=f"Duplicate resource name {name!r}",
                        detail=(
                            f"{crd.group}/{version} {crd.kind} collides with "
                            f"{first.group}/{first.version} {first.kind}"
                        ),
                        resource=name,
                    ))
                    continue

                descriptor = ResourceDescriptor(
                    name=name,
                    group=crd.group,
                    version=version,
                    kind=crd.kind,
                    root=root,
                )
                registered[name] = descriptor
                result.resources.append(descriptor)

        return result
