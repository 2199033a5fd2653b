"""Exception hierarchy shared by every crd-provider component."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for errors surfaced to the host as diagnostics."""


class MappingError(ProviderError):
    """A schema node could not be translated into an attribute.

    Raised only where dropping the offending field would leave its parent
    unrepresentable (untyped collections, name collisions, bad roots).
    """

    def __init__(self, path: str, message: str, resource: str = "") -> None:
        self.path = path
        self.message = message
        self.resource = resource
        location = path or "<root>"
        text = f"At '{location}': {message}"
        super().__init__(f"{resource}: {text}" if resource else text)

    def for_resource(self, resource: str) -> MappingError:
        """The same failure, attributed to the named resource type."""
        return MappingError(self.path, self.message, resource)


class ResolutionError(ProviderError):
    """No usable OpenAPI component schema for a group/version/kind."""

    def __init__(self, group: str, version: str, kind: str, reason: str) -> None:
        self.group = group
        self.version = version
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot resolve schema for {group}/{version} {kind}: {reason}")


class ManifestError(ProviderError):
    """A CRD manifest could not be read or parsed."""


class SettingsError(ProviderError):
    """The settings file is unreadable or malformed."""


class DocumentError(ProviderError):
    """The OpenAPI v3 discovery index could not be read."""
