"""Resource type names and attribute name normalization."""

from __future__ import annotations

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[-.\s]+")


def derive_name(group: str, version: str, kind: str) -> str:
    """Build the resource name ``<group>_<version>_<kind>``.

    ``kind`` is the CRD's singular name; dots in the group become
    underscores so the result is a valid identifier.

    >>> derive_name("apps.example.com", "v1", "Widget")
    'apps_example_com_v1_widget'
    """
    g = group.replace(".", "_")
    return f"{g}_{version}_{kind.lower()}"


def type_name(provider_type_name: str, resource_name: str) -> str:
    """Full type name the host registers, e.g. ``crd_apps_example_com_v1_widget``."""
    return f"{provider_type_name}_{resource_name}"


def normalize_field_name(name: str) -> str:
    """Convert an API field name (camelCase) to snake_case.

    >>> normalize_field_name("apiVersion")
    'api_version'
    >>> normalize_field_name("podCIDR")
    'pod_cidr'
    >>> normalize_field_name("HTTPGet")
    'http_get'
    """
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    s = _SEPARATORS.sub("_", s)
    return s.lower()
