"""Schema source resolver tests."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest
from crd_provider.errors import ResolutionError
from crd_provider.openapi.resolver import ResolverConfig, SchemaResolver, qualified_key
from crd_provider.openapi.source import MappingDocumentSource


def _document(schemas: dict[str, Any]) -> dict[str, Any]:
    return {"openapi": "3.0.0", "components": {"schemas": schemas}}


def _object(description: str) -> dict[str, Any]:
    return {"type": "object", "description": description, "properties": {"spec": {"type": "object"}}}


def _resolver(documents: dict[str, Any], config: ResolverConfig | None = None) -> SchemaResolver:
    return SchemaResolver(MappingDocumentSource(documents), config)


def test_qualified_key_reverses_group() -> None:
    assert qualified_key("apps.example.com", "v1", "Widget") == "com.example.apps.v1.Widget"


def test_resolves_qualified_component_key() -> None:
    resolver = _resolver(
        {
            "apis/apps.example.com/v1": _document(
                {
                    "com.example.apps.v1.WidgetList": _object("list"),
                    "com.example.apps.v1.Widget": _object("widget"),
                }
            )
        }
    )

    node = resolver.resolve("apps.example.com", "v1", "Widget")

    assert node.description == "widget"
    assert "spec" in node.properties


def test_exact_key_preferred_over_earlier_suffix_match() -> None:
    resolver = _resolver(
        {
            "apis/apps.example.com/v1": _document(
                {
                    "com.other.v1.Widget": _object("other"),
                    "com.example.apps.v1.Widget": _object("mine"),
                }
            )
        }
    )

    assert resolver.resolve("apps.example.com", "v1", "Widget").description == "mine"


def test_suffix_fallback_takes_first_candidate_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    resolver = _resolver(
        {
            "apis/apps.example.com/v1": _document(
                {
                    "example.widgets.v1.Widget": _object("first"),
                    "example.gadgets.v1.Widget": _object("second"),
                }
            )
        }
    )

    with caplog.at_level(logging.WARNING, logger="crd_provider.openapi.resolver"):
        node = resolver.resolve("apps.example.com", "v1", "Widget")

    assert node.description == "first"
    assert "Ambiguous schema" in caplog.text


@pytest.mark.parametrize(
    "key",
    [
        "io.k8s.api.apps.v1.DeploymentList",
        "io.k8s.api.apps.v1.DeploymentSpec",
        "io.k8s.api.apps.v1.DeploymentStatus",
        "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta",
        "io.k8s.api.admissionregistration.v1.MutatingWebhook",
    ],
)
def test_default_config_rejects_wrappers_and_meta_schemas(key: str) -> None:
    assert ResolverConfig().rejects(key)


def test_list_wrapper_is_never_selected() -> None:
    schemas = {"io.k8s.api.apps.v1.DeploymentList": _object("list")}
    resolver = _resolver({"apis/apps/v1": _document(schemas)})

    assert resolver.select_key(schemas, "apps", "v1", "Deployment") is None
    with pytest.raises(ResolutionError, match="no matching component schema"):
        resolver.resolve("apps", "v1", "Deployment")


def test_custom_reject_lists() -> None:
    schemas = {"com.example.apps.v1.Widget": _object("widget")}
    config = ResolverConfig(reject_prefixes=("com.example",), reject_suffixes=())
    resolver = _resolver({"apis/apps.example.com/v1": _document(schemas)}, config)

    with pytest.raises(ResolutionError):
        resolver.resolve("apps.example.com", "v1", "Widget")


def test_raw_json_documents_are_decoded() -> None:
    text = json.dumps(_document({"com.example.apps.v1.Widget": _object("from text")}))
    resolver = _resolver({"apis/apps.example.com/v1": text.encode("utf-8")})

    assert resolver.resolve("apps.example.com", "v1", "Widget").description == "from text"


@pytest.mark.parametrize(
    ("documents", "reason"),
    [
        ({}, "no OpenAPI document"),
        ({"apis/apps.example.com/v1": "{not json"}, "unparseable OpenAPI document"),
        ({"apis/apps.example.com/v1": "[]"}, "not an object"),
        ({"apis/apps.example.com/v1": {"openapi": "3.0.0"}}, "no components.schemas"),
        ({"apis/apps.example.com/v1": _document({"com.example.apps.v1.Gadget": _object("g")})},
         "no matching component schema"),
    ],
)
def test_resolution_failures_name_the_resource(documents: dict[str, Any], reason: str) -> None:
    with pytest.raises(ResolutionError) as excinfo:
        _resolver(documents).resolve("apps.example.com", "v1", "Widget")

    error = excinfo.value
    assert (error.group, error.version, error.kind) == ("apps.example.com", "v1", "Widget")
    assert reason in str(error)
