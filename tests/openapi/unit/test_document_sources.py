"""OpenAPI document source tests."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

import pytest
from crd_provider.core.runner import RunError
from crd_provider.errors import DocumentError
from crd_provider.openapi.source import (
    ClusterDocumentSource,
    DirectoryDocumentSource,
    MappingDocumentSource,
)

_INDEX = {
    "paths": {
        "api/v1": {"serverRelativeURL": "/openapi/v3/api/v1?hash=AAA"},
        "apis/apps.example.com/v1": {"serverRelativeURL": "/openapi/v3/apis/apps.example.com/v1?hash=BBB"},
        "apis/batch.example.com/v1alpha1": {},
    }
}


class _FakeKubectl:
    """Stand-in for subprocess.run that serves canned ``kubectl get --raw`` output."""

    def __init__(self, responses: dict[str, str], returncode: int = 0) -> None:
        self.responses = responses
        self.returncode = returncode
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], **_: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(cmd)
        raw_path = cmd[cmd.index("--raw") + 1]
        if raw_path not in self.responses:
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="NotFound")
        return subprocess.CompletedProcess(
            cmd, self.returncode, stdout=self.responses[raw_path], stderr="boom"
        )


def test_cluster_source_fetches_apis_documents(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeKubectl(
        {
            "/openapi/v3": json.dumps(_INDEX),
            "/openapi/v3/apis/apps.example.com/v1?hash=BBB": '{"components": {"schemas": {}}}',
        }
    )
    monkeypatch.setattr(subprocess, "run", fake)
    source = ClusterDocumentSource(kubeconfig="/tmp/kubeconfig", kube_context="dev")

    first = source.fetch("apps.example.com", "v1")
    second = source.fetch("apps.example.com", "v1")

    assert first == second == '{"components": {"schemas": {}}}'
    assert set(source.paths()) == {"apis/apps.example.com/v1", "apis/batch.example.com/v1alpha1"}
    assert source.paths()["apis/batch.example.com/v1alpha1"] == "/openapi/v3/apis/batch.example.com/v1alpha1"
    # index once, document once
    assert len(fake.calls) == 2
    assert fake.calls[0] == [
        "kubectl", "get", "--raw", "/openapi/v3",
        "--kubeconfig", "/tmp/kubeconfig", "--context", "dev",
    ]


def test_cluster_source_returns_none_for_unknown_group_version(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(subprocess, "run", _FakeKubectl({"/openapi/v3": json.dumps(_INDEX)}))

    assert ClusterDocumentSource().fetch("missing.example.com", "v1") is None


def test_cluster_source_rejects_bad_index(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(subprocess, "run", _FakeKubectl({"/openapi/v3": "<html>"}))

    with pytest.raises(DocumentError, match="discovery index"):
        ClusterDocumentSource().fetch("apps.example.com", "v1")


def test_cluster_source_surfaces_kubectl_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(subprocess, "run", _FakeKubectl({"/openapi/v3": ""}, returncode=1))

    with pytest.raises(RunError) as excinfo:
        ClusterDocumentSource().fetch("apps.example.com", "v1")

    assert excinfo.value.returncode == 1
    assert "boom" in str(excinfo.value)


def test_missing_kubectl_binary_raises_run_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing(cmd: list[str], **_: Any) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", _missing)

    with pytest.raises(RunError, match="executable not found: kubectl"):
        ClusterDocumentSource().paths()


def test_undecodable_kubectl_output_raises_run_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def _garbled(cmd: list[str], **_: Any) -> subprocess.CompletedProcess[str]:
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    monkeypatch.setattr(subprocess, "run", _garbled)

    with pytest.raises(RunError, match="output is not valid UTF-8"):
        ClusterDocumentSource().paths()


def test_directory_source_reads_group_version_files(tmp_path: Path) -> None:
    (tmp_path / "apps.example.com").mkdir()
    (tmp_path / "apps.example.com" / "v1.json").write_text('{"a": 1}', encoding="utf-8")
    source = DirectoryDocumentSource(tmp_path)

    assert source.fetch("apps.example.com", "v1") == b'{"a": 1}'
    assert source.fetch("apps.example.com", "v2") is None


def test_mapping_source_uses_discovery_paths() -> None:
    source = MappingDocumentSource({"apis/apps.example.com/v1": {"a": 1}})

    assert source.fetch("apps.example.com", "v1") == {"a": 1}
    assert source.fetch("apps.example.com", "v2") is None
