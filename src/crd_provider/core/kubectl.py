"""kubectl invocations used to read CRDs and OpenAPI v3 documents."""

from __future__ import annotations

from crd_provider.core.runner import run


def _kube_flags(
    kubeconfig: str | None = None, kube_context: str | None = None
) -> list[str]:
    """Render connection options as kubectl flags."""
    flags: list[str] = []
    if kubeconfig:
        flags += ["--kubeconfig", kubeconfig]
    if kube_context:
        flags += ["--context", kube_context]
    return flags


def get_crds(**kube_opts: str | None) -> str:
    """Return every installed CRD as a YAML List document."""
    cmd = ["kubectl", "get", "crds", "-o", "yaml"]
    cmd += _kube_flags(**kube_opts)
    return run(cmd)


def get_raw(path: str, **kube_opts: str | None) -> str:
    """GET a raw API server path (e.g. ``/openapi/v3``)."""
    cmd = ["kubectl", "get", "--raw", path]
    cmd += _kube_flags(**kube_opts)
    return run(cmd)
