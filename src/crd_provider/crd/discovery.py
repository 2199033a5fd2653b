"""Discover installed CRDs from the cluster via kubectl."""

from __future__ import annotations

from crd_provider.core.kubectl import get_crds
from crd_provider.parser.manifest import CrdInfo, parse_crds


def discover_cluster_crds(**kube_opts: str | None) -> list[CrdInfo]:
    """Fetch all CRDs from the cluster using kubectl.

    Raises RunError when kubectl fails (permission denied, cluster
    unreachable) and ManifestError when its output cannot be parsed.
    """
    return parse_crds(get_crds(**kube_opts))
