"""Where OpenAPI v3 group-version documents come from."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from crd_provider.core.kubectl import get_raw
from crd_provider.errors import DocumentError

OPENAPI_V3_ROOT = "/openapi/v3"

# str/bytes are undecoded JSON; a mapping is an already decoded document
RawDocument = str | bytes | Mapping[str, Any]


def group_version_path(group: str, version: str) -> str:
    """Discovery path of a group-version, e.g. ``apis/example.com/v1``."""
    return f"apis/{group}/{version}"


class DocumentSource(Protocol):
    def fetch(self, group: str, version: str) -> RawDocument | None:
        """Return the raw document for a group-version, or None if absent."""


class ClusterDocumentSource:
    """Fetch documents from the API server through ``kubectl get --raw``.

    The discovery index is read once per source; each group-version
    document is fetched at most once.
    """

    def __init__(self, **kube_opts: str | None) -> None:
        self._kube_opts = kube_opts
        self._index: dict[str, str] | None = None
        self._documents: dict[str, str] = {}

    def paths(self) -> dict[str, str]:
        """Map of ``apis/<group>/<version>`` to its server-relative URL."""
        if self._index is None:
            self._index = self._load_index()
        return self._index

    def fetch(self, group: str, version: str) -> RawDocument | None:
        path = group_version_path(group, version)
        if path in self._documents:
            return self._documents[path]
        url = self.paths().get(path)
        if url is None:
            return None
        text = get_raw(url, **self._kube_opts)
        self._documents[path] = text
        return text

    def _load_index(self) -> dict[str, str]:
        text = get_raw(OPENAPI_V3_ROOT, **self._kube_opts)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Invalid OpenAPI v3 discovery index: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("paths"), dict):
            raise DocumentError("OpenAPI v3 discovery index has no 'paths' mapping")

        index: dict[str, str] = {}
        for path, entry in data["paths"].items():
            # core "api/v1" never serves custom resources
            if not path.startswith("apis/"):
                continue
            url = entry.get("serverRelativeURL") if isinstance(entry, dict) else None
            index[path] = url or f"{OPENAPI_V3_ROOT}/{path}"
        return index


class DirectoryDocumentSource:
    """Read documents laid out as ``<root>/<group>/<version>.json``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def fetch(self, group: str, version: str) -> RawDocument | None:
        path = self.root / group / f"{version}.json"
        if not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise DocumentError(f"Cannot read {path}: {e}") from e


class MappingDocumentSource:
    """In-memory documents keyed by ``apis/<group>/<version>``."""

    def __init__(self, documents: Mapping[str, RawDocument]) -> None:
        self._documents = dict(documents)

    def fetch(self, group: str, version: str) -> RawDocument | None:
        return self._documents.get(group_version_path(group, version))
