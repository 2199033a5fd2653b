"""Read CRDs from manifest files and directories."""

from __future__ import annotations

from pathlib import Path

from crd_provider.errors import ManifestError
from crd_provider.parser.manifest import CrdInfo, parse_crds

_YAML_SUFFIXES = ("*.yaml", "*.yml")


def extract_crds_from_paths(paths: list[str]) -> list[CrdInfo]:
    """Parse CRDs from YAML files or directories of YAML files.

    Directories are scanned non-recursively in sorted order.
    """
    crds: list[CrdInfo] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files = sorted(f for pattern in _YAML_SUFFIXES for f in path.glob(pattern))
        else:
            files = [path]
        for yaml_file in files:
            crds.extend(_read_crd_file(yaml_file))
    return crds


def _read_crd_file(path: Path) -> list[CrdInfo]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    try:
        return parse_crds(text)
    except ManifestError as e:
        raise ManifestError(f"{path}: {e}") from e
