"""Optional YAML settings file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from crd_provider.errors import SettingsError
from crd_provider.openapi.resolver import (
    DEFAULT_REJECT_PREFIXES,
    DEFAULT_REJECT_SUFFIXES,
    ResolverConfig,
)
from crd_provider.provider.provider import PROVIDER_TYPE_NAME
from crd_provider.schema.mapper import DEFAULT_SKIP_FIELDS, MapperConfig

_LIST_KEYS = ("skip_fields", "reject_prefixes", "reject_suffixes")
_KNOWN_KEYS = {*_LIST_KEYS, "provider_type_name"}


@dataclass(frozen=True)
class Settings:
    skip_fields: frozenset[str] = DEFAULT_SKIP_FIELDS
    reject_prefixes: tuple[str, ...] = DEFAULT_REJECT_PREFIXES
    reject_suffixes: tuple[str, ...] = DEFAULT_REJECT_SUFFIXES
    provider_type_name: str = PROVIDER_TYPE_NAME

    @property
    def mapper_config(self) -> MapperConfig:
        return MapperConfig(skip_fields=self.skip_fields)

    @property
    def resolver_config(self) -> ResolverConfig:
        return ResolverConfig(
            reject_prefixes=self.reject_prefixes,
            reject_suffixes=self.reject_suffixes,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise SettingsError(f"Unknown settings key(s): {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {}
        for key in _LIST_KEYS:
            if key not in data:
                continue
            items = data[key]
            if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
                raise SettingsError(f"'{key}' must be a list of strings")
            values[key] = frozenset(items) if key == "skip_fields" else tuple(items)

        if "provider_type_name" in data:
            name = data["provider_type_name"]
            if not isinstance(name, str) or not name:
                raise SettingsError("'provider_type_name' must be a non-empty string")
            values["provider_type_name"] = name

        return cls(**values)


def load_settings(path: str | Path | None) -> Settings:
    """Load settings from a YAML file; no path means defaults."""
    if path is None:
        return Settings()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")
    return Settings.from_dict(data)
