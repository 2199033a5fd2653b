"""Settings loader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from crd_provider.errors import SettingsError
from crd_provider.openapi.resolver import DEFAULT_REJECT_PREFIXES
from crd_provider.schema.mapper import DEFAULT_SKIP_FIELDS
from crd_provider.settings import Settings, load_settings


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_no_path_gives_defaults() -> None:
    settings = load_settings(None)

    assert settings == Settings()
    assert settings.mapper_config.skip_fields == DEFAULT_SKIP_FIELDS
    assert settings.resolver_config.reject_prefixes == DEFAULT_REJECT_PREFIXES
    assert settings.provider_type_name == "crd"


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    assert load_settings(_write(tmp_path, "")) == Settings()


def test_values_override_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "skip_fields: [kind, apiVersion, status, metadata]\n"
        "reject_suffixes: [List]\n"
        "provider_type_name: k8scrd\n",
    )

    settings = load_settings(path)

    assert settings.mapper_config.skip_fields == frozenset({"kind", "apiVersion", "status", "metadata"})
    assert settings.resolver_config.reject_suffixes == ("List",)
    assert settings.resolver_config.reject_prefixes == DEFAULT_REJECT_PREFIXES
    assert settings.provider_type_name == "k8scrd"


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("skip_fields: kind\n", "'skip_fields' must be a list of strings"),
        ("reject_prefixes: [1, 2]\n", "'reject_prefixes' must be a list of strings"),
        ("provider_type_name: ''\n", "'provider_type_name' must be a non-empty string"),
        ("colour: blue\n", "Unknown settings key(s): colour"),
        ("- a\n- b\n", "must contain a mapping"),
        ("skip_fields: [unclosed\n", "Invalid YAML"),
    ],
)
def test_invalid_settings_raise(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(SettingsError) as excinfo:
        load_settings(_write(tmp_path, text))

    assert message in str(excinfo.value)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SettingsError, match="Cannot read settings file"):
        load_settings(tmp_path / "absent.yaml")
