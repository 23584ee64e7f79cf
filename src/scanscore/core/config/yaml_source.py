"""YAML settings source layering environment overrides on top of base files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic_settings import PydanticBaseSettingsSource


if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


# src/scanscore/core/config/yaml_source.py -> project root
_PROJECT_ROOT = Path(__file__).resolve().parents[4]


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``override`` recursively merged into ``base``."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_directory(directory: Path) -> dict[str, Any]:
    """Merge every ``*.yaml`` file of a directory in name order."""
    merged: dict[str, Any] = {}
    if not directory.is_dir():
        return merged
    for path in sorted(directory.glob("*.yaml")):
        with path.open(encoding="utf-8") as fh:
            merged = deep_merge(merged, yaml.safe_load(fh) or {})
    return merged


class MultiYamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading ``config/base`` then ``config/environments/{APP_ENV}``.

    The config directory can be relocated with the ``SCANSCORE_CONFIG_DIR``
    environment variable.
    """

    def __init__(self, settings_cls: type[Any]) -> None:
        super().__init__(settings_cls)
        config_dir = Path(os.getenv("SCANSCORE_CONFIG_DIR", _PROJECT_ROOT / "config"))
        app_env = os.getenv("APP_ENV", "development")
        self._data = deep_merge(
            load_yaml_directory(config_dir / "base"),
            load_yaml_directory(config_dir / "environments" / app_env),
        )

    def get_field_value(
        self,
        _field: FieldInfo,
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, Any]:
        return self._data
