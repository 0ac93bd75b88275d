"""
YAML configuration loading.

Values may reference environment variables as ``${VAR}`` or
``${VAR:default}``; an unset variable without default expands to an
empty string. A ``base.yaml`` next to the loaded file is inherited
(deep merge, the loaded file wins). An empty file is valid: every
setting has a default.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from civicstats.config.settings import (
    AppConfig,
    FetchConfig,
    LoggingConfig,
    ManagerConfig,
    SourcesConfig,
)

BASE_CONFIG_NAME = "base.yaml"

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<default>[^}]*))?\}")

_SECTIONS: dict[str, type[Any]] = {
    "sources": SourcesConfig,
    "fetch": FetchConfig,
    "manager": ManagerConfig,
    "logging": LoggingConfig,
}


def _expand_env(obj: Any) -> Any:
    """Expand environment references in every string of a parsed document."""
    if isinstance(obj, str):
        return _ENV_REF.sub(
            lambda m: os.environ.get(m["name"], m["default"] or ""), obj
        )
    if isinstance(obj, Mapping):
        return {key: _expand_env(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env(item) for item in obj]
    return obj


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml(path: Path) -> dict[str, Any]:
    """
    Read one YAML document with environment references expanded.

    Raises:
        ValueError: If the document is not a mapping.
    """
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _expand_env(data)


def _inherited_base(config_path: Path) -> Path | None:
    candidate = config_path.parent / BASE_CONFIG_NAME
    if candidate.exists() and candidate.resolve() != config_path.resolve():
        return candidate
    return None


def default_config() -> AppConfig:
    """Configuration with every setting at its default."""
    return AppConfig()


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> AppConfig:
    """
    Load engine configuration from YAML file(s).

    Recognized top-level sections: ``sources``, ``fetch``, ``manager``
    and ``logging``. Unknown keys inside a section are rejected by the
    model validators.

    Args:
        config_path: Path to the main configuration file.
        base_path: Base configuration to inherit from. Defaults to a
            ``base.yaml`` in the same directory, if there is one.

    Returns:
        Fully validated AppConfig instance.

    Raises:
        ValueError: If a file or section is not a mapping.
        pydantic.ValidationError: If a setting is invalid.
    """
    base_path = base_path or _inherited_base(config_path)
    data = _merge(
        load_yaml(base_path) if base_path is not None else {},
        load_yaml(config_path),
    )

    sections: dict[str, Any] = {}
    for name, model in _SECTIONS.items():
        values = data.get(name) or {}
        if not isinstance(values, Mapping):
            msg = f"Config section '{name}' must be a mapping, got {type(values).__name__}"
            raise ValueError(msg)
        sections[name] = model(**values)

    return AppConfig(**sections)
