"""Configuration management — TOML config at ~/.config/spellhint/spellhint.toml."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import tomli_w

from spellhint.core.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

DOCUMENT_KINDS = ("spell", "spells", "effects")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_DEFAULT_CONFIG: dict[str, Any] = {
    "editor": {
        "tab_size": 4,
        "document_kind": "spell",
    },
    "schema": {
        "path": "",
    },
    "logging": {
        "level": "WARNING",
    },
}


def get_config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    config_dir = Path(os.environ.get("SPELLHINT_CONFIG_DIR", "~/.config/spellhint")).expanduser()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Return the path to the config TOML file."""
    return get_config_dir() / "spellhint.toml"


def get_history_path() -> Path:
    """Return the path to the editor history file."""
    return get_config_dir() / "history"


def get_schema_path(config: dict[str, Any] | None = None) -> Path | None:
    """Return the configured metadata schema path, or None if unset."""
    if config is None:
        config = load_config()
    raw = config.get("schema", {}).get("path", "")
    if not raw:
        return None
    return Path(raw).expanduser()


def load_config() -> dict[str, Any]:
    """Load configuration from TOML file, returning defaults if not found."""
    config_path = get_config_path()
    if not config_path.exists():
        return _deep_copy_dict(_DEFAULT_CONFIG)
    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
        config = _merge_config(_deep_copy_dict(_DEFAULT_CONFIG), user_config)
    except Exception as e:
        raise ConfigError(f"Failed to load config: {e}") from e
    _validate(config)
    return config


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to TOML file."""
    _validate(config)
    config_path = get_config_path()
    try:
        with open(config_path, "wb") as f:
            tomli_w.dump(config, f)
    except Exception as e:
        raise ConfigError(f"Failed to save config: {e}") from e


def update_config(**updates: Any) -> dict[str, Any]:
    """Load config, apply nested updates, save, and return the result.

    Usage: update_config(editor={"tab_size": 2}, schema={"path": "~/meta.json"})
    """
    config = load_config()
    for section, values in updates.items():
        if section not in config:
            config[section] = {}
        if isinstance(values, dict):
            config[section].update(values)
        else:
            config[section] = values
    save_config(config)
    return config


def _validate(config: dict[str, Any]) -> None:
    editor = config.get("editor", {})
    tab_size = editor.get("tab_size", 4)
    if not isinstance(tab_size, int) or isinstance(tab_size, bool) or tab_size < 1:
        raise ConfigError(f"editor.tab_size must be a positive integer, got {tab_size!r}")
    kind = editor.get("document_kind", "spell")
    if kind not in DOCUMENT_KINDS:
        raise ConfigError(f"editor.document_kind must be one of {', '.join(DOCUMENT_KINDS)}, got {kind!r}")
    level = config.get("logging", {}).get("level", "WARNING")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value
    return base


def _deep_copy_dict(d: dict[str, Any]) -> dict[str, Any]:
    """Simple deep copy for nested dicts of simple types."""
    result: dict[str, Any] = {}
    for k, v in d.items():
        if isinstance(v, dict):
            result[k] = _deep_copy_dict(v)
        else:
            result[k] = v
    return result
