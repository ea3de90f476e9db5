#!/usr/bin/env python3
"""
Settings loader for wordkit.

Two YAML files drive the package, both under wordkit/configs/:

    app.yaml        - model defaults, generation options, logging
    languages.yaml  - alphabet registry

Either can be replaced through an environment variable (WORDKIT_CONFIG,
WORDKIT_LANGUAGES); relative override paths resolve against the working
directory. Loaded data is cached, so clear the cache of the matching
loader after changing an override at runtime.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_ROOT / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"
LANGUAGES_PATH = CONFIG_DIR / "languages.yaml"

APP_CONFIG_ENV = "WORDKIT_CONFIG"
LANGUAGES_ENV = "WORDKIT_LANGUAGES"


def _config_path(env_var: str, default: Path) -> Path:
    override = os.environ.get(env_var)
    if override:
        return resolve_path(override, Path.cwd())
    return default


def app_config_path() -> Path:
    return _config_path(APP_CONFIG_ENV, APP_CONFIG_PATH)


def languages_path() -> Path:
    return _config_path(LANGUAGES_ENV, LANGUAGES_PATH)


def load_yaml(path: Path, what: str = "config") -> dict:
    """Read a YAML mapping; an empty file yields an empty dict."""
    if not path.exists():
        raise FileNotFoundError(f"Missing {what}: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a mapping at the top level: {path}")
    return data


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    return load_yaml(app_config_path(), "app config")


def get_setting(path: str, default: Any = None) -> Any:
    """
    Look up a dotted key in app.yaml, e.g. ``get_setting("generation.min_length")``.

    Returns `default` when any segment is missing or a parent is not a mapping.
    """
    current: Any = load_app_config()
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def resolve_path(value: str, base: Path | None = None) -> Path:
    """Absolute paths pass through; relative ones resolve against `base` (package dir by default)."""
    if value is None:
        raise ValueError("path value is required")
    path = Path(os.path.expanduser(str(value)))
    if path.is_absolute():
        return path
    return ((base or PACKAGE_ROOT) / path).resolve()


__all__ = [
    "load_yaml",
    "load_app_config",
    "app_config_path",
    "languages_path",
    "get_setting",
    "resolve_path",
    "PACKAGE_ROOT",
    "APP_CONFIG_PATH",
    "LANGUAGES_PATH",
]
