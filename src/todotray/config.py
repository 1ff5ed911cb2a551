"""Configuration loading with defaults merged under user values."""

from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any

import yaml


CONFIG_FILE_NAME = "config.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "todo": {
        "data_file": "todo.json",
        "icon_file": "tray.png",
        "max_input_weight": 40,
        "max_label_weight": 40,
    },
    "ui": {
        "window_title": "New to-do",
        "window_width": 320,
        "window_height": 85,
        "status_revert_ms": 2000,
    },
    "logging": {
        "level": "INFO",
        "structured": False,
        "run_retention": 5,
    },
}


def app_dir() -> Path:
    """Directory holding data, icon, config and logs.

    Frozen builds keep everything next to the executable; otherwise the
    current working directory is used.
    """

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path.cwd()


def load_config(path: Path | str) -> dict[str, Any]:
    """Load YAML configuration, falling back to defaults for anything unset."""

    config_file = Path(path)
    if not config_file.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_file, "r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f)

    # Empty file or a non-mapping document
    if not isinstance(user_config, dict):
        return copy.deepcopy(DEFAULT_CONFIG)

    return merge_defaults(user_config, DEFAULT_CONFIG)


def merge_defaults(config: dict[str, Any], defaults: dict[str, Any]) -> dict[str, Any]:
    """Return ``config`` with missing keys filled from ``defaults``."""

    merged = copy.deepcopy(config)
    for key, value in defaults.items():
        if merged.get(key) is None:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = merge_defaults(merged[key], value)
    return merged


def resolve_path(base_dir: Path, value: str) -> Path:
    """Resolve a configured file name against the app directory."""

    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path
