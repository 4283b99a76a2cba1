"""Configuration: default paths, constants, and config loading (global + project overrides)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "config.json"
PROJECT_CONFIG_FILENAME = ".fsutils.json"


# Global config location
def _global_config_dir() -> Path:
    return Path.home() / ".fsutils"


def global_config_path() -> Path:
    """Path to global config file (~/.fsutils/config.json)."""
    return _global_config_dir() / CONFIG_FILENAME


def project_config_path(project_root: Path) -> Path:
    """Path to project-local config (<project>/.fsutils.json)."""
    return project_root / PROJECT_CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    """Default configuration."""
    return {
        "logging": {
            "level": "INFO",
            "file": None,
        },
        "filesize": {
            "precision": 2,
        },
        "ignore": {
            "use_gitignore": False,
            "builtin_patterns": [".git/"],
            "additional_patterns": [],
        },
    }


def _load_json(path: Path) -> dict[str, Any] | None:
    """Load JSON object from path; return None if file missing or invalid."""
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, OSError):
        return None
    return data if isinstance(data, dict) else None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base recursively. Mutates base; returns base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_global_config() -> dict[str, Any]:
    """Load global config from ~/.fsutils/config.json. Returns defaults if missing."""
    data = _load_json(global_config_path())
    if data is None:
        return default_config()
    return _deep_merge(default_config(), data)


def load_config(project_root: Path | None = None) -> dict[str, Any]:
    """
    Load merged configuration: defaults + global (~/.fsutils/config.json) + project overrides.

    If project_root is None, only global config (and defaults) are used.
    Project overrides apply when project_root is set and <project_root>/.fsutils.json exists.
    """
    merged = load_global_config()
    if project_root is not None:
        project_data = _load_json(project_config_path(Path(project_root).resolve()))
        if project_data is not None:
            _deep_merge(merged, project_data)
    return merged


def find_project_root(path: Path) -> Path | None:
    """
    Walk upward from path looking for a directory that contains .fsutils.json.
    Returns that directory if found, else None.
    """
    resolved = Path(path).resolve()
    if resolved.is_file():
        resolved = resolved.parent
    current: Path | None = resolved
    while current is not None:
        if project_config_path(current).is_file():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def save_config(path: Path, data: dict[str, Any]) -> None:
    """Write config JSON to path (indent 2), creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
