"""Show or edit configuration (CLI command)."""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any, Callable

from fsutils.config import (
    _load_json,
    find_project_root,
    global_config_path,
    load_config,
    project_config_path,
    save_config,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _lookup(data: dict[str, Any], dotted: str) -> Any:
    node: Any = data
    for part in dotted.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def _assign(data: dict[str, Any], dotted: str, value: Any) -> None:
    """Store value under a dotted key, replacing non-dict intermediates."""
    *parents, leaf = dotted.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


def _coerce(raw: str) -> Any:
    """JSON literal when it parses (3, true, null, "x"), the raw text otherwise."""
    raw = raw.strip()
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _check(key: str, value: Any) -> str | None:
    """Reject values the rest of fsutils cannot use; return an error message or None."""
    if key == "filesize.precision":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return "filesize.precision must be a non-negative integer"
    elif key == "logging.level":
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            return f"logging.level must be one of {', '.join(LOG_LEVELS)}"
    elif key == "ignore.use_gitignore" and not isinstance(value, bool):
        return "ignore.use_gitignore must be true or false"
    return None


def _update(target: Path, label: str, change: Callable[[dict[str, Any]], str]) -> None:
    data = _load_json(target) or {}
    summary = change(data)
    save_config(target, data)
    logger.debug("Wrote %s", target)
    print(f"{summary} in {label} config.")


def run(args: Namespace) -> None:
    """Run the config command: show merged settings or set/add a value (global or project-local)."""
    show = getattr(args, "show", False)
    set_key = getattr(args, "set_key", None)
    add_key = getattr(args, "add_key", None)
    use_global = getattr(args, "global_", False)

    if not (show or set_key or add_key):
        _fail("specify --show, --set KEY=VALUE, or --add KEY VALUE.")

    project_root = find_project_root(Path(getattr(args, "path", Path("."))).resolve())
    if use_global or project_root is None:
        target, label = global_config_path(), "global"
    else:
        target, label = project_config_path(project_root), f"project ({project_root.as_posix()})"

    if set_key:
        key, sep, raw = set_key.partition("=")
        key = key.strip()
        if not sep or not key:
            _fail("--set requires KEY=VALUE (e.g. filesize.precision=3).")
        value = _coerce(raw)
        problem = _check(key, value)
        if problem:
            _fail(problem)

        def _set(data: dict[str, Any]) -> str:
            _assign(data, key, value)
            return f"Set {key} = {json.dumps(value)}"

        _update(target, label, _set)

    if add_key:
        key, item = add_key[0].strip(), add_key[1].strip()
        if not key:
            _fail("empty key in --add KEY VALUE.")

        def _add(data: dict[str, Any]) -> str:
            current = _lookup(data, key)
            items = list(current) if isinstance(current, list) else []
            items.append(item)
            _assign(data, key, items)
            return f"Added {json.dumps(item)} to {key}"

        _update(target, label, _add)

    if show:
        note = "defaults + global"
        if project_root is not None:
            note += f" + project ({project_root.as_posix()})"
        print(f"# Config: {note}")
        print(json.dumps(load_config(project_root), indent=2))
