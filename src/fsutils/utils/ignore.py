"""Ignore pattern support for file listings: .fsutilsignore, .gitignore (gitignore syntax), builtin and additional patterns."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pathspec import PathSpec

FSUTILSIGNORE = ".fsutilsignore"
GITIGNORE = ".gitignore"


def parse_ignore_file(path: Path) -> list[str]:
    """
    Read a gitignore-style file and return non-empty pattern lines (strip comments and blanks).
    """
    if not path.is_file():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()
    patterns: list[str] = []
    for line in lines:
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        patterns.append(s)
    return patterns


def load_patterns(root: Path | str, config: dict[str, Any]) -> list[tuple[str, str]]:
    """
    Build combined pattern list from config and files found in root.

    Returns list of (pattern, source) where source is 'builtin', 'file', 'gitignore', or 'additional'.
    Respects ignore.use_gitignore for reading .gitignore.
    """
    root = Path(root).resolve()
    ignore_cfg = config.get("ignore", {}) or {}
    use_gitignore = ignore_cfg.get("use_gitignore", False)
    builtin = list(ignore_cfg.get("builtin_patterns", []) or [])
    additional = list(ignore_cfg.get("additional_patterns", []) or [])

    result: list[tuple[str, str]] = []
    for p in builtin:
        result.append((p, "builtin"))
    for p in parse_ignore_file(root / FSUTILSIGNORE):
        result.append((p, "file"))
    if use_gitignore:
        for p in parse_ignore_file(root / GITIGNORE):
            result.append((p, "gitignore"))
    for p in additional:
        result.append((p, "additional"))
    return result


def build_spec(patterns: list[str]) -> PathSpec:
    """Build a PathSpec from pattern strings (gitignore-style)."""
    return PathSpec.from_lines("gitignore", patterns)


def is_ignored(
    path: os.PathLike | str,
    root: os.PathLike | str,
    spec: PathSpec,
    is_dir: bool | None = None,
) -> bool:
    """
    Return True if the path is ignored by the given spec.

    path should be absolute or relative to root; it is made relative to root and
    normalised to posix for matching. Paths outside root are never ignored.
    Pass is_dir when known so directory-only patterns ("build/") match without a
    filesystem lookup.
    """
    path = Path(os.path.abspath(os.path.join(root, path)))
    root = Path(os.path.abspath(root))
    try:
        rel = path.relative_to(root)
    except ValueError:
        return False
    rel_str = rel.as_posix()
    if rel_str == ".":
        return False
    if spec.match_file(rel_str):
        return True
    if is_dir is None:
        is_dir = path.is_dir()
    # Directory-only patterns need the trailing slash
    if is_dir and spec.match_file(rel_str + "/"):
        return True
    return False
