"""Shared utilities: ignore patterns for file listings."""

from fsutils.utils.ignore import build_spec, is_ignored, load_patterns, parse_ignore_file

__all__ = [
    "build_spec",
    "is_ignored",
    "load_patterns",
    "parse_ignore_file",
]
