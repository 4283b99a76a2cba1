"""Error categories raised by fsutils operations."""

from __future__ import annotations


class FsUtilsError(Exception):
    """Base class for errors raised by fsutils."""


class InvalidArgumentError(FsUtilsError, ValueError):
    """Caller supplied an unusable input (empty path, unreadable source, non-writable target)."""


class ApplicationError(FsUtilsError, RuntimeError):
    """An operation failed because of external resource state (missing or corrupt archive, populated destination)."""
