"""Filesystem operations: directory creation, copy, extension search, zip extraction, path resolution.

Every call reads the filesystem afresh; nothing is cached between calls.
Caller misuse raises InvalidArgumentError, external-state failures (archives)
raise ApplicationError.
"""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from typing import Iterable, Iterator, Optional, Union

from pathspec import PathSpec

from fsutils.exceptions import ApplicationError, InvalidArgumentError
from fsutils.path import LocalPath, get_extension, normalize_path, parse_path
from fsutils.utils.ignore import is_ignored

logger = logging.getLogger(__name__)

StrPath = Union[str, "os.PathLike[str]"]


def _require_path(path: Optional[StrPath], what: str) -> str:
    """Return path as str; raise InvalidArgumentError when None or empty."""
    if path is None:
        raise InvalidArgumentError(f"{what} must not be empty.")
    path = os.fspath(path)
    if not path:
        raise InvalidArgumentError(f"{what} must not be empty.")
    return path


def mkdir(path: Optional[StrPath]) -> bool:
    """
    Create directory path (with parents) if missing.

    An existing writable directory is left untouched. Raises InvalidArgumentError
    for an empty path, an existing non-writable directory, a non-directory in the
    way, or when creation fails.
    """
    path = _require_path(path, "Directory path")
    if os.path.isdir(path):
        if not os.access(path, os.W_OK | os.X_OK):
            raise InvalidArgumentError(f"Directory exists but is not writable: {path}")
        return True
    if os.path.lexists(path):
        raise InvalidArgumentError(f"Path exists and is not a directory: {path}")
    try:
        os.makedirs(path)
    except OSError as exc:
        raise InvalidArgumentError(f"Unable to create directory {path}: {exc}") from exc
    logger.debug("Created directory %s", path)
    return True


def copy(source: Optional[StrPath], destination: Optional[StrPath]) -> bool:
    """
    Copy source byte-for-byte to destination, overwriting it.

    When destination is a directory the copy keeps the source file name.
    """
    source = _require_path(source, "Source path")
    destination = _require_path(destination, "Destination path")
    if not os.path.isfile(source) or not os.access(source, os.R_OK):
        raise InvalidArgumentError(f"Source file is not readable: {source}")

    if os.path.isdir(destination):
        target = os.path.join(destination, os.path.basename(source))
    else:
        target = destination
    target_dir = os.path.dirname(os.path.abspath(target))
    if not os.path.isdir(target_dir) or not os.access(target_dir, os.W_OK | os.X_OK):
        raise InvalidArgumentError(f"Destination directory is not writable: {target_dir}")
    if os.path.exists(target) and not os.access(target, os.W_OK):
        raise InvalidArgumentError(f"Destination file is not writable: {target}")

    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise InvalidArgumentError(f"Unable to copy {source} to {target}: {exc}") from exc
    logger.debug("Copied %s to %s", source, target)
    return True


def _readable_directory(directory: Optional[StrPath]) -> str:
    directory = _require_path(directory, "Directory path")
    if not os.path.isdir(directory):
        raise InvalidArgumentError(f"Not a directory: {directory}")
    if not os.access(directory, os.R_OK | os.X_OK):
        raise InvalidArgumentError(f"Directory is not readable: {directory}")
    return os.path.abspath(directory)


def _iter_files(root: str, recursive: bool, ignore: Optional[PathSpec]) -> Iterator[str]:
    """Yield absolute paths of regular files under root, pruning ignored directories."""

    def on_error(exc: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        if not recursive:
            dirnames[:] = []
        elif ignore is not None:
            dirnames[:] = [
                d for d in dirnames
                if not is_ignored(os.path.join(dirpath, d), root, ignore, is_dir=True)
            ]
        for name in filenames:
            full = os.path.join(dirpath, name)
            if not os.path.isfile(full):
                continue
            if ignore is not None and is_ignored(full, root, ignore, is_dir=False):
                continue
            yield full


def list_files_by_extension(
    directory: Optional[StrPath],
    extension: Optional[str],
    recursive: bool = False,
    ignore: Optional[PathSpec] = None,
) -> list[str]:
    """
    Return sorted absolute paths of files in directory whose extension matches.

    extension may be given with or without its leading dot; "" selects files
    without any extension. With recursive=True the whole subtree is searched and
    unreadable subdirectories are skipped with a warning. ignore is an optional
    gitignore-style spec evaluated relative to directory.
    """
    root = _readable_directory(directory)
    wanted = extension or ""
    if wanted.startswith("."):
        wanted = wanted[1:]

    matches = sorted(
        path for path in _iter_files(root, recursive, ignore)
        if get_extension(path) == wanted
    )
    logger.debug(
        "Found %d file(s) with extension %r in %s%s",
        len(matches),
        wanted,
        root,
        " (recursive)" if recursive else "",
    )
    return matches


def get_files_by_extension(directory: Optional[StrPath], extension: Optional[str]) -> list[str]:
    """Files directly inside directory with the given extension."""
    return list_files_by_extension(directory, extension, recursive=False)


def get_files_recursively_by_extension(directory: Optional[StrPath], extension: Optional[str]) -> list[str]:
    """Files anywhere under directory with the given extension."""
    return list_files_by_extension(directory, extension, recursive=True)


def _member_target(destination: str, name: str) -> str:
    """Absolute extraction target for an archive member; ApplicationError if it escapes destination."""
    target = os.path.realpath(os.path.join(destination, name))
    if os.path.commonpath([destination, target]) != destination:
        raise ApplicationError(f"Archive member would be extracted outside {destination}: {name}")
    return target


def extract_zip_archive(
    archive_path: Optional[StrPath],
    destination_dir: Optional[StrPath],
    overwrite: bool = False,
) -> list[str]:
    """
    Extract every member of a zip archive into destination_dir, keeping relative paths.

    Raises ApplicationError when the destination is missing or not writable, the
    archive is missing or unreadable, or (unless overwrite) a member already exists
    in the destination. Returns the sorted member names.
    """
    if not destination_dir or not os.path.isdir(destination_dir):
        raise ApplicationError(f"Destination directory does not exist: {destination_dir}")
    if not os.access(destination_dir, os.W_OK | os.X_OK):
        raise ApplicationError(f"Destination directory is not writable: {destination_dir}")
    if not archive_path or not os.path.isfile(archive_path):
        raise ApplicationError(f"Archive does not exist: {archive_path}")

    destination = os.path.realpath(destination_dir)
    try:
        with zipfile.ZipFile(archive_path) as archive:
            names = archive.namelist()
            targets = {name: _member_target(destination, name) for name in names}
            if not overwrite:
                existing = sorted(
                    name for name, target in targets.items()
                    if not name.endswith("/") and os.path.lexists(target)
                )
                if existing:
                    raise ApplicationError(
                        f"Destination {destination_dir} already contains {existing[0]}"
                        + (f" and {len(existing) - 1} more" if len(existing) > 1 else "")
                        + "; pass overwrite=True to replace."
                    )
            archive.extractall(destination)
    except ApplicationError:
        raise
    except zipfile.BadZipFile as exc:
        raise ApplicationError(f"Unable to open archive {archive_path}: {exc}") from exc
    except (RuntimeError, NotImplementedError) as exc:
        # Encrypted members or an unsupported compression method
        raise ApplicationError(f"Unable to extract archive {archive_path}: {exc}") from exc
    except OSError as exc:
        raise ApplicationError(f"Unable to extract archive {archive_path}: {exc}") from exc

    logger.debug("Extracted %d member(s) from %s into %s", len(names), archive_path, destination)
    return sorted(names)


def resolve_filepath(
    filepath: Optional[StrPath],
    base_dir: Optional[StrPath] = None,
    include_paths: Iterable[StrPath] = (),
) -> str:
    """
    Resolve a possibly relative file path to an absolute, normalized one.

    Relative paths are looked up in base_dir, then each include path, then the
    working directory; the first existing candidate wins. When none exists the
    path is anchored on base_dir (or the working directory).
    """
    filepath = _require_path(filepath, "File path")
    parsed = parse_path(filepath)
    if not isinstance(parsed, LocalPath) or os.path.isabs(filepath):
        resolved = normalize_path(filepath)
        if resolved is None:
            raise InvalidArgumentError(f"Malformed path: {filepath}")
        return resolved

    bases = [os.fspath(base_dir)] if base_dir else []
    bases.extend(os.fspath(p) for p in include_paths)
    bases.append(os.getcwd())
    for base in bases:
        candidate = os.path.join(base, filepath)
        if os.path.exists(candidate):
            logger.debug("Resolved %s to %s", filepath, candidate)
            return normalize_path(candidate)
    return normalize_path(os.path.abspath(os.path.join(bases[0], filepath)))
