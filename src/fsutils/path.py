"""Path and URL normalization, canonical real paths, file extensions and readable sizes.

A path-like string is parsed once into either a LocalPath or a UrlPath; each
variant carries its own normalization routine. URL-style strings keep their
scheme, userinfo, host and port exactly as written and only have their path
component rewritten (always with "/").
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlsplit

from fsutils.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

FILESIZE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
FILESIZE_BASE = 1024

# Two or more scheme characters so that "C://dir" stays a drive path
_URL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+://")
_SEPARATORS_RE = re.compile(r"[/\\]+")
_HOST_LABEL_RE = re.compile(r"^[A-Za-z0-9_](?:[A-Za-z0-9_\-]*[A-Za-z0-9_])?$")
_IPV6_RE = re.compile(r"^\[[0-9A-Fa-f:.]+\]$")
_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:.$")


def _collapse(path: str, separator: str, strip_trailing_separator: bool) -> str:
    """Replace every run of "/" and "\\" with separator; optionally drop one trailing separator."""
    collapsed = _SEPARATORS_RE.sub(lambda _m: separator, path)
    if (
        strip_trailing_separator
        and collapsed.endswith(separator)
        and not _is_root(collapsed, separator)
    ):
        collapsed = collapsed[: -len(separator)]
    return collapsed


def _is_root(path: str, separator: str) -> bool:
    """True for a lone separator or a drive root such as C:\\."""
    if path == separator:
        return True
    return bool(_DRIVE_ROOT_RE.match(path)) and path.endswith(separator)


@dataclass(frozen=True)
class LocalPath:
    """A filesystem path with arbitrary (possibly mixed) separators."""

    path: str

    def normalize(self, separator: str = os.sep, strip_trailing_separator: bool = True) -> str:
        normalized = _collapse(self.path, separator, strip_trailing_separator)
        if not normalized or not os.path.exists(normalized):
            return normalized
        canonical = _collapse(os.path.realpath(normalized), separator, True)
        if (
            not strip_trailing_separator
            and normalized.endswith(separator)
            and not canonical.endswith(separator)
        ):
            canonical += separator
        return canonical

    def resolve(self) -> Optional[str]:
        """Canonical absolute path, or None when nothing exists there."""
        if not self.path:
            return None
        candidate = _collapse(self.path, os.sep, True)
        if not os.path.exists(candidate):
            return None
        return os.path.realpath(candidate)


@dataclass(frozen=True)
class UrlPath:
    """A URL split into the parts that must round-trip unchanged and the path that gets normalized."""

    scheme: str
    host: str
    path: str = ""
    userinfo: Optional[str] = None
    port: Optional[str] = None
    query: str = ""
    fragment: str = ""

    @property
    def authority(self) -> str:
        authority = self.host
        if self.userinfo is not None:
            authority = f"{self.userinfo}@{authority}"
        if self.port is not None:
            authority = f"{authority}:{self.port}"
        return authority

    def _rebuild(self, path: str) -> str:
        url = f"{self.scheme}://{self.authority}{path}"
        if self.query:
            url += f"?{self.query}"
        if self.fragment:
            url += f"#{self.fragment}"
        return url

    def normalize(self, strip_trailing_separator: bool = True) -> str:
        return self._rebuild(_collapse(self.path, "/", strip_trailing_separator))

    def resolve(self) -> Optional[str]:
        """Normalized URL with "." and ".." segments removed; file URLs resolve on disk."""
        if self.scheme.lower() == "file":
            return LocalPath(self.path).resolve()
        path = _collapse(self.path, "/", True)
        if path:
            path = posixpath.normpath(path)
            if path == ".":
                path = ""
        return self._rebuild(path)


ParsedPath = Union[LocalPath, UrlPath]


def _valid_host(host: str) -> bool:
    if _IPV6_RE.match(host):
        return True
    if host.endswith("."):
        host = host[:-1]
    if not host:
        return False
    return all(_HOST_LABEL_RE.match(label) for label in host.split("."))


def parse_path(path: str) -> Optional[ParsedPath]:
    """
    Classify a path-like string as LocalPath or UrlPath.

    Returns None for strings that look like a URL (scheme://) but are malformed:
    empty or invalid host, invalid port. Strings without a scheme, including
    scheme-relative "//host/path", are local paths.
    """
    if not _URL_RE.match(path):
        return LocalPath(path)
    try:
        parts = urlsplit(path)
    except ValueError:
        return None
    netloc = parts.netloc
    userinfo: Optional[str] = None
    if "@" in netloc:
        userinfo, _, netloc = netloc.rpartition("@")
    port: Optional[str] = None
    if netloc.startswith("["):
        host, bracket, rest = netloc.partition("]")
        host += bracket
        if rest:
            if not rest.startswith(":"):
                return None
            port = rest[1:]
    else:
        host, colon, port_text = netloc.partition(":")
        if colon:
            port = port_text
    if port is not None and not (port.isdigit() and int(port) <= 65535):
        return None
    is_file = parts.scheme.lower() == "file"
    if not (is_file and not host) and not _valid_host(host):
        return None
    return UrlPath(
        scheme=parts.scheme,
        host=host,
        path=parts.path,
        userinfo=userinfo,
        port=port,
        query=parts.query,
        fragment=parts.fragment,
    )


def real_path(path: Union[str, os.PathLike, None]) -> Optional[str]:
    """
    Resolve path to its canonical absolute form.

    Local paths must exist (symlinks are resolved); URLs must be well formed and
    are returned normalized with dot segments removed. Returns None instead of
    raising for anything that cannot be resolved.
    """
    if path is None:
        return None
    path = os.fspath(path)
    if not path:
        return None
    parsed = parse_path(path)
    if parsed is None:
        logger.debug("Malformed URL, cannot resolve: %s", path)
        return None
    return parsed.resolve()


def normalize_path(
    path: Union[str, os.PathLike, None],
    separator: str = os.sep,
    strip_trailing_separator: bool = True,
) -> Optional[str]:
    """
    Rewrite path with a single separator character and no duplicate separators.

    URLs keep scheme, userinfo, host and port verbatim and use "/" in their path
    whatever separator is requested. Local paths that exist are canonicalized the
    same way real_path() does. Returns None for None input and malformed URLs.
    """
    if path is None:
        return None
    path = os.fspath(path)
    parsed = parse_path(path)
    if parsed is None:
        logger.debug("Malformed URL, cannot normalize: %s", path)
        return None
    if isinstance(parsed, UrlPath):
        return parsed.normalize(strip_trailing_separator)
    return parsed.normalize(separator, strip_trailing_separator)


def readable_filesize(size: int, precision: int = 2) -> str:
    """
    Format a byte count with binary multiples, e.g. 5670008902 -> "5.28 GB".

    The largest unit keeping the value >= 1 is chosen; zero is "0.00 B".
    """
    if size < 0:
        raise InvalidArgumentError(f"File size must not be negative: {size}")
    if precision < 0:
        raise InvalidArgumentError(f"Precision must not be negative: {precision}")
    value = float(size)
    unit = 0
    while value >= FILESIZE_BASE and unit < len(FILESIZE_UNITS) - 1:
        value /= FILESIZE_BASE
        unit += 1
    return f"{value:.{precision}f} {FILESIZE_UNITS[unit]}"


def _basename(filename: str) -> str:
    return _SEPARATORS_RE.split(filename)[-1]


def get_extension(filename: Union[str, os.PathLike, None], with_dot: bool = False) -> str:
    """Extension of the last path segment ("" if none); with_dot prefixes "." to a non-empty result."""
    if not filename:
        return ""
    name = _basename(os.fspath(filename))
    if "." not in name:
        return ""
    extension = name.rpartition(".")[2]
    if not extension:
        return ""
    return f".{extension}" if with_dot else extension


def remove_extension(filename: Union[str, os.PathLike, None]) -> str:
    """Strip everything from the last dot of the last segment.

    A last segment that starts with a dot (".txt", "dir/.txt") keeps only the
    directory part.
    """
    if not filename:
        return ""
    filename = os.fspath(filename)
    last_separator = max(filename.rfind("/"), filename.rfind("\\"))
    if filename.startswith(".", last_separator + 1):
        return filename[: last_separator + 1]
    dot = filename.rfind(".")
    if dot <= last_separator:
        return filename
    return filename[:dot]
