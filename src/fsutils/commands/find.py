"""List files by extension, optionally one page at a time."""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from fsutils.config import load_config
from fsutils.exceptions import FsUtilsError
from fsutils.finder import list_files_by_extension
from fsutils.paginator import ArrayPaginator
from fsutils.utils.ignore import build_spec, load_patterns

logger = logging.getLogger(__name__)


def _print_page(files: list[str], page: int, limit: int) -> None:
    """Print page (1-based) of files followed by a navigation footer."""
    totals = ArrayPaginator.paginate(files, page, limit)
    page_count = totals.page_count()
    rows = files[(page - 1) * limit : page * limit]
    for file_path in rows:
        print(file_path)
    print()
    print(f"Page {page} ({len(rows)} shown, {totals.count()} total, {page_count} page(s))")
    if page > 1 and page_count:
        print(f"  previous: --page {min(page - 1, page_count)}")
    if page < page_count:
        print(f"  next:     --page {page + 1}")


def run(args: Namespace) -> None:
    """Run the find command."""
    path: Path = getattr(args, "path", Path("."))
    extension: str = getattr(args, "extension", "") or ""
    recursive = getattr(args, "recursive", False)
    page = getattr(args, "page", None)
    limit = getattr(args, "limit", 20)
    no_ignore = getattr(args, "no_ignore", False)

    spec = None
    if not no_ignore:
        config = load_config(path if path.is_dir() else None)
        patterns = [p for p, _ in load_patterns(path, config)]
        if patterns:
            spec = build_spec(patterns)

    try:
        files = list_files_by_extension(path, extension, recursive=recursive, ignore=spec)
    except FsUtilsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if page is None:
        for file_path in files:
            print(file_path)
        logger.info("%d file(s) found", len(files))
        return

    if page < 1 or limit < 1:
        print("Error: --page and --limit must be at least 1", file=sys.stderr)
        sys.exit(1)
    _print_page(files, page, limit)
