"""Create directories, copy files and extract zip archives."""

from __future__ import annotations

import sys
from argparse import Namespace

from fsutils.exceptions import FsUtilsError
from fsutils.finder import copy, extract_zip_archive, mkdir


def run_mkdir(args: Namespace) -> None:
    """Run the mkdir command."""
    try:
        mkdir(args.path)
    except FsUtilsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Directory ready: {args.path}")


def run_copy(args: Namespace) -> None:
    """Run the copy command."""
    try:
        copy(args.source, args.destination)
    except FsUtilsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Copied {args.source} -> {args.destination}")


def run_extract(args: Namespace) -> None:
    """Run the extract command."""
    overwrite = getattr(args, "overwrite", False)
    try:
        names = extract_zip_archive(args.archive, args.destination, overwrite=overwrite)
    except FsUtilsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Extracted {len(names)} entr{'y' if len(names) == 1 else 'ies'} into {args.destination}")
