"""Print the normalized or canonical form of a path or URL."""

from __future__ import annotations

import os
import sys
from argparse import Namespace

from fsutils.path import normalize_path, real_path


def run(args: Namespace) -> None:
    """Run the normalize command."""
    separator = getattr(args, "separator", None) or os.sep
    keep_trailing = getattr(args, "keep_trailing", False)
    normalized = normalize_path(args.path, separator, strip_trailing_separator=not keep_trailing)
    if normalized is None:
        print(f"Error: malformed path: {args.path}", file=sys.stderr)
        sys.exit(1)
    print(normalized)


def run_realpath(args: Namespace) -> None:
    """Run the realpath command: canonical path, exit 1 when it cannot be resolved."""
    resolved = real_path(args.path)
    if resolved is None:
        print(f"Error: cannot resolve {args.path}", file=sys.stderr)
        sys.exit(1)
    print(resolved)
