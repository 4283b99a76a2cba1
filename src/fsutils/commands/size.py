"""Format a byte count as a human-readable size."""

from __future__ import annotations

import sys
from argparse import Namespace

from fsutils.config import load_config
from fsutils.exceptions import InvalidArgumentError
from fsutils.path import readable_filesize


def run(args: Namespace) -> None:
    """Run the size command; precision defaults to filesize.precision from config."""
    precision = getattr(args, "precision", None)
    if precision is None:
        precision = int((load_config(None).get("filesize") or {}).get("precision", 2))
    try:
        print(readable_filesize(args.bytes, precision))
    except InvalidArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
