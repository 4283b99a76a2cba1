"""CLI entry point: argument parsing and subcommand dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fsutils import __version__
from fsutils.config import load_config


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the fsutils logger: level from --verbose/--quiet or config, console handler,
    optional file handler from config.
    """
    config = load_config(None)
    log_cfg = config.get("logging") or {}
    if verbose:
        level_name = "DEBUG"
    elif quiet:
        level_name = "ERROR"
    else:
        level_name = (log_cfg.get("level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("fsutils")
    root.setLevel(level)
    if not root.handlers:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(fmt)
        root.addHandler(console)
        log_file = log_cfg.get("file")
        if log_file:
            try:
                fh = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
                fh.setFormatter(fmt)
                root.addHandler(fh)
            except OSError:
                root.warning("Cannot open log file %s; logging to stderr only", log_file)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsutils",
        description="Path normalization, file search by extension, and archive helpers.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) output.")
    log_group.add_argument("-q", "--quiet", action="store_true", help="Quiet (errors only).")

    # Same flags on subparsers so "fsutils find . -v" works
    global_flags = argparse.ArgumentParser(add_help=False)
    log_grp = global_flags.add_mutually_exclusive_group()
    log_grp.add_argument("-v", "--verbose", action="store_true", help=argparse.SUPPRESS)
    log_grp.add_argument("-q", "--quiet", action="store_true", help=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    # find
    p_find = subparsers.add_parser("find", help="List files by extension.", parents=[global_flags])
    p_find.add_argument("path", type=Path, nargs="?", default=Path("."), help="Directory to search (default: .).")
    p_find.add_argument("--extension", "-e", default="", help="Extension with or without dot; empty for files without one.")
    p_find.add_argument("--recursive", "-r", action="store_true", help="Search the whole subtree.")
    p_find.add_argument("--page", type=int, help="Show one page of results, counting from 1.")
    p_find.add_argument("--limit", type=int, default=20, help="Entries per page (default: 20).")
    p_find.add_argument("--no-ignore", action="store_true", help="Do not apply ignore patterns.")
    p_find.set_defaults(run="find")

    # normalize
    p_norm = subparsers.add_parser("normalize", help="Normalize a path or URL.", parents=[global_flags])
    p_norm.add_argument("path", help="Path or URL.")
    p_norm.add_argument("--separator", "-s", help="Separator for local paths (default: OS separator).")
    p_norm.add_argument("--keep-trailing", action="store_true", help="Keep a trailing separator.")
    p_norm.set_defaults(run="normalize")

    # realpath
    p_real = subparsers.add_parser("realpath", help="Print the canonical path (exit 1 if unresolvable).", parents=[global_flags])
    p_real.add_argument("path", help="Path or URL.")
    p_real.set_defaults(run="realpath")

    # size
    p_size = subparsers.add_parser("size", help="Format a byte count.", parents=[global_flags])
    p_size.add_argument("bytes", type=int, help="Number of bytes.")
    p_size.add_argument("--precision", "-p", type=int, help="Fractional digits (default: config filesize.precision).")
    p_size.set_defaults(run="size")

    # mkdir
    p_mkdir = subparsers.add_parser("mkdir", help="Create a directory with parents.", parents=[global_flags])
    p_mkdir.add_argument("path", help="Directory to create.")
    p_mkdir.set_defaults(run="mkdir")

    # copy
    p_copy = subparsers.add_parser("copy", help="Copy a file, overwriting the destination.", parents=[global_flags])
    p_copy.add_argument("source", help="Source file.")
    p_copy.add_argument("destination", help="Destination file or directory.")
    p_copy.set_defaults(run="copy")

    # extract
    p_extract = subparsers.add_parser("extract", help="Extract a zip archive.", parents=[global_flags])
    p_extract.add_argument("archive", help="Zip archive.")
    p_extract.add_argument("destination", help="Existing destination directory.")
    p_extract.add_argument("--overwrite", action="store_true", help="Replace files that already exist.")
    p_extract.set_defaults(run="extract")

    # config
    p_config = subparsers.add_parser("config", help="Show or edit configuration.", parents=[global_flags])
    p_config.add_argument("path", type=Path, nargs="?", default=Path("."), help="Project path for project-local config (default: .).")
    p_config.add_argument("--show", action="store_true", help="Display current settings.")
    p_config.add_argument("--set", dest="set_key", metavar="KEY=VALUE", help="Set a configuration value.")
    p_config.add_argument("--add", dest="add_key", metavar=("KEY", "VALUE"), nargs=2, help="Append VALUE to list KEY (e.g. ignore.additional_patterns PATTERN).")
    p_config.add_argument("--global", dest="global_", action="store_true", help="With --set/--add: write to global config even when inside a project.")
    p_config.set_defaults(run="config")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=getattr(args, "verbose", False),
        quiet=getattr(args, "quiet", False),
    )
    run = getattr(args, "run", None)

    if run == "find":
        from fsutils.commands.find import run as cmd_run
    elif run == "normalize":
        from fsutils.commands.normalize import run as cmd_run
    elif run == "realpath":
        from fsutils.commands.normalize import run_realpath as cmd_run
    elif run == "size":
        from fsutils.commands.size import run as cmd_run
    elif run == "mkdir":
        from fsutils.commands.files_cmd import run_mkdir as cmd_run
    elif run == "copy":
        from fsutils.commands.files_cmd import run_copy as cmd_run
    elif run == "extract":
        from fsutils.commands.files_cmd import run_extract as cmd_run
    elif run == "config":
        from fsutils.commands.config_cmd import run as cmd_run
    else:
        parser.print_help()
        sys.exit(0)

    cmd_run(args)


if __name__ == "__main__":
    main()
