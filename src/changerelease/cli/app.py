"""Argument parsing and dispatch."""

from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from changerelease import __version__
from changerelease.cli.commands.create_config import run_create_config
from changerelease.cli.commands.release import run_release


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-changerelease",
        description="Write a changelog from commits since the last tag, then commit and tag the release.",
    )
    parser.add_argument(
        "--changelog",
        default="History.md",
        help="File to write the changelog to, relative to the repository root",
    )
    parser.add_argument(
        "--config",
        action="append",
        dest="config_files",
        metavar="FILE",
        help="Configuration file to load (repeatable, later files win)",
    )
    parser.add_argument(
        "--create-config",
        action="store_true",
        help="Copy an example configuration file to the location of --config",
    )
    parser.add_argument(
        "--no-edit",
        action="store_true",
        help="Do not open $EDITOR to modify the changelog",
    )
    parser.add_argument(
        "--pre-release",
        default="",
        help="Pre-release information to append to the version (e.g. 'beta' or 'alpha.1')",
    )
    parser.add_argument(
        "--release-meta",
        default="",
        help="Release metadata to append to the version (e.g. 'exp.sha.5114f85')",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the proposed version without writing, committing or tagging",
    )
    parser.add_argument("-C", "--path", default=None, help="Run inside this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="version",
        version=f"git-changerelease {__version__}",
    )
    return parser


def _setup_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    console = Console()
    err_console = Console(stderr=True)
    _setup_logging(args.verbose, err_console)

    try:
        if args.create_config:
            run_create_config(args.config_files, console, err_console)
        else:
            run_release(
                path=args.path,
                changelog=args.changelog,
                config_files=args.config_files,
                no_edit=args.no_edit,
                prerelease=args.pre_release,
                release_meta=args.release_meta,
                dry_run=args.dry_run,
                console=console,
                err_console=err_console,
            )
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    return 0
