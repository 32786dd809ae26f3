"""Implementation of --create-config."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from changerelease.config import CONFIG_FILENAME, write_default_config
from changerelease.exceptions import ChangeReleaseError

if TYPE_CHECKING:
    from rich.console import Console


def run_create_config(
    config_files: list[str] | None,
    console: Console,
    err_console: Console,
) -> None:
    """Copy the example configuration to the first --config path.

    Falls back to ``~/.git_changerelease.yaml`` when no path is given.
    """
    target = Path(config_files[0]) if config_files else Path.home() / CONFIG_FILENAME

    try:
        written = write_default_config(target)
    except ChangeReleaseError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"Wrote an example configuration to [cyan]{written}[/]")
