"""Implementation of the release command.

Decides the next version, writes the changelog, lets the user edit it and
then commits the changelog and tags the release.
"""

from __future__ import annotations

import subprocess
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from changerelease.config import default_config_paths, load_config
from changerelease.core.changelog import read_changelog, render_changelog, write_changelog
from changerelease.core.release import decide_release
from changerelease.editor import FileEditor
from changerelease.exceptions import ChangeReleaseError, HookError
from changerelease.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from changerelease.core.version import Version


def run_release(
    path: str | None,
    changelog: str,
    config_files: list[str] | None,
    no_edit: bool,
    prerelease: str,
    release_meta: str,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path inside the repository
        changelog: Changelog file, relative to the repository root
        config_files: Configuration files replacing the default search list
        no_edit: Skip opening the changelog in $EDITOR
        prerelease: Prerelease identifiers for the new version
        release_meta: Build metadata for the new version
        dry_run: Only show the proposed version
        console: Console for standard output
        err_console: Console for error output
    """
    repo = GitRepository(Path(path) if path else Path.cwd())

    try:
        root = repo.root()
    except ChangeReleaseError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    # Load configuration and compile rules before looking at any commit
    paths = [Path(p) for p in config_files] if config_files else default_config_paths(root)
    try:
        config = load_config(paths)
        classifier = config.classifier()
    except ChangeReleaseError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    changelog_path = root / changelog
    edit = None
    if not no_edit and not dry_run:
        try:
            edit = FileEditor(changelog_path)
        except ChangeReleaseError as e:
            err_console.print(f"[red]Error:[/] {e}")
            raise SystemExit(1) from e

    try:
        latest_tag = repo.latest_tag()
        log_lines = repo.log_lines(latest_tag)
        old_log = read_changelog(changelog_path)

        outcome = decide_release(
            latest_tag,
            log_lines,
            classifier,
            render=partial(render_changelog, old_log=old_log),
            edit=edit,
            prerelease=prerelease,
            metadata=release_meta,
        )
    except ChangeReleaseError as e:
        err_console.print(f"[red]Error during {e.stage}:[/] {e}")
        raise SystemExit(1) from e

    if not outcome.should_release:
        console.print(f"[yellow]{outcome.reason}. Nothing to do.[/]")
        return

    decision = outcome.decision
    version = decision.confirmed_version

    if latest_tag is None:
        console.print(f"\n🎉 First release! Proposing [green]{decision.proposed_version}[/]")
    else:
        console.print(
            f"\n{decision.bump.name.capitalize()} bump from [cyan]{decision.base_version}[/] "
            f"to [green]{decision.proposed_version}[/] ({len(outcome.commits)} commits)"
        )

    if dry_run:
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n"
                f"  • Write changelog to [cyan]{changelog}[/]\n"
                f"  • Commit: [cyan]{config.commit_message(version, decision.base_version)}[/]\n"
                f"  • Tag: [cyan]{config.tag_name(version)}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        return

    if decision.was_overridden:
        console.print(f"  [yellow]![/] Version changed in changelog to [green]{version}[/]")

    try:
        if edit is None:
            write_changelog(changelog_path, outcome.artifact)
        console.print(f"  [green]✓[/] Updated {changelog}")

        if config.pre_commit_commands:
            _run_hooks(
                config.pre_commit_commands,
                root,
                decision.base_version,
                version,
                console,
            )

        repo.commit_release(changelog_path, config.commit_message(version, decision.base_version))
        console.print("  [green]✓[/] Committed changelog")

        tag_name = config.tag_name(version)
        repo.tag(tag_name, tag_name, signed=not config.disable_signed_tags)
        console.print(f"  [green]✓[/] Tagged {tag_name}")
    except ChangeReleaseError as e:
        err_console.print(f"[red]Error during {e.stage}:[/] {e}")
        raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Successfully released version {version}![/]\n\n"
            "Next step:\n"
            f"  Push: [cyan]git push && git push origin {tag_name}[/]",
            title="[green]Release Complete[/]",
            border_style="green",
        )
    )


def _run_hooks(
    hooks: list[str],
    project_path: Path,
    prev_version: Version,
    new_version: Version,
    console: Console,
) -> None:
    """Run pre-commit commands with template variable substitution.

    Raises:
        HookError: If a command exits non-zero
    """
    template_vars = {
        "version": str(new_version),
        "prev_version": str(prev_version),
    }

    for cmd in hooks:
        expanded_cmd = cmd.format(**template_vars)
        console.print(f"  [dim]Running pre-commit command:[/] {expanded_cmd}")

        try:
            result = subprocess.run(
                expanded_cmd,
                shell=True,
                cwd=project_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise HookError(expanded_cmd, stderr=e.stderr) from e
        if result.stdout:
            console.print(f"    [dim]{result.stdout.strip()}[/]")
