"""Changelog rendering.

The rendered changelog doubles as the confirmation artifact: its first line
is ``# <version> / <date>`` and the version on that line is what gets tagged
after the user has had the chance to edit it.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from changerelease.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from changerelease.core.commits import ClassifiedCommit
    from changerelease.core.version import Version


def render_changelog(
    version: Version,
    commits: Sequence[ClassifiedCommit],
    *,
    old_log: str = "",
    today: date | None = None,
) -> str:
    """Render a new changelog section on top of the existing log.

    Args:
        version: Proposed version for the release
        commits: Commits included in the release, newest first
        old_log: Existing changelog content
        today: Release date (defaults to the current UTC date)

    Returns:
        Full changelog content
    """
    today = today or datetime.now(UTC).date()

    lines = [
        f"# {version} / {today.isoformat()}",
        "",
    ]
    lines.extend(f"  * {c.subject}" for c in commits)

    if old_log.strip():
        lines.append("")
        lines.append(old_log.strip())

    return "\n".join(lines).strip()


def read_changelog(path: Path) -> str:
    """Read a changelog file; a missing file reads as empty.

    Raises:
        ChangelogError: If the file exists but cannot be read
    """
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Unable to read changelog {path}: {e}") from e


def write_changelog(path: Path, content: str) -> None:
    """Write changelog content.

    Raises:
        ChangelogError: If the file cannot be written
    """
    try:
        path.write_text(content + "\n", encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Unable to write changelog {path}: {e}") from e
