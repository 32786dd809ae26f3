"""Interactive editing of the changelog.

:class:`FileEditor` is the ``edit`` capability handed to the release flow:
it writes the proposed changelog to disk, opens it in the user's editor,
waits for the editor to exit and returns whatever is in the file then.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import TYPE_CHECKING

from changerelease.core.changelog import read_changelog, write_changelog
from changerelease.exceptions import ConfigError, EditorError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def editor_from_env() -> str:
    """Return the editor command from ``$EDITOR``.

    Raises:
        ConfigError: If ``$EDITOR`` is not set
    """
    editor = os.environ.get("EDITOR", "").strip()
    if not editor:
        raise ConfigError(
            "You chose to open the changelog in the editor but there is no $EDITOR in your env"
        )
    return editor


class FileEditor:
    """Edit text by round-tripping it through a file and an editor process."""

    def __init__(self, path: Path, command: str | None = None) -> None:
        self.path = path
        self.command = command or editor_from_env()

    def __call__(self, artifact: str) -> str:
        write_changelog(self.path, artifact)

        # $EDITOR may carry arguments, e.g. "code --wait"
        args = [*shlex.split(self.command), str(self.path)]
        logger.debug("Opening editor: %s", " ".join(args))
        try:
            result = subprocess.run(args, check=False)
        except FileNotFoundError as e:
            raise EditorError(f"Editor not found: {self.command}") from e

        if result.returncode != 0:
            raise EditorError(f"Editor ended with non-zero status {result.returncode}, stopping here")

        return read_changelog(self.path)
