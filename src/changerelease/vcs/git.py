"""Thin wrapper around the git binary.

Only the handful of commands the release flow needs: finding the last tag,
listing commit subjects, committing the changelog and tagging the release.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from changerelease.exceptions import GitError, MalformedLogLineError

logger = logging.getLogger(__name__)

LOG_FORMAT_PARTS = (
    "%h",  # short hash
    "%s",  # subject
    "%an",  # author name
    "%ae",  # author email
)
LOG_FORMAT = "%x09".join(LOG_FORMAT_PARTS)


@dataclass(frozen=True)
class Commit:
    """A single commit as listed by ``git log``."""

    sha: str
    subject: str
    author_name: str
    author_email: str


def parse_log_line(line: str) -> Commit:
    """Parse one line of ``git log --format=LOG_FORMAT`` output.

    Raises:
        MalformedLogLineError: If the line does not have exactly four fields
    """
    fields = line.split("\t")
    if len(fields) != len(LOG_FORMAT_PARTS):
        raise MalformedLogLineError(line, len(LOG_FORMAT_PARTS))

    sha, subject, author_name, author_email = fields
    return Commit(
        sha=sha,
        subject=subject,
        author_name=author_name,
        author_email=author_email,
    )


def parse_log_lines(lines: list[str]) -> list[Commit]:
    """Parse raw log lines, skipping empty ones."""
    return [parse_log_line(line) for line in lines if line]


class GitRepository:
    """A git working copy."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or Path.cwd()

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout.strip()

    def root(self) -> Path:
        """Return the top-level directory of the working copy."""
        return Path(self._run("rev-parse", "--show-toplevel"))

    def latest_tag(self) -> str | None:
        """Return the most recent tag reachable from HEAD, or None."""
        try:
            return self._run("describe", "--tags", "--abbrev=0")
        except GitError:
            logger.debug("No tag found, using the whole history")
            return None

    def log_lines(self, since: str | None) -> list[str]:
        """List commits since ``since`` (whole history when None)."""
        args = ["log", f"--format={LOG_FORMAT}", "--abbrev-commit"]
        if since is not None:
            args.append(f"{since}..HEAD")
        output = self._run(*args)
        return [line for line in output.split("\n") if line]

    def commit_release(self, changelog_path: Path, message: str) -> None:
        """Stage the changelog and commit it."""
        self._run("add", str(changelog_path))
        self._run("commit", "-m", message)

    def tag(self, name: str, message: str, *, signed: bool = True) -> None:
        """Create a signed tag, or an annotated one when ``signed`` is False."""
        self._run("tag", "-s" if signed else "-a", "-m", message, name)
