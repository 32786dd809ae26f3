"""Exception hierarchy for git-changerelease.

Every error carries a ``stage`` label so the command line can tell the user
where a run stopped without re-running it.
"""

from __future__ import annotations


class ChangeReleaseError(Exception):
    """Base class for all git-changerelease errors."""

    stage = "release"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# =============================================================================
# Versions
# =============================================================================


class VersionError(ChangeReleaseError):
    """A version string or version component is invalid."""

    stage = "version"


class MalformedVersionError(VersionError):
    """A string could not be parsed as a semantic version."""

    def __init__(self, version: str, reason: str) -> None:
        super().__init__(f"Invalid version {version!r}: {reason}")
        self.version = version
        self.reason = reason


class InvalidIdentifierError(VersionError):
    """A prerelease or build-metadata identifier violates the grammar."""

    def __init__(self, identifier: str, field: str, reason: str) -> None:
        super().__init__(f"Invalid {field} identifier {identifier!r}: {reason}")
        self.identifier = identifier
        self.field = field


# =============================================================================
# Commits
# =============================================================================


class CommitError(ChangeReleaseError):
    """Commit history could not be read or classified."""

    stage = "commits"


class MalformedLogLineError(CommitError):
    """A git log line did not have the expected field layout."""

    def __init__(self, line: str, expected_fields: int) -> None:
        super().__init__(
            f"Unexpected git log format, expected {expected_fields} tab-separated fields: {line!r}"
        )
        self.line = line


class NoCommitsError(CommitError):
    """There is nothing to release.

    Not a failure: the release flow turns this into a "no release" outcome.
    """


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ChangeReleaseError):
    """Configuration could not be loaded."""

    stage = "config"


class ConfigNotFoundError(ConfigError):
    """A required configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """Configuration content is invalid."""


class RuleCompilationError(ConfigError):
    """A classification pattern is not a valid regular expression."""

    def __init__(self, pattern: str, source: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r} in {source}: {reason}")
        self.pattern = pattern
        self.source = source


# =============================================================================
# Changelog / confirmation
# =============================================================================


class ChangelogError(ChangeReleaseError):
    """Changelog could not be rendered, read or written."""

    stage = "changelog"


class EmptyArtifactError(ChangelogError):
    """The confirmation artifact has no readable first line."""

    stage = "confirm"


# =============================================================================
# External processes
# =============================================================================


class GitError(ChangeReleaseError):
    """A git command failed."""

    stage = "git"

    def __init__(self, message: str, stderr: str | None = None) -> None:
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.stderr = stderr


class EditorError(ChangeReleaseError):
    """The interactive editor could not be run or exited with an error."""

    stage = "edit"


class HookError(ChangeReleaseError):
    """A pre-commit command failed."""

    stage = "pre-commit"

    def __init__(self, command: str, stderr: str | None = None) -> None:
        message = f"Command failed: {command}"
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class ReleaseError(ChangeReleaseError):
    """The release flow reached a state it should never reach."""
