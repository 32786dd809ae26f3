"""Commit classification and bump aggregation.

Each commit subject is matched against configurable major / patch patterns.
A commit takes the highest severity of all matching patterns; a commit that
matches nothing is assumed to add a feature and bumps the minor version.
The release bump is the highest severity of all commits.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from changerelease.core.version import BumpType
from changerelease.exceptions import NoCommitsError, ReleaseError, RuleCompilationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from changerelease.vcs.git import Commit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierConfig:
    """Compiled classification and ignore rules for one run."""

    rules: tuple[tuple[re.Pattern[str], BumpType], ...] = ()
    ignore: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def from_patterns(
        cls,
        match_major: Iterable[str] = (),
        match_patch: Iterable[str] = (),
        ignore_messages: Iterable[str] = (),
    ) -> ClassifierConfig:
        """Compile pattern strings into a classifier configuration.

        Raises:
            RuleCompilationError: If any pattern is not a valid regex
        """
        rules = [(_compile(p, "match_major"), BumpType.MAJOR) for p in match_major]
        rules += [(_compile(p, "match_patch"), BumpType.PATCH) for p in match_patch]
        ignore = tuple(_compile(p, "ignore_messages") for p in ignore_messages)
        return cls(rules=tuple(rules), ignore=ignore)


def _compile(pattern: str, source: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise RuleCompilationError(pattern, source, str(e)) from e


@dataclass(frozen=True)
class ClassifiedCommit:
    """A commit together with the bump it requires."""

    commit: Commit
    bump: BumpType

    @property
    def subject(self) -> str:
        return self.commit.subject


def classify_subject(subject: str, config: ClassifierConfig) -> BumpType:
    """Return the bump a commit subject requires.

    All rules are searched (not anchored unless the pattern says so) and the
    highest matching severity wins. Unmatched subjects default to MINOR.
    """
    bump = BumpType.NONE
    for pattern, severity in config.rules:
        if severity > bump and pattern.search(subject):
            bump = severity

    if bump == BumpType.NONE:
        return BumpType.MINOR
    return bump


def is_ignored(subject: str, config: ClassifierConfig) -> bool:
    """Check whether a subject matches any ignore pattern."""
    return any(pattern.search(subject) for pattern in config.ignore)


def filter_ignored_commits(commits: Iterable[Commit], config: ClassifierConfig) -> list[Commit]:
    """Drop commits whose subject matches an ignore pattern."""
    kept = []
    for commit in commits:
        if is_ignored(commit.subject, config):
            logger.debug("Ignoring commit %s: %s", commit.sha, commit.subject)
            continue
        kept.append(commit)
    return kept


def classify_commits(commits: Iterable[Commit], config: ClassifierConfig) -> list[ClassifiedCommit]:
    """Filter ignored commits and classify the rest, preserving order."""
    classified = []
    for commit in filter_ignored_commits(commits, config):
        bump = classify_subject(commit.subject, config)
        logger.debug("Commit %s requires a %s bump", commit.sha, bump)
        classified.append(ClassifiedCommit(commit=commit, bump=bump))
    return classified


def select_bump(commits: Sequence[ClassifiedCommit]) -> BumpType:
    """Select the overall release bump.

    Raises:
        NoCommitsError: If there are no commits to release
        ReleaseError: If the commits somehow required no bump at all
    """
    if not commits:
        raise NoCommitsError("No commits to release")

    bump = max((c.bump for c in commits), default=BumpType.NONE)
    if bump == BumpType.NONE:
        raise ReleaseError("Could not decide on any bump type")
    return bump
