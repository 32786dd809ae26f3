"""Core business logic for git-changerelease.

This module contains the fundamental building blocks:
- Semantic version parsing and bumping
- Commit classification and bump aggregation
- Changelog rendering
- The release decision flow
"""

from __future__ import annotations

from changerelease.core.changelog import read_changelog, render_changelog, write_changelog
from changerelease.core.commits import (
    ClassifiedCommit,
    ClassifierConfig,
    classify_commits,
    classify_subject,
    filter_ignored_commits,
    is_ignored,
    select_bump,
)
from changerelease.core.release import (
    Proposal,
    ReleaseDecision,
    ReleaseOutcome,
    ReleaseStatus,
    confirm_release,
    decide_release,
    propose_release,
)
from changerelease.core.version import BumpType, Version, parse_version

__all__ = [
    # Version
    "BumpType",
    # Commits
    "ClassifiedCommit",
    "ClassifierConfig",
    # Release
    "Proposal",
    "ReleaseDecision",
    "ReleaseOutcome",
    "ReleaseStatus",
    "Version",
    "classify_commits",
    "classify_subject",
    "confirm_release",
    "decide_release",
    "filter_ignored_commits",
    "is_ignored",
    "parse_version",
    "propose_release",
    # Changelog
    "read_changelog",
    "render_changelog",
    "select_bump",
    "write_changelog",
]
