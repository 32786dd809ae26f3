"""Shared fixtures for git-changerelease tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from changerelease.core.commits import ClassifierConfig
from changerelease.vcs.git import Commit

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def make_log_line():
    """Build raw git log lines in the tool's log format."""

    def _make(sha: str, subject: str) -> str:
        return "\t".join([sha, subject, "Test", "test@test.com"])

    return _make


@pytest.fixture
def feat_commit() -> Commit:
    """A feature commit."""
    return Commit("feat123", "feat: add user authentication", "Test", "test@test.com")


@pytest.fixture
def fix_commit() -> Commit:
    """A scoped fix commit."""
    return Commit("fix4567", "fix(core): handle empty config", "Test", "test@test.com")


@pytest.fixture
def breaking_commit() -> Commit:
    """A commit marked breaking with an exclamation mark."""
    return Commit("brk8901", "feat(api)!: drop v1 endpoints", "Test", "test@test.com")


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    """A mixed history including a release commit."""
    return [
        breaking_commit,
        feat_commit,
        fix_commit,
        Commit("doc2345", "docs: update readme", "Test", "test@test.com"),
        Commit("rel6789", "prepared release 1.2.0", "Test", "test@test.com"),
    ]


@pytest.fixture
def classifier() -> ClassifierConfig:
    """Rules similar to the packaged defaults."""
    return ClassifierConfig.from_patterns(
        match_major=[r"^[a-zA-Z]+(\([^)]*\))?!:", "BREAKING CHANGE"],
        match_patch=[r"^(build|chore|ci|docs|fix|perf|refactor|revert|style|test)(\([^)]*\))?:"],
        ignore_messages=["^prepared release "],
    )


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """A directory containing a repository-level config file."""
    (tmp_path / ".git_changerelease.yaml").write_text(
        """\
match_patch:
  - '^fix'
ignore_messages:
  - '^chore'
disable_signed_tags: true
"""
    )
    return tmp_path
