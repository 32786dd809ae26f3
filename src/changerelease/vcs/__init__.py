"""Version control integration."""

from __future__ import annotations

from changerelease.vcs.git import Commit, GitRepository, parse_log_line, parse_log_lines

__all__ = [
    "Commit",
    "GitRepository",
    "parse_log_line",
    "parse_log_lines",
]
