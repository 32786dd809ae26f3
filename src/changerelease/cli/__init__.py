"""Command-line interface for git-changerelease."""

from __future__ import annotations

from changerelease.cli.app import main

__all__ = ["main"]
