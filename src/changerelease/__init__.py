"""Automated changelog and release tagging for git repositories."""

from __future__ import annotations

__version__ = "0.1.0"
