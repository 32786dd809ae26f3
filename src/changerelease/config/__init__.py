"""Configuration management for git-changerelease."""

from __future__ import annotations

from changerelease.config.loader import (
    CONFIG_FILENAME,
    default_config_paths,
    load_config,
    write_default_config,
)
from changerelease.config.models import ChangeReleaseConfig

__all__ = [
    "CONFIG_FILENAME",
    "ChangeReleaseConfig",
    "default_config_paths",
    "load_config",
    "write_default_config",
]
