"""Configuration loading.

Settings start from the packaged default file and are overlaid, file by
file, with every configuration file that exists. A later file replaces the
top-level keys it sets and keeps everything else.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from changerelease.config.models import ChangeReleaseConfig
from changerelease.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".git_changerelease.yaml"
DEFAULT_CONFIG_ASSET = "git_changerelease.yaml"


def default_config_text() -> str:
    """Return the packaged default configuration file."""
    return resources.files("changerelease.assets").joinpath(DEFAULT_CONFIG_ASSET).read_text(encoding="utf-8")


def parse_yaml_config(text: str, source: str) -> dict[str, Any]:
    """Parse YAML configuration text.

    Args:
        text: YAML document
        source: Where the text came from, for error messages

    Returns:
        Parsed mapping (empty for an empty document)

    Raises:
        ConfigValidationError: If the YAML is invalid or not a mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {source}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Expected a mapping in {source}, got {type(data).__name__}")
    return data


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the content is invalid
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read {path}: {e}") from e

    return parse_yaml_config(text, str(path))


def default_config_paths(repo_root: Path | None = None) -> list[Path]:
    """Return the configuration files searched when none are given.

    The user-wide file comes first so the repository file can override it.
    """
    paths = [Path.home() / CONFIG_FILENAME]
    if repo_root is not None:
        paths.append(repo_root / CONFIG_FILENAME)
    return paths


def load_config(paths: Iterable[Path] = ()) -> ChangeReleaseConfig:
    """Load configuration from the packaged defaults and the given files.

    Files that don't exist are skipped.

    Args:
        paths: Configuration files, lowest priority first

    Returns:
        Validated configuration

    Raises:
        ConfigValidationError: If any file or the merged result is invalid
    """
    data = parse_yaml_config(default_config_text(), "default configuration")

    for path in paths:
        path = path.expanduser()
        if not path.exists():
            logger.debug("Config file %s does not exist, skipping", path)
            continue
        logger.debug("Loading config file %s", path)
        data.update(load_yaml_config(path))

    try:
        return ChangeReleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e


def write_default_config(path: Path) -> Path:
    """Write the packaged default configuration to ``path``.

    Raises:
        ConfigError: If the file cannot be written
    """
    path = path.expanduser()
    try:
        path.write_text(default_config_text(), encoding="utf-8")
        path.chmod(0o600)
    except OSError as e:
        raise ConfigError(f"Unable to write example configuration to {path}: {e}") from e
    return path
