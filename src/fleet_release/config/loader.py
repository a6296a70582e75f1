"""Configuration file discovery and loading.

The configuration lives in a YAML file. Lookup order:

1. An explicit path
2. The FLEET_RELEASE_CONFIG environment variable
3. ``fleet-release.yaml`` or ``projects.yaml`` in the start directory or
   any of its parents
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fleet_release.config.models import FleetConfig
from fleet_release.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FLEET_RELEASE_CONFIG"
CONFIG_FILE_NAMES = ("fleet-release.yaml", "projects.yaml")


def find_config_file(start: Path | None = None) -> Path:
    """Find the configuration file, searching upwards from ``start``.

    Raises:
        ConfigNotFoundError: If no configuration file exists
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            raise ConfigNotFoundError(f"{CONFIG_ENV_VAR} points to a missing file: {path}")
        return path

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate

    raise ConfigNotFoundError(
        f"Could not find {' or '.join(CONFIG_FILE_NAMES)} in {current} or any parent directory."
    )


def load_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from disk.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not a YAML mapping
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Expected a mapping at the top of {path}.")
    return data


def load_config(path: Path | None = None) -> FleetConfig:
    """Load and validate the fleet configuration.

    Args:
        path: Configuration file or a directory to search from

    Returns:
        Validated configuration

    Raises:
        ConfigNotFoundError: If no configuration file exists
        ConfigValidationError: If the configuration is invalid
    """
    if path is None or path.is_dir():
        path = find_config_file(path)

    logger.debug("Loading configuration from %s", path)
    data = load_yaml(path)

    try:
        return FleetConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {path}:\n{e}") from e


def get_github_token(config: FleetConfig) -> str | None:
    """Token from the configuration, else from its environment variable."""
    return config.github.token or os.environ.get(config.github.token_env) or None
