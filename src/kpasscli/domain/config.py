from __future__ import annotations

"""
Configuration Domain Management.

Loads the optional YAML configuration file and writes the commented example
file. Configuration travels through the application as a plain dictionary
whose keys are listed in get_default_config().
"""

import logging
import os
from typing import Any, Dict

import yaml

from kpasscli.domain.constants import OUTPUT_STDOUT
from kpasscli.domain.errors import ConfigError
from kpasscli.infra.fs import expand_user_path

logger = logging.getLogger(__name__)

EXAMPLE_HEADER = """\
# kpasscli configuration file
#
# Backend Selection:
# - Set database_path to a .kdbx file path for KeePass backend
# - Set database_path to "keychain" for macOS Keychain backend
# - Set database_path to "bitwarden" for Bitwarden CLI backend
#
"""

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the configuration used when no file (or no key) is present.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "database_path": None,
        "default_output": None,
        "password_file": None,
        "password_executable": None,
        "key_file": None,
        "clipboard_timeout": None,
        "log_file": None,
    }


def get_example_config() -> Dict[str, Any]:
    """Values written by --create-config."""
    return {
        "database_path": "/path/to/your/database.kdbx",
        "default_output": OUTPUT_STDOUT,
        "password_file": "/path/to/your/password.txt",
        "password_executable": "[/path/to/your/]password_executable.sh",
        "clipboard_timeout": 15,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(config_path: str) -> Dict[str, Any]:
    """
    Read the YAML configuration file.

    A missing file is not an error: the defaults are returned. The resolved
    file location is recorded under 'config_file_path'.

    Args:
        config_path: Path to the file, '~' allowed.

    Returns:
        Dict[str, Any]: Raw (unvalidated) configuration merged over defaults.

    Raises:
        ConfigError: The file exists but cannot be read or parsed.
    """
    resolved = expand_user_path(config_path)
    config = get_default_config()
    config["config_file_path"] = resolved

    if not os.path.exists(resolved):
        logger.debug(f"Config file not found at {resolved}. Using defaults.")
        return config

    try:
        with open(resolved, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {resolved}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {resolved}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to parse config file: {resolved}: expected a mapping")

    config.update(data)
    logger.debug(f"Loaded configuration from {resolved}")
    return config


def create_example_config(path: str) -> None:
    """
    Write a commented example configuration file.

    Raises:
        ConfigError: The file cannot be written.
    """
    body = yaml.safe_dump(get_example_config(), default_flow_style=False, sort_keys=False)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(EXAMPLE_HEADER + body)
    except OSError as e:
        raise ConfigError(f"Failed to write example config '{path}': {e}") from e
    logger.debug(f"Example configuration written to {path}")
