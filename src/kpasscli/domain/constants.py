from __future__ import annotations

"""
Global Constants.

Environment variable names, default locations and output channel
identifiers shared by the CLI and its services.
"""

from typing import Final

APP_NAME: Final[str] = "kpasscli"

# --- Configuration ---
DEFAULT_CONFIG_PATH: Final[str] = "~/.config/kpasscli/config.yaml"
EXAMPLE_CONFIG_FILENAME: Final[str] = "config.yaml"

# --- Environment Overrides ---
ENV_DB_PATH: Final[str] = "KPASSCLI_KDBPATH"
ENV_DB_PASSWORD: Final[str] = "KPASSCLI_KDBPASSWORD"
ENV_OUTPUT: Final[str] = "KPASSCLI_OUT"

# --- Output Channels ---
OUTPUT_STDOUT: Final[str] = "stdout"
OUTPUT_CLIPBOARD: Final[str] = "clipboard"

# --- Field Defaults ---
DEFAULT_FIELD_NAME: Final[str] = "Password"
