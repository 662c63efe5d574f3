from __future__ import annotations

"""
Master Password Resolution.

Determines the KeePass master password from, in order: the command line, the
KPASSCLI_KDBPASSWORD environment variable, the configured password file, the
configured password executable, and finally an interactive prompt.

Every non-interactive source names a file or a command: readable files are
read, executables (or commands on PATH) are run and their stdout is used.
"""

import getpass
import logging
import os
import shutil
import subprocess
from typing import Any, Dict, Optional

from kpasscli.domain.errors import PasswordSourceError
from kpasscli.infra.fs import is_executable

logger = logging.getLogger(__name__)

PROMPT = "Enter password: "


def resolve_password(
        flag_source: Optional[str],
        config: Dict[str, Any],
        env_source: Optional[str],
) -> str:
    """
    Resolve the master password following the source precedence.

    Args:
        flag_source: Value of --kdbpassword.
        config: Validated configuration.
        env_source: Value of KPASSCLI_KDBPASSWORD.

    Returns:
        str: The password, surrounding whitespace stripped.

    Raises:
        PasswordSourceError: A configured source cannot provide a password.
    """
    for origin, source in (
            ("command line", flag_source),
            ("environment", env_source),
            ("password_file", config.get("password_file")),
            ("password_executable", config.get("password_executable")),
    ):
        if source:
            logger.debug(f"Reading password from source given by {origin}")
            return resolve_password_from_source(source)

    try:
        return getpass.getpass(PROMPT)
    except (EOFError, KeyboardInterrupt) as e:
        raise PasswordSourceError("Failed to read password") from e


def resolve_password_from_source(source: str) -> str:
    """
    Read a password from a file or from the output of a command.

    Raises:
        PasswordSourceError: The source is missing, unreadable or failed.
    """
    if os.path.exists(source):
        if is_executable(source):
            return _run_password_command(source)
        try:
            with open(source, "r", encoding="utf-8") as f:
                return f.read().strip()
        except OSError as e:
            raise PasswordSourceError(f"Failed to read password file: {source}") from e

    command = shutil.which(source)
    if command:
        return _run_password_command(command)

    raise PasswordSourceError(f"Password source not found or not executable: {source}")


def _run_password_command(command: str) -> str:
    try:
        proc = subprocess.run([command], capture_output=True, text=True, check=False)
    except OSError as e:
        raise PasswordSourceError(f"Failed to execute password command: {command}") from e
    if proc.returncode != 0:
        raise PasswordSourceError(f"Password command failed: {command}")
    return proc.stdout.strip()
