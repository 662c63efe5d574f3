from __future__ import annotations

"""
System Clipboard Access.

Writes text to the clipboard through the platform's command-line tools and
schedules clearing it from a detached child process, so the secret does not
outlive the configured timeout even after kpasscli has exited.
"""

import logging
import platform
import shutil
import subprocess
import sys
import time
from typing import List, Optional

from kpasscli.domain.errors import OutputError

logger = logging.getLogger(__name__)

# Candidate commands per platform, tried in order.
_LINUX_TOOLS: List[List[str]] = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
]
_DARWIN_TOOLS: List[List[str]] = [["pbcopy"]]
_WINDOWS_TOOLS: List[List[str]] = [["clip"]]


def find_clipboard_command() -> Optional[List[str]]:
    """
    Pick the first available clipboard writer for this platform.

    Returns:
        Optional[List[str]]: argv of the tool, or None if nothing is installed.
    """
    sys_name = platform.system()
    if sys_name == "Darwin":
        candidates = _DARWIN_TOOLS
    elif sys_name == "Windows":
        candidates = _WINDOWS_TOOLS
    else:
        candidates = _LINUX_TOOLS

    for cmd in candidates:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(value: str) -> None:
    """
    Replace the clipboard contents with value.

    Raises:
        OutputError: No clipboard tool is installed or the tool failed.
    """
    cmd = find_clipboard_command()
    if cmd is None:
        raise OutputError("No clipboard tool found (install wl-copy, xclip or xsel)")

    logger.debug(f"Writing clipboard via {cmd[0]}")
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        proc.communicate(value.encode("utf-8"))
    except OSError as e:
        raise OutputError(f"Failed to copy to clipboard: {e}") from e

    if proc.returncode != 0:
        raise OutputError(f"Failed to copy to clipboard: {cmd[0]} exited with {proc.returncode}")


def clear_clipboard() -> None:
    copy_to_clipboard("")


def clear_clipboard_after(seconds: int) -> None:
    """Sleep, then empty the clipboard. Runs inside the detached child."""
    time.sleep(max(0, seconds))
    clear_clipboard()


def spawn_background_clear(timeout: int) -> None:
    """
    Start a detached kpasscli process that clears the clipboard later.

    Args:
        timeout: Delay in seconds. Zero or less disables clearing.

    Raises:
        OutputError: The child process cannot be started.
    """
    if timeout <= 0:
        return

    cmd = [sys.executable, "-m", "kpasscli.main", "--clear-clipboard-after", str(timeout)]
    kwargs = {}
    if platform.system() == "Windows":
        kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0)
    else:
        kwargs["start_new_session"] = True

    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            close_fds=True,
            **kwargs,
        )
    except OSError as e:
        raise OutputError(f"Failed to spawn background clipboard clearer: {e}") from e

    print(
        f"Clipboard will be cleared in {timeout} seconds (running in background)...",
        file=sys.stderr,
    )
