from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Cross-platform path expansion and executable detection used by the
configuration loader and the password source resolver.
"""

import os
from typing import Optional

# Extensions Windows treats as directly runnable.
_WINDOWS_EXEC_EXTENSIONS = (".exe", ".bat", ".cmd", ".ps1")


def expand_user_path(path: Optional[str]) -> str:
    """
    Expand a leading '~' to the user's home directory.

    Other values are returned unchanged so store keywords such as
    'keychain' pass through.

    Args:
        path: Raw path string.

    Returns:
        str: Expanded path, or an empty string for empty input.
    """
    p = (path or "").strip()
    if p.startswith("~"):
        return os.path.expanduser(p)
    return p


def is_executable(path: str) -> bool:
    """
    Report whether a regular file may be executed directly.

    POSIX checks any execute permission bit; Windows checks the extension.
    """
    if not os.path.isfile(path):
        return False
    if os.name == "nt":
        return os.path.splitext(path)[1].lower() in _WINDOWS_EXEC_EXTENSIONS
    try:
        return bool(os.stat(path).st_mode & 0o111)
    except OSError:
        return False
