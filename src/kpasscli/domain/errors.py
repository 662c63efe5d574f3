from __future__ import annotations

"""
Domain Exception Taxonomy.

Every failure raised by the lookup engine, the backends and the surrounding
services derives from KpassError, so the CLI controller can report any of
them with a single handler and a non-zero exit status.
"""

from typing import Sequence, Tuple

# -----------------------------------------------------------------------------
# BASE
# -----------------------------------------------------------------------------

class KpassError(Exception):
    """Root of all expected, operator-facing failures."""


# -----------------------------------------------------------------------------
# STORE ACCESS
# -----------------------------------------------------------------------------

class StoreError(KpassError):
    """I/O or authentication failure while talking to a credential store."""


class StoreOpenError(StoreError):
    """
    The store could not be opened.

    Raised only during backend construction: wrong password, corrupt or
    missing database file, or an external tool that is not installed.
    """


# -----------------------------------------------------------------------------
# LOOKUP OUTCOMES
# -----------------------------------------------------------------------------

class NoItemsFound(KpassError):
    """The query matched no entry."""

    def __init__(self, message: str = "no items found") -> None:
        super().__init__(message)


class GroupNotFound(NoItemsFound):
    """An intermediate segment of an absolute path names no child group."""

    def __init__(self, segment: str) -> None:
        self.segment = segment
        super().__init__(f"Group not found: {segment}")


class EntryNotFound(NoItemsFound):
    """The terminal segment of an absolute path names no entry."""

    def __init__(self, segment: str) -> None:
        self.segment = segment
        super().__init__(f"Entry not found: {segment}")


class PathIsGroup(NoItemsFound):
    """An absolute path addresses a group instead of an entry."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path points to a group, not an entry: {path}")


class AmbiguousMatch(KpassError):
    """
    The query matched more than one entry.

    Attributes:
        paths: Location of every candidate, in result order.
    """

    def __init__(self, paths: Sequence[str]) -> None:
        self.paths: Tuple[str, ...] = tuple(paths)
        listing = "\n".join(f"- {p}" for p in self.paths)
        super().__init__(f"multiple items found:\n{listing}")


# -----------------------------------------------------------------------------
# FIELD EXTRACTION
# -----------------------------------------------------------------------------

class FieldNotFound(KpassError):
    """The requested field has no value on the selected entry."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' not found")


class InvalidTotpConfiguration(KpassError):
    """The entry's OTP field is not a usable otpauth://totp URI."""


# -----------------------------------------------------------------------------
# SURROUNDING SERVICES
# -----------------------------------------------------------------------------

class ConfigError(KpassError):
    """The configuration file is unreadable or malformed."""


class PasswordSourceError(KpassError):
    """A password file or password executable could not provide a password."""


class OutputError(KpassError):
    """The selected output channel (e.g. the clipboard) is unavailable."""
