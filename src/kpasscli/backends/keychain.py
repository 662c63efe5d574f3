from __future__ import annotations

"""
macOS Keychain Backend.

Reads generic-password items through the system 'security' tool. The tool's
attribute listing is parsed line by line with a single attribute grammar
instead of ad hoc substring slicing.
"""

import logging
import re
import shutil
import subprocess
import sys
from typing import Dict, List, Optional

from kpasscli.backends.base import Backend, BackendType
from kpasscli.core.matching import matches
from kpasscli.domain.entry_models import Entry, MatchPolicy
from kpasscli.domain.errors import StoreError, StoreOpenError

logger = logging.getLogger(__name__)

SECURITY_TOOL = "security"
PATH_PREFIX = "/keychain/"

# '    "acct"<blob>="alice"' / '    "svce"<blob>=<NULL>'
_ATTRIBUTE_RX = re.compile(r'^\s*"(?P<name>[^"]{4})"<(?P<kind>\w+)>=(?P<value>.*)$')
# 'password: "s3cret"' / 'password: 0x6869  "hi"' / 'password: 0x6869'
_PASSWORD_RX = re.compile(r"^password:\s*(?P<value>.*)$")
_HEX_VALUE_RX = re.compile(r'^0x(?P<hex>[0-9A-Fa-f]+)(?:\s+"(?P<text>.*)")?$')

# Attribute codes mapped onto Unified Entry attributes.
_SERVICE_ATTR = "svce"
_ACCOUNT_ATTR = "acct"
_COMMENT_ATTR = "icmt"


class KeychainBackend(Backend):
    """Backend over the current user's default keychain search list."""

    backend_type = BackendType.KEYCHAIN

    def __init__(self) -> None:
        """
        Verify the host can serve keychain queries.

        Raises:
            StoreOpenError: Not running on macOS or 'security' is missing.
        """
        if sys.platform != "darwin":
            raise StoreOpenError("Keychain backend is only available on macOS")
        if shutil.which(SECURITY_TOOL) is None:
            raise StoreOpenError(
                f"Failed to execute '{SECURITY_TOOL}' command. Is it installed?"
            )

    def search(self, query: str, policy: MatchPolicy) -> List[Entry]:
        results: List[Entry] = []
        for service in self._list_services():
            if not matches(service, query, policy):
                continue
            entry = self._find_item(service)
            if entry is not None:
                results.append(entry)
        return results

    # -------------------------------------------------------------------------
    # TOOL INVOCATION
    # -------------------------------------------------------------------------

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [SECURITY_TOOL, *args],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise StoreError(f"Failed to run '{SECURITY_TOOL}': {e}") from e

    def _find_item(self, service: str) -> Optional[Entry]:
        """Fetch one generic-password item by service name, password included."""
        proc = self._run("find-generic-password", "-g", "-s", service)
        if proc.returncode != 0:
            logger.debug(f"Keychain item '{service}' not found (exit {proc.returncode})")
            return None
        return parse_item(proc.stdout, proc.stderr, fallback_title=service)

    def _list_services(self) -> List[str]:
        """Enumerate the service names of every item in the keychain."""
        proc = self._run("dump-keychain")
        if proc.returncode != 0:
            raise StoreError(f"Failed to list keychain items: {proc.stderr.strip()}")

        services: List[str] = []
        for line in proc.stdout.splitlines():
            attr = parse_attribute_line(line)
            if attr is None or attr[0] != _SERVICE_ATTR or attr[1] is None:
                continue
            if attr[1] not in services:
                services.append(attr[1])
        return services


# -----------------------------------------------------------------------------
# OUTPUT PARSING
# -----------------------------------------------------------------------------

def parse_value(raw: str) -> Optional[str]:
    """Decode one value as printed by 'security' (quoted, hex or <NULL>)."""
    raw = raw.strip()
    if not raw or raw == "<NULL>":
        return None
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]

    hex_match = _HEX_VALUE_RX.match(raw)
    if hex_match:
        if hex_match.group("text") is not None:
            return hex_match.group("text")
        try:
            return bytes.fromhex(hex_match.group("hex")).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            return None
    return raw


def parse_attribute_line(line: str) -> Optional[tuple]:
    """Return (attribute code, value) for an attribute line, else None."""
    match = _ATTRIBUTE_RX.match(line)
    if not match:
        return None
    return match.group("name"), parse_value(match.group("value"))


def parse_item(stdout: str, stderr: str, fallback_title: str = "") -> Entry:
    """
    Build an Entry from 'find-generic-password -g' output.

    Attributes are read from stdout; the password is printed on stderr.
    """
    attributes: Dict[str, str] = {}
    for line in stdout.splitlines():
        attr = parse_attribute_line(line)
        if attr is not None and attr[1] is not None:
            attributes[attr[0]] = attr[1]

    password: Optional[str] = None
    for line in stderr.splitlines():
        match = _PASSWORD_RX.match(line.strip())
        if match:
            password = parse_value(match.group("value"))
            break

    title = attributes.pop(_SERVICE_ATTR, fallback_title)
    username = attributes.pop(_ACCOUNT_ATTR, None)
    notes = attributes.pop(_COMMENT_ATTR, None)

    return Entry(
        title=title,
        path=PATH_PREFIX + title,
        username=username,
        password=password,
        notes=notes,
        custom_fields=attributes,
    )
