from __future__ import annotations

"""
Bitwarden CLI Backend.

Shells out to the official 'bw' command line client and decodes its JSON
output. Vault unlocking stays the operator's job ('bw unlock' and exporting
BW_SESSION); this backend only reads.
"""

import json
import logging
import os
import subprocess
from typing import Any, Dict, List, Optional

from kpasscli.backends.base import Backend, BackendType
from kpasscli.core.matching import matches
from kpasscli.domain.entry_models import Entry, MatchPolicy
from kpasscli.domain.errors import StoreError, StoreOpenError

logger = logging.getLogger(__name__)

BW_TOOL = "bw"
SESSION_ENV = "BW_SESSION"
PATH_PREFIX = "/bitwarden/"
OTP_FIELD = "otp"


class BitwardenBackend(Backend):
    """Backend over the vault of the currently logged-in Bitwarden account."""

    backend_type = BackendType.BITWARDEN

    def __init__(self) -> None:
        """
        Check the CLI is installed and the vault is unlocked.

        Raises:
            StoreOpenError: 'bw' is missing, not logged in, or locked.
        """
        self.session: Optional[str] = None

        try:
            subprocess.run([BW_TOOL, "--version"], capture_output=True, text=True, check=False)
        except OSError as e:
            raise StoreOpenError(
                f"Failed to execute '{BW_TOOL}' command. Is Bitwarden CLI installed?"
            ) from e

        status = self._read_status()
        state = status.get("status")
        logger.debug(f"Bitwarden vault status: {state}")

        if state == "unauthenticated":
            raise StoreOpenError("Bitwarden CLI is not logged in. Run 'bw login' first.")
        if state != "unlocked":
            raise StoreOpenError(
                f"Bitwarden vault is {state or 'in an unknown state'}. "
                f"Run 'bw unlock' and export {SESSION_ENV}."
            )
        self.session = os.environ.get(SESSION_ENV)

    def search(self, query: str, policy: MatchPolicy) -> List[Entry]:
        raw = self._execute("list", "items", "--search", query)
        items = _decode_json(raw, "item list")
        if not isinstance(items, list):
            raise StoreError("Unexpected Bitwarden item list format")

        results: List[Entry] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            entry = parse_item(item)
            # 'bw --search' is fuzzy across fields; narrow it to the title policy.
            if matches(entry.title, query, policy):
                results.append(entry)
        return results

    # -------------------------------------------------------------------------
    # TOOL INVOCATION
    # -------------------------------------------------------------------------

    def _read_status(self) -> Dict[str, Any]:
        try:
            proc = subprocess.run(
                [BW_TOOL, "status"], capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise StoreOpenError(f"Failed to check Bitwarden status: {e}") from e
        if proc.returncode != 0:
            raise StoreOpenError(f"Failed to check Bitwarden status: {proc.stderr.strip()}")

        try:
            status = json.loads(proc.stdout)
        except json.JSONDecodeError as e:
            raise StoreOpenError(f"Unreadable Bitwarden status output: {e}") from e
        return status if isinstance(status, dict) else {}

    def _execute(self, *args: str) -> str:
        """Run a bw subcommand, passing the session token when available."""
        cmd = [BW_TOOL]
        if self.session:
            cmd += ["--session", self.session]
        cmd += list(args)

        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise StoreError(f"Failed to execute bw command: {e}") from e
        if proc.returncode != 0:
            raise StoreError(f"Bitwarden command failed: {proc.stderr.strip()}")
        return proc.stdout


# -----------------------------------------------------------------------------
# ITEM DECODING
# -----------------------------------------------------------------------------

def _decode_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StoreError(f"Unreadable Bitwarden {what}: {e}") from e


def parse_item(item: Dict[str, Any]) -> Entry:
    """
    Map one Bitwarden item object onto a Unified Entry.

    Args:
        item: Decoded element of 'bw list items' output.

    Returns:
        Entry: Located at /bitwarden/<name>.
    """
    title = item.get("name") or ""
    login = item.get("login") or {}

    url: Optional[str] = None
    for uri in login.get("uris") or []:
        if isinstance(uri, dict) and uri.get("uri"):
            url = uri["uri"]
            break

    custom: Dict[str, str] = {}
    for f in item.get("fields") or []:
        if not isinstance(f, dict) or not f.get("name") or f.get("value") is None:
            continue
        custom[f["name"]] = str(f["value"])
    if login.get("totp") and OTP_FIELD not in custom:
        custom[OTP_FIELD] = login["totp"]

    return Entry(
        title=title,
        path=PATH_PREFIX + title,
        username=login.get("username"),
        password=login.get("password"),
        url=url,
        notes=item.get("notes"),
        custom_fields=custom,
    )
