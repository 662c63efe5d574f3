from __future__ import annotations

"""
KeePass Database Backend.

Opens a .kdbx file through pykeepass, converts its group hierarchy into a
read-only credential tree snapshot, and answers queries with the
hierarchical resolver.
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

from construct import ConstructError
from pykeepass import PyKeePass
from pykeepass.exceptions import (
    CredentialsError,
    HeaderChecksumError,
    PayloadChecksumError,
)

from kpasscli.backends.base import Backend, BackendType
from kpasscli.core.resolver import HierarchicalResolver
from kpasscli.domain.entry_models import Entry, MatchPolicy
from kpasscli.domain.errors import StoreOpenError
from kpasscli.domain.tree_models import CredentialGroup, CredentialRecord

logger = logging.getLogger(__name__)

# Stored names of the KeePass standard string fields.
STANDARD_FIELDS = ("Title", "UserName", "Password", "URL", "Notes")
OTP_FIELD = "otp"


class KeePassBackend(Backend):
    """Backend over a local KeePass 2.x database file."""

    backend_type = BackendType.KEEPASS

    def __init__(self, path: str, password: str, keyfile: Optional[str] = None) -> None:
        """
        Open and decrypt the database.

        Args:
            path: Filesystem path of the .kdbx file.
            password: Master password.
            keyfile: Optional key file path.

        Raises:
            StoreOpenError: Missing file, wrong credentials or corrupt data.
        """
        self.path = path
        if not os.path.isfile(path):
            raise StoreOpenError(f"Failed to open database file: {path}")
        if keyfile and not os.path.isfile(keyfile):
            raise StoreOpenError(f"Key file not found: {keyfile}")

        try:
            kp = PyKeePass(path, password=password, keyfile=keyfile)
        except CredentialsError as e:
            raise StoreOpenError(
                "Failed to open KeePass database. Check password or keyfile."
            ) from e
        except (HeaderChecksumError, PayloadChecksumError, ConstructError) as e:
            raise StoreOpenError(f"KeePass database is corrupt: {path}") from e
        except OSError as e:
            raise StoreOpenError(f"Failed to read database file {path}: {e}") from e

        self.root = convert_group(kp.root_group)
        logger.debug(f"Opened KeePass database {path} (root group '{self.root.name}')")

    def search(self, query: str, policy: MatchPolicy) -> List[Entry]:
        resolver = HierarchicalResolver(self.root, policy)
        return [result.to_entry() for result in resolver.find(query)]


# -----------------------------------------------------------------------------
# TREE CONVERSION
# -----------------------------------------------------------------------------

def convert_group(group) -> CredentialGroup:
    """
    Snapshot a pykeepass group and everything below it.

    Entries and subgroups keep the order pykeepass enumerates them in.
    """
    return CredentialGroup(
        name=group.name or "",
        records=tuple(convert_entry(e) for e in group.entries),
        groups=tuple(convert_group(g) for g in group.subgroups),
    )


def convert_entry(entry) -> CredentialRecord:
    """
    Copy a pykeepass entry into a CredentialRecord.

    Standard fields become attributes; every other string field, plus the
    entry's OTP URI, becomes a custom field.
    """
    custom: Dict[str, str] = {}
    for key, value in (entry.custom_properties or {}).items():
        if key in STANDARD_FIELDS or value is None:
            continue
        custom[key] = value

    otp = entry.otp
    if otp and OTP_FIELD not in custom:
        custom[OTP_FIELD] = otp

    fields: Tuple[Tuple[str, str], ...] = tuple(custom.items())
    return CredentialRecord(
        title=entry.title or "",
        username=entry.username,
        password=entry.password,
        url=entry.url,
        notes=entry.notes,
        custom_fields=fields,
    )
