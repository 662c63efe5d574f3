from __future__ import annotations

"""
Base Definitions for Credential Store Backends.

Provides the abstract contract every store implementation satisfies and the
closed set of store variants the selector can produce.
"""

import enum
from abc import ABC, abstractmethod
from typing import List

from kpasscli.domain.entry_models import Entry, MatchPolicy
from kpasscli.domain.errors import FieldNotFound

# Reserved store-location keywords, matched case-insensitively.
KEYCHAIN_KEYWORD: str = "keychain"
BITWARDEN_KEYWORD: str = "bitwarden"


class BackendType(enum.Enum):
    """Closed set of supported credential store variants."""

    KEEPASS = "keepass"
    KEYCHAIN = "keychain"
    BITWARDEN = "bitwarden"

    @classmethod
    def from_path(cls, location: str) -> "BackendType":
        """
        Map a store location string to a backend variant.

        Reserved keywords select the keychain or Bitwarden backends; any
        other value is taken as the path of a KeePass database. Never fails:
        whether the path opens is decided at backend construction.
        """
        keyword = location.lower()
        if keyword == KEYCHAIN_KEYWORD:
            return cls.KEYCHAIN
        if keyword == BITWARDEN_KEYWORD:
            return cls.BITWARDEN
        return cls.KEEPASS


class Backend(ABC):
    """
    Abstract credential store.

    Construction opens and authenticates against the store; afterwards the
    backend owns its handle exclusively and only reads from it.
    """

    backend_type: BackendType

    @abstractmethod
    def search(self, query: str, policy: MatchPolicy) -> List[Entry]:
        """
        Find entries matching the query.

        Args:
            query: Title pattern or, for tree stores, an absolute path.
            policy: Title comparison semantics.

        Returns:
            List[Entry]: Matches; empty when nothing matched.

        Raises:
            StoreError: The store could not be read.
        """
        pass

    def get_field(self, entry: Entry, field_name: str) -> str:
        """
        Extract one named value from an entry.

        Raises:
            FieldNotFound: The entry has no value for `field_name`.
        """
        value = entry.get_field(field_name)
        if value is None:
            raise FieldNotFound(field_name)
        return value
