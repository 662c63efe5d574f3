from __future__ import annotations

"""
Credential Tree Structure Data Models.

Read-only snapshot of a tree-structured store. Groups own their records and
child groups exclusively; no node keeps a reference to its parent, so the
structure is a strict tree that traversals walk by passing paths down.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from kpasscli.domain.entry_models import Entry

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CredentialRecord:
    """
    Leaf node: one credential as stored in the tree.

    Attributes:
        title: Record title (may be empty).
        username: Login name, if set.
        password: Secret, if set.
        url: Associated address, if set.
        notes: Free-form notes, if set.
        custom_fields: Remaining string fields keyed by their stored name.
    """
    title: str
    username: Optional[str] = None
    password: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    custom_fields: Tuple[Tuple[str, str], ...] = ()

    def to_entry(self, path: str) -> Entry:
        """Project the record onto a fresh Unified Entry located at `path`."""
        custom: Dict[str, str] = dict(self.custom_fields)
        return Entry(
            title=self.title,
            path=path,
            username=self.username,
            password=self.password,
            url=self.url,
            notes=self.notes,
            custom_fields=custom,
        )


@dataclass(frozen=True)
class CredentialGroup:
    """
    Named container of records and child groups.

    Attributes:
        name: Group name; the root group's name never appears in paths.
        records: Records directly inside this group, in store order.
        groups: Child groups, in store order.
    """
    name: str
    records: Tuple[CredentialRecord, ...] = field(default_factory=tuple)
    groups: Tuple["CredentialGroup", ...] = field(default_factory=tuple)

    def child_group(self, name: str) -> Optional["CredentialGroup"]:
        """Return the first direct child group named exactly `name`."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def record_titled(self, title: str) -> Optional[CredentialRecord]:
        """Return the first direct record titled exactly `title`."""
        for record in self.records:
            if record.title == title:
                return record
        return None
