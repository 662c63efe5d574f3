from __future__ import annotations

"""
Unified Credential Data Models.

Defines the backend-agnostic record shape every store produces and the
match policy that governs title comparisons during a search.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

# Reserved names, compared case-insensitively, shadow custom fields.
RESERVED_FIELDS = ("title", "username", "password", "url", "notes")

# -----------------------------------------------------------------------------
# MATCH POLICY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchPolicy:
    """
    Comparison semantics applied to entry titles.

    Attributes:
        case_sensitive: Compare byte-for-byte instead of lowercased.
        exact_match: Require equality instead of substring containment.
    """
    case_sensitive: bool = False
    exact_match: bool = False


# -----------------------------------------------------------------------------
# UNIFIED ENTRY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Entry:
    """
    Immutable snapshot of one credential record.

    Attributes:
        title: Display name of the record.
        path: Location inside the store, always starting with '/'.
        username: Login name, if set.
        password: Secret, if set.
        url: Associated address, if set.
        notes: Free-form notes, if set.
        custom_fields: Every other named value of the record.
    """
    title: str
    path: str
    username: Optional[str] = None
    password: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    custom_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.path.startswith("/"):
            raise ValueError(f"Entry path must start with '/': {self.path!r}")
        # Own a private copy so callers cannot alias store internals.
        frozen: Dict[str, str] = dict(self.custom_fields)
        object.__setattr__(self, "custom_fields", MappingProxyType(frozen))

    def get_field(self, field_name: str) -> Optional[str]:
        """
        Resolve a field by name.

        Reserved names match case-insensitively and win over custom fields
        with the same name. Any other name is looked up verbatim in
        custom_fields.

        Args:
            field_name: Requested field.

        Returns:
            Optional[str]: The value, or None when the entry has none.
        """
        key = field_name.lower()
        if key == "title":
            return self.title
        if key == "username":
            return self.username
        if key == "password":
            return self.password
        if key == "url":
            return self.url
        if key == "notes":
            return self.notes
        return self.custom_fields.get(field_name)

    def __hash__(self) -> int:
        return hash((self.title, self.path))
