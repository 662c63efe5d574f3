from __future__ import annotations

"""
Hierarchical Entry Resolver.

Locates entries inside a credential tree. Queries starting with '/' are
treated as absolute paths and resolved positionally; every other query runs
a depth-first search that matches record titles with the active policy.
"""

import logging
from dataclasses import dataclass
from typing import List

from kpasscli.core.matching import matches
from kpasscli.domain.entry_models import Entry, MatchPolicy
from kpasscli.domain.errors import EntryNotFound, GroupNotFound, PathIsGroup
from kpasscli.domain.tree_models import CredentialGroup, CredentialRecord

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class SearchResult:
    """
    A located record together with its display path.

    Attributes:
        path: Absolute path of the record, root name elided.
        record: The record as stored in the tree.
    """
    path: str
    record: CredentialRecord

    def to_entry(self) -> Entry:
        return self.record.to_entry(self.path)


class HierarchicalResolver:
    """
    Path resolution and recursive search over one credential tree.

    The resolver never mutates the tree and keeps no state between calls.
    """

    def __init__(self, root: CredentialGroup, policy: MatchPolicy) -> None:
        self._root = root
        self._policy = policy

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    def find(self, query: str) -> List[SearchResult]:
        """
        Dispatch the query to path mode or search mode based on its shape.

        Args:
            query: Absolute path ('/Group/Title') or title pattern.

        Returns:
            List[SearchResult]: One result in path mode; zero or more in
                                search mode.

        Raises:
            GroupNotFound: A path segment names no child group.
            EntryNotFound: The terminal path segment names no entry.
            PathIsGroup: The path addresses a group.
        """
        if query.startswith(PATH_SEPARATOR):
            return [self.resolve_path(query)]
        return self.search(query)

    def resolve_path(self, path: str) -> SearchResult:
        """
        Resolve an absolute path to exactly one record.

        Segments are compared byte-for-byte; the match policy never applies
        to path addressing. A leading segment equal to the root group's name
        is skipped.
        """
        segments = path[len(PATH_SEPARATOR):].split(PATH_SEPARATOR)
        if segments[0] == self._root.name:
            segments = segments[1:]
        # '/' and '/<root>' both address the root group itself.
        if not segments or segments == [""]:
            raise PathIsGroup(path)

        current = self._root
        for segment in segments[:-1]:
            child = current.child_group(segment)
            if child is None:
                raise GroupNotFound(segment)
            current = child

        leaf = segments[-1]
        if current.child_group(leaf) is not None:
            raise PathIsGroup(path)

        record = current.record_titled(leaf)
        if record is None:
            raise EntryNotFound(leaf)

        logger.debug(f"Resolved absolute path {path}")
        return SearchResult(path=path, record=record)

    def search(self, query: str) -> List[SearchResult]:
        """
        Collect every record whose title satisfies the match policy.

        Groups are visited depth-first, pre-order, children in store order.
        """
        results: List[SearchResult] = []
        self._search_group(self._root, "", query, results, is_root=True)
        logger.debug(f"Search for {query!r} produced {len(results)} result(s)")
        return results

    # -------------------------------------------------------------------------
    # INTERNAL HELPERS
    # -------------------------------------------------------------------------

    def _search_group(
            self,
            group: CredentialGroup,
            parent_path: str,
            query: str,
            results: List[SearchResult],
            is_root: bool = False,
    ) -> None:
        if is_root:
            group_path = ""
        elif parent_path:
            group_path = f"{parent_path}{PATH_SEPARATOR}{group.name}"
        else:
            group_path = group.name

        for record in group.records:
            if not matches(record.title, query, self._policy):
                continue
            if group_path:
                full_path = f"{group_path}{PATH_SEPARATOR}{record.title}"
            else:
                full_path = record.title
            results.append(SearchResult(path=PATH_SEPARATOR + full_path, record=record))

        for child in group.groups:
            self._search_group(child, group_path, query, results)
