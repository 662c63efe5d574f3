from __future__ import annotations

"""
Title Match Predicate.

Single comparison routine shared by every backend so that search semantics
are identical regardless of how a store represents its text.
"""

from kpasscli.domain.entry_models import MatchPolicy


def matches(value: str, pattern: str, policy: MatchPolicy) -> bool:
    """
    Evaluate a candidate value against a query pattern.

    Args:
        value: Candidate text (usually an entry title).
        pattern: Query text.
        policy: Case sensitivity and exact/substring selection.

    Returns:
        bool: True if the value satisfies the pattern under the policy.
    """
    if not policy.case_sensitive:
        value = value.lower()
        pattern = pattern.lower()

    if policy.exact_match:
        return value == pattern
    return pattern in value
