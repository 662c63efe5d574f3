from __future__ import annotations

"""
Credential Lookup Service.

Caller-side policy on top of the backend contract: turns a result list into
exactly one entry and extracts the requested value, optionally combined with
a TOTP code.
"""

import logging
from typing import Sequence

from kpasscli.backends.base import Backend
from kpasscli.core.otp import generate_totp
from kpasscli.domain.entry_models import Entry, MatchPolicy
from kpasscli.domain.errors import (
    AmbiguousMatch,
    FieldNotFound,
    InvalidTotpConfiguration,
    NoItemsFound,
)

logger = logging.getLogger(__name__)

OTP_FIELD = "otp"
PASSWORD_FIELD = "Password"


def select_single(results: Sequence[Entry]) -> Entry:
    """
    Require exactly one search result.

    Raises:
        NoItemsFound: The result list is empty.
        AmbiguousMatch: More than one entry matched; every path is listed.
    """
    if not results:
        raise NoItemsFound()
    if len(results) > 1:
        raise AmbiguousMatch([e.path for e in results])
    return results[0]


def find_entry(backend: Backend, query: str, policy: MatchPolicy) -> Entry:
    """Search the backend and return the single matching entry."""
    results = backend.search(query, policy)
    logger.debug(f"Query {query!r} returned {len(results)} candidate(s)")
    return select_single(results)


def retrieve_value(
        backend: Backend,
        entry: Entry,
        field_name: str,
        *,
        totp: bool = False,
        password_totp: bool = False,
) -> str:
    """
    Extract the value the operator asked for.

    Args:
        backend: Backend that produced the entry.
        entry: The selected entry.
        field_name: Field to return in plain mode.
        totp: Return the current TOTP code instead of the field.
        password_totp: Return the password immediately followed by the code.

    Returns:
        str: The requested value.

    Raises:
        FieldNotFound: The requested field (or password) has no value.
        InvalidTotpConfiguration: TOTP was requested but is unusable.
    """
    if not (totp or password_totp):
        return backend.get_field(entry, field_name)

    try:
        otp_uri = backend.get_field(entry, OTP_FIELD)
    except FieldNotFound:
        raise InvalidTotpConfiguration("Entry has no TOTP configuration") from None

    token = generate_totp(otp_uri)
    if totp:
        return token
    return backend.get_field(entry, PASSWORD_FIELD) + token
