from __future__ import annotations

"""
Time-Based One-Time Password Support.

Validates otpauth:// URIs stored on entries and derives the current code
with pyotp.
"""

import binascii
import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import parse_qs, urlsplit

import pyotp

from kpasscli.domain.errors import InvalidTotpConfiguration

logger = logging.getLogger(__name__)

OTP_SCHEME = "otpauth"
OTP_TYPE = "totp"
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30

_DIGESTS: Dict[str, Callable] = {
    "SHA1": hashlib.sha1,
    "SHA256": hashlib.sha256,
    "SHA512": hashlib.sha512,
}


@dataclass(frozen=True)
class TotpParameters:
    """
    Decoded generator inputs of an otpauth URI.

    Attributes:
        secret: Base32 secret with spaces and padding removed.
        digits: Code length.
        period: Time step in seconds.
        algorithm: HMAC hash name.
    """
    secret: str
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD
    algorithm: str = "SHA1"


def parse_otp_uri(uri: str) -> TotpParameters:
    """
    Validate an otpauth URI and extract its TOTP parameters.

    Scheme, type and secret presence are checked before anything is decoded.

    Raises:
        InvalidTotpConfiguration: The URI is not a usable TOTP configuration.
    """
    try:
        parts = urlsplit(uri.strip())
    except ValueError as e:
        raise InvalidTotpConfiguration(f"Failed to parse TOTP URL: {e}") from e

    if parts.scheme.lower() != OTP_SCHEME:
        raise InvalidTotpConfiguration(f"Invalid scheme: {parts.scheme or '(none)'}")
    if parts.netloc.lower() != OTP_TYPE:
        raise InvalidTotpConfiguration("Only TOTP is supported")

    query = parse_qs(parts.query)
    secret = _first(query, "secret")
    if not secret:
        raise InvalidTotpConfiguration("No secret found in URL")
    secret = secret.replace(" ", "").replace("=", "")

    algorithm = (_first(query, "algorithm") or "SHA1").upper()
    if algorithm not in _DIGESTS:
        raise InvalidTotpConfiguration(f"Unsupported TOTP algorithm: {algorithm}")

    return TotpParameters(
        secret=secret,
        digits=_as_positive_int(_first(query, "digits"), DEFAULT_DIGITS, "digits"),
        period=_as_positive_int(_first(query, "period"), DEFAULT_PERIOD, "period"),
        algorithm=algorithm,
    )


def generate_totp(uri: str, for_time: Optional[float] = None) -> str:
    """
    Produce the TOTP code for an otpauth URI.

    Args:
        uri: Entry's otpauth://totp/... value.
        for_time: Unix timestamp; defaults to now.

    Returns:
        str: Zero-padded numeric code.
    """
    params = parse_otp_uri(uri)
    try:
        totp = pyotp.TOTP(
            params.secret,
            digits=params.digits,
            digest=_DIGESTS[params.algorithm],
            interval=params.period,
        )
        return totp.at(for_time if for_time is not None else time.time())
    except (binascii.Error, ValueError) as e:
        raise InvalidTotpConfiguration(f"Invalid TOTP configuration: {e}") from e


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _first(query: Dict[str, list], key: str) -> Optional[str]:
    values = query.get(key)
    return values[0] if values else None


def _as_positive_int(raw: Optional[str], fallback: int, name: str) -> int:
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        raise InvalidTotpConfiguration(f"Invalid TOTP {name}: {raw}") from None
    if value <= 0:
        raise InvalidTotpConfiguration(f"Invalid TOTP {name}: {raw}")
    return value
