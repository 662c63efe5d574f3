from __future__ import annotations

"""
Unit tests for TOTP URI parsing and code generation.

Reference values come from the RFC 6238 appendix (SHA1 secret).
"""

import pytest

from kpasscli.core.otp import TotpParameters, generate_totp, parse_otp_uri
from kpasscli.domain.errors import InvalidTotpConfiguration

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC_OTP_URI = f"otpauth://totp/Example:alice?secret={RFC_SECRET}&issuer=Example"


def test_parse_defaults() -> None:
    params = parse_otp_uri(RFC_OTP_URI)
    assert params == TotpParameters(secret=RFC_SECRET, digits=6, period=30, algorithm="SHA1")


def test_parse_explicit_parameters() -> None:
    uri = f"otpauth://totp/x?secret={RFC_SECRET}&digits=8&period=60&algorithm=sha256"
    params = parse_otp_uri(uri)
    assert params.digits == 8
    assert params.period == 60
    assert params.algorithm == "SHA256"


def test_parse_strips_spaces_and_padding() -> None:
    params = parse_otp_uri("otpauth://totp/x?secret=GEZD%20GNBV%3D%3D")
    assert params.secret == "GEZDGNBV"


@pytest.mark.parametrize(
    "uri, message",
    [
        (f"http://totp/x?secret={RFC_SECRET}", "Invalid scheme"),
        (f"otpauth://hotp/x?secret={RFC_SECRET}", "Only TOTP"),
        ("otpauth://totp/x?issuer=Example", "No secret"),
        (f"otpauth://totp/x?secret={RFC_SECRET}&algorithm=MD5", "algorithm"),
        (f"otpauth://totp/x?secret={RFC_SECRET}&digits=abc", "digits"),
        (f"otpauth://totp/x?secret={RFC_SECRET}&period=0", "period"),
    ],
)
def test_parse_rejects_invalid_uris(uri: str, message: str) -> None:
    with pytest.raises(InvalidTotpConfiguration, match=message):
        parse_otp_uri(uri)


def test_generate_rfc6238_vector_8_digits() -> None:
    """TC-01: RFC 6238 SHA1 vector at T=59 yields 94287082."""
    uri = f"otpauth://totp/x?secret={RFC_SECRET}&digits=8"
    assert generate_totp(uri, for_time=59) == "94287082"


def test_generate_rfc6238_vector_default_digits() -> None:
    """TC-02: Six-digit codes are the low digits of the same HOTP value."""
    assert generate_totp(RFC_OTP_URI, for_time=59) == "287082"
    assert generate_totp(RFC_OTP_URI, for_time=1111111109) == "081804"


def test_generate_rejects_bad_base32() -> None:
    with pytest.raises(InvalidTotpConfiguration):
        generate_totp("otpauth://totp/x?secret=not-base32!", for_time=59)
