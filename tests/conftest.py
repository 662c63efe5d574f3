from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared credential trees and configuration dictionaries.
"""

import os
import sys
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from kpasscli.domain.tree_models import CredentialGroup, CredentialRecord  # noqa: E402

# RFC 6238 SHA1 test secret ("12345678901234567890").
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC_OTP_URI = f"otpauth://totp/Example:alice?secret={RFC_SECRET}&issuer=Example"


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_tree() -> CredentialGroup:
    """
    Return a small credential tree.

    Structure:
    Root
      Email
      Internet/
        github            (otp configured)
        GitLab
        Dev/
          github
      Banking/
        Bank
    """
    dev = CredentialGroup(
        name="Dev",
        records=(CredentialRecord(title="github", username="bob", password="pw-dev"),),
    )
    internet = CredentialGroup(
        name="Internet",
        records=(
            CredentialRecord(
                title="github",
                username="alice",
                password="pw-internet",
                url="https://github.com",
                custom_fields=(("otp", RFC_OTP_URI), ("Recovery", "r-123")),
            ),
            CredentialRecord(title="GitLab", username="alice", password="pw-gitlab"),
        ),
        groups=(dev,),
    )
    banking = CredentialGroup(
        name="Banking",
        records=(CredentialRecord(title="Bank", password="pw-bank", notes="PIN on card"),),
    )
    return CredentialGroup(
        name="Root",
        records=(CredentialRecord(title="Email", username="me@example.com", password="pw-email"),),
        groups=(internet, banking),
    )


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a complete, already validated configuration dictionary.

    Reflects the keys defined in 'kpasscli.domain.config'.
    """
    return {
        "config_file_path": "/tmp/kpasscli/config.yaml",
        "database_path": "/tmp/kpasscli/vault.kdbx",
        "default_output": None,
        "password_file": None,
        "password_executable": None,
        "key_file": None,
        "clipboard_timeout": None,
        "log_file": None,
    }
