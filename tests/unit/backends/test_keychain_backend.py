from __future__ import annotations

"""
Unit tests for the macOS Keychain backend.

Output of the 'security' tool is replayed from captured samples; the tool
itself is never run.
"""

import subprocess
from typing import List
from unittest.mock import patch

import pytest

from kpasscli.backends import keychain
from kpasscli.backends.keychain import (
    KeychainBackend,
    parse_attribute_line,
    parse_item,
    parse_value,
)
from kpasscli.domain.entry_models import MatchPolicy
from kpasscli.domain.errors import StoreOpenError

FIND_STDOUT = """\
keychain: "/Users/alice/Library/Keychains/login.keychain-db"
version: 512
class: "genp"
attributes:
    0x00000007 <blob>="github"
    "acct"<blob>="alice"
    "cdat"<timedate>=0x32303234303130313030303030305A00  "20240101000000Z\\000"
    "icmt"<blob>="personal"
    "svce"<blob>="github"
    "type"<uint32>=<NULL>
"""
FIND_STDERR = 'password: "s3cret"\n'

DUMP_STDOUT = """\
keychain: "/Users/alice/Library/Keychains/login.keychain-db"
class: "genp"
attributes:
    "svce"<blob>="github"
class: "genp"
attributes:
    "svce"<blob>="GitLab"
class: "genp"
attributes:
    "svce"<blob>="github"
class: "inet"
attributes:
    "srvr"<blob>="example.com"
"""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('"plain"', "plain"),
        ("<NULL>", None),
        ("", None),
        ('0x6869  "hi"', "hi"),
        ("0x6869", "hi"),
        ("0xZZ", "0xZZ"),
        ("0xFF", None),
    ],
)
def test_parse_value(raw, expected) -> None:
    assert parse_value(raw) == expected


def test_parse_attribute_line() -> None:
    assert parse_attribute_line('    "acct"<blob>="alice"') == ("acct", "alice")
    assert parse_attribute_line("    0x00000007 <blob>=\"github\"") is None
    assert parse_attribute_line("class: \"genp\"") is None


def test_parse_item() -> None:
    """TC-01: Attributes and the stderr password assemble into one entry."""
    entry = parse_item(FIND_STDOUT, FIND_STDERR)
    assert entry.title == "github"
    assert entry.path == "/keychain/github"
    assert entry.username == "alice"
    assert entry.password == "s3cret"
    assert entry.notes == "personal"
    assert entry.get_field("cdat") == "20240101000000Z\\000"
    assert entry.get_field("type") is None


def test_parse_item_hex_password() -> None:
    entry = parse_item('    "svce"<blob>="x"\n', "password: 0x6869\n")
    assert entry.password == "hi"


def make_backend() -> KeychainBackend:
    with patch.object(keychain.sys, "platform", "darwin"), \
            patch.object(keychain.shutil, "which", return_value="/usr/bin/security"):
        return KeychainBackend()


class FakeSecurity:
    def __init__(self, known: List[str]) -> None:
        self.known = known
        self.calls: List[List[str]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        if cmd[1] == "dump-keychain":
            return subprocess.CompletedProcess(cmd, 0, stdout=DUMP_STDOUT, stderr="")
        service = cmd[-1]
        if service not in self.known:
            return subprocess.CompletedProcess(cmd, 44, stdout="", stderr="not found")
        stdout = f'attributes:\n    "svce"<blob>="{service}"\n'
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr='password: "pw"\n')


def test_requires_macos() -> None:
    with patch.object(keychain.sys, "platform", "linux"):
        with pytest.raises(StoreOpenError, match="only available on macOS"):
            KeychainBackend()


def test_requires_security_tool() -> None:
    with patch.object(keychain.sys, "platform", "darwin"), \
            patch.object(keychain.shutil, "which", return_value=None):
        with pytest.raises(StoreOpenError):
            KeychainBackend()


def test_exact_search_ignores_case_by_default() -> None:
    """TC-02: Exact matching compares enumerated service names case-insensitively."""
    backend = make_backend()
    with patch.object(keychain.subprocess, "run", side_effect=FakeSecurity(["github"])):
        exact = backend.search("GITHUB", MatchPolicy(exact_match=True))
        loose = backend.search("GITHUB", MatchPolicy())
    assert [e.path for e in exact] == ["/keychain/github"]
    assert [e.path for e in loose] == ["/keychain/github"]


def test_exact_search_case_sensitive() -> None:
    backend = make_backend()
    policy = MatchPolicy(case_sensitive=True, exact_match=True)
    with patch.object(keychain.subprocess, "run", side_effect=FakeSecurity(["github"])):
        assert backend.search("GITHUB", policy) == []
        assert [e.title for e in backend.search("github", policy)] == ["github"]


def test_exact_search_not_found() -> None:
    backend = make_backend()
    with patch.object(keychain.subprocess, "run", side_effect=FakeSecurity([])):
        assert backend.search("nope", MatchPolicy(exact_match=True)) == []


def test_substring_search_enumerates_services() -> None:
    """TC-03: Substring search matches deduplicated service names."""
    backend = make_backend()
    fake = FakeSecurity(["github", "GitLab"])
    with patch.object(keychain.subprocess, "run", side_effect=fake):
        results = backend.search("git", MatchPolicy())
    assert [e.title for e in results] == ["github", "GitLab"]
