from __future__ import annotations

"""
Integration tests against a real KeePass database.

A .kdbx file is created with pykeepass and queried through the backend and
the CLI controller.
"""

from pathlib import Path

import pytest
from pykeepass import create_database

from kpasscli.backends import create_backend
from kpasscli.core.lookup import find_entry, retrieve_value
from kpasscli.domain.entry_models import MatchPolicy
from kpasscli.domain.errors import AmbiguousMatch, EntryNotFound, PathIsGroup, StoreOpenError
from kpasscli.infra.logging import reset_logging
from kpasscli.interface.cli import app

MASTER = "correct horse"
OTP_URI = "otpauth://totp/Example:alice?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&digits=8"


@pytest.fixture(scope="module")
def kdbx(tmp_path_factory) -> str:
    """
    Build a database shaped like:

    Root
      Email
      Internet/
        github      (otp, custom 'Recovery')
        Dev/
          github
    """
    path = tmp_path_factory.mktemp("db") / "vault.kdbx"
    kp = create_database(str(path), password=MASTER)

    kp.add_entry(kp.root_group, "Email", "me@example.com", "pw-email")
    internet = kp.add_group(kp.root_group, "Internet")
    gh = kp.add_entry(internet, "github", "alice", "pw-gh", url="https://github.com")
    gh.set_custom_property("Recovery", "r-123")
    gh.otp = OTP_URI
    dev = kp.add_group(internet, "Dev")
    kp.add_entry(dev, "github", "bob", "pw-dev")
    kp.save()
    return str(path)


def test_open_with_wrong_password(kdbx: str) -> None:
    with pytest.raises(StoreOpenError, match="Check password or keyfile"):
        create_backend(kdbx, password="wrong")


def test_open_empty_file(tmp_path: Path) -> None:
    empty = tmp_path / "empty.kdbx"
    empty.write_bytes(b"")
    with pytest.raises(StoreOpenError, match="corrupt"):
        create_backend(str(empty), password=MASTER)


def test_open_truncated_file(kdbx: str, tmp_path: Path) -> None:
    data = Path(kdbx).read_bytes()
    truncated = tmp_path / "truncated.kdbx"
    truncated.write_bytes(data[: len(data) // 2])
    with pytest.raises(StoreOpenError, match="corrupt"):
        create_backend(str(truncated), password=MASTER)


def test_repeated_path_lookup_is_stable(kdbx: str) -> None:
    backend = create_backend(kdbx, password=MASTER)
    first = backend.search("/Internet/github", MatchPolicy())
    second = backend.search("/Internet/github", MatchPolicy())
    assert first == second
    assert [e.path for e in first] == ["/Internet/github"]


def test_search_and_path_modes(kdbx: str) -> None:
    """TC-01: Root elision, ambiguity and path resolution on a real file."""
    backend = create_backend(kdbx, password=MASTER)

    assert find_entry(backend, "email", MatchPolicy()).path == "/Email"

    with pytest.raises(AmbiguousMatch) as exc:
        find_entry(backend, "github", MatchPolicy(exact_match=True))
    assert exc.value.paths == ("/Internet/github", "/Internet/Dev/github")

    dev = find_entry(backend, f"/{backend.root.name}/Internet/Dev/github", MatchPolicy())
    assert retrieve_value(backend, dev, "UserName") == "bob"

    with pytest.raises(PathIsGroup):
        backend.search("/Internet", MatchPolicy())
    with pytest.raises(EntryNotFound):
        backend.search("/Internet/Missing", MatchPolicy())


def test_custom_and_otp_fields(kdbx: str) -> None:
    backend = create_backend(kdbx, password=MASTER)
    gh = find_entry(backend, "/Internet/github", MatchPolicy())

    assert retrieve_value(backend, gh, "Recovery") == "r-123"
    assert retrieve_value(backend, gh, "otp") == OTP_URI
    assert len(retrieve_value(backend, gh, "Password", totp=True)) == 8
    assert retrieve_value(backend, gh, "Password", password_totp=True).startswith("pw-gh")


def test_cli_against_database(kdbx: str, tmp_path: Path, monkeypatch, capsys) -> None:
    """TC-02: Full controller run with the password taken from a file."""
    for var in ("KPASSCLI_KDBPATH", "KPASSCLI_KDBPASSWORD", "KPASSCLI_OUT"):
        monkeypatch.delenv(var, raising=False)
    pw_file = tmp_path / "pw.txt"
    pw_file.write_text(MASTER + "\n", encoding="utf-8")

    try:
        code = app.main([
            "--config", str(tmp_path / "none.yaml"),
            "-p", kdbx,
            "-w", str(pw_file),
            "-i", "/Internet/github",
            "-f", "url",
        ])
    finally:
        reset_logging()

    assert code == 0
    assert capsys.readouterr().out == "https://github.com\n"


def test_cli_reports_corrupt_database(tmp_path: Path, monkeypatch, capsys) -> None:
    for var in ("KPASSCLI_KDBPATH", "KPASSCLI_KDBPASSWORD", "KPASSCLI_OUT"):
        monkeypatch.delenv(var, raising=False)
    broken = tmp_path / "broken.kdbx"
    broken.write_bytes(b"")
    pw_file = tmp_path / "pw.txt"
    pw_file.write_text(MASTER, encoding="utf-8")

    try:
        code = app.main([
            "--config", str(tmp_path / "none.yaml"),
            "-p", str(broken),
            "-w", str(pw_file),
            "-i", "github",
        ])
    finally:
        reset_logging()

    assert code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: KeePass database is corrupt" in captured.err
