from __future__ import annotations

"""
Unit tests for clipboard access.

Verifies tool selection per platform, stdin delivery, and the detached
clearer process launch. No real clipboard tool is executed.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest

from kpasscli.domain.errors import OutputError
from kpasscli.infra import clipboard


def which_only(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


@pytest.mark.parametrize(
    "system, available, expected",
    [
        ("Darwin", ("pbcopy",), ["pbcopy"]),
        ("Windows", ("clip",), ["clip"]),
        ("Linux", ("wl-copy", "xclip"), ["wl-copy"]),
        ("Linux", ("xclip", "xsel"), ["xclip", "-selection", "clipboard"]),
        ("Linux", ("xsel",), ["xsel", "--clipboard", "--input"]),
        ("Linux", (), None),
    ],
)
def test_find_clipboard_command(system, available, expected) -> None:
    """TC-01: The first installed tool for the platform wins."""
    with patch.object(clipboard.platform, "system", return_value=system), \
            patch.object(clipboard.shutil, "which", side_effect=which_only(*available)):
        assert clipboard.find_clipboard_command() == expected


def test_copy_writes_stdin() -> None:
    proc = MagicMock(returncode=0)
    with patch.object(clipboard, "find_clipboard_command", return_value=["xsel", "--clipboard", "--input"]), \
            patch.object(clipboard.subprocess, "Popen", return_value=proc) as popen:
        clipboard.copy_to_clipboard("s3cret")

    assert popen.call_args.args[0] == ["xsel", "--clipboard", "--input"]
    proc.communicate.assert_called_once_with(b"s3cret")


def test_copy_without_tool() -> None:
    with patch.object(clipboard, "find_clipboard_command", return_value=None):
        with pytest.raises(OutputError, match="No clipboard tool"):
            clipboard.copy_to_clipboard("x")


def test_copy_tool_failure() -> None:
    proc = MagicMock(returncode=1)
    with patch.object(clipboard, "find_clipboard_command", return_value=["wl-copy"]), \
            patch.object(clipboard.subprocess, "Popen", return_value=proc):
        with pytest.raises(OutputError, match="exited with 1"):
            clipboard.copy_to_clipboard("x")


def test_clear_after_sleeps_then_clears() -> None:
    with patch.object(clipboard.time, "sleep") as sleep, \
            patch.object(clipboard, "copy_to_clipboard") as copy:
        clipboard.clear_clipboard_after(5)
    sleep.assert_called_once_with(5)
    copy.assert_called_once_with("")


def test_spawn_background_clear(capsys) -> None:
    """TC-02: The clearer re-invokes kpasscli detached with the hidden flag."""
    with patch.object(clipboard.platform, "system", return_value="Linux"), \
            patch.object(clipboard.subprocess, "Popen") as popen:
        clipboard.spawn_background_clear(15)

    cmd = popen.call_args.args[0]
    assert cmd == [sys.executable, "-m", "kpasscli.main", "--clear-clipboard-after", "15"]
    assert popen.call_args.kwargs["start_new_session"] is True
    assert "15 seconds" in capsys.readouterr().err


def test_spawn_disabled_for_zero_timeout() -> None:
    with patch.object(clipboard.subprocess, "Popen") as popen:
        clipboard.spawn_background_clear(0)
    popen.assert_not_called()


def test_spawn_failure() -> None:
    with patch.object(clipboard.subprocess, "Popen", side_effect=OSError("nope")):
        with pytest.raises(OutputError):
            clipboard.spawn_background_clear(5)
