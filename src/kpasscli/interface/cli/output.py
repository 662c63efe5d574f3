from __future__ import annotations

"""
Result Rendering.

Routes the retrieved value to stdout or the clipboard and renders the
--show-all view of an entry.
"""

import logging
import sys
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO

from kpasscli.domain.constants import OUTPUT_CLIPBOARD, OUTPUT_STDOUT
from kpasscli.domain.entry_models import Entry
from kpasscli.infra import clipboard

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 40


class OutputType(Enum):
    STDOUT = OUTPUT_STDOUT
    CLIPBOARD = OUTPUT_CLIPBOARD

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[OutputType]:
        """Case-insensitive lookup; unknown or empty values give None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def resolve_output_type(
        flag_out: Optional[str],
        clip_flag: bool,
        env_out: Optional[str],
        config: Dict[str, Any],
) -> OutputType:
    """
    Choose the output channel.

    Precedence: --out, --Clip, KPASSCLI_OUT, default_output, stdout.
    Unrecognized values at one level fall through to the next.
    """
    candidates = [
        flag_out,
        OUTPUT_CLIPBOARD if clip_flag else None,
        env_out,
        config.get("default_output"),
    ]
    for candidate in candidates:
        parsed = OutputType.parse(candidate)
        if parsed is not None:
            return parsed
    return OutputType.STDOUT


class OutputHandler:
    """Delivers a single secret value to the selected channel."""

    def __init__(
            self,
            output_type: OutputType,
            clipboard_timeout: Optional[int] = None,
            stream: Optional[TextIO] = None,
    ):
        self.output_type = output_type
        self.clipboard_timeout = clipboard_timeout
        self.stream = stream

    def output(self, value: str) -> None:
        """
        Emit the value.

        Raises:
            OutputError: The clipboard could not be written or the
                background clearer could not be started.
        """
        if self.output_type is OutputType.STDOUT:
            print(value, file=self.stream or sys.stdout)
            return

        clipboard.copy_to_clipboard(value)
        logger.info("Value copied to clipboard")
        if self.clipboard_timeout:
            clipboard.spawn_background_clear(self.clipboard_timeout)


def render_all_fields(entry: Entry) -> List[str]:
    """Lines of the --show-all view; absent standard fields are skipped."""
    lines = [SEPARATOR, "Entry Details:", SEPARATOR, f"Title: {entry.title}"]
    for label, value in (
            ("Username", entry.username),
            ("Password", entry.password),
            ("URL", entry.url),
            ("Notes", entry.notes),
    ):
        if value is not None:
            lines.append(f"{label}: {value}")
    for key, value in entry.custom_fields.items():
        lines.append(f"{key}: {value}")
    lines.append(SEPARATOR)
    return lines


def render_config(config: Dict[str, Any]) -> List[str]:
    """Lines of the --print-config view."""
    return [
        f"Current used Configuration: {config.get('config_file_path')}",
        SEPARATOR,
        f"Database Path: {config.get('database_path')}",
        f"Default Output: {config.get('default_output')}",
        f"Password File: {config.get('password_file')}",
        f"Password Executable: {config.get('password_executable')}",
        f"Key File: {config.get('key_file')}",
        f"Clipboard Timeout: {config.get('clipboard_timeout')}",
        f"Log File: {config.get('log_file')}",
        SEPARATOR,
    ]
