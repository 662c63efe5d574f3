from __future__ import annotations

"""
CLI Argument Definition.

Defines the command-line schema: lookup target, store access, match policy,
output routing, and configuration utilities.
"""

import argparse

from kpasscli.domain.constants import APP_NAME, DEFAULT_CONFIG_PATH, DEFAULT_FIELD_NAME

MANUAL = """\
NAME
    kpasscli - look up a single credential field from a password store

SYNOPSIS
    kpasscli -i ITEM [-f FIELD] [-p STORE] [options]

STORES
    -p takes a KeePass .kdbx path, or the keyword 'keychain' (macOS
    Keychain) or 'bitwarden' (Bitwarden CLI, needs an unlocked vault and
    BW_SESSION). The store may also come from KPASSCLI_KDBPATH or the
    database_path configuration key.

ITEM QUERIES
    An ITEM starting with '/' is an absolute path: each segment must equal
    a group name and the last one an entry title. A leading segment equal
    to the root group name is optional. Any other ITEM searches all entry
    titles recursively; matching is case-insensitive substring unless -c
    or -e is given. Exactly one entry must match.

PASSWORD SOURCES (KeePass)
    -w, KPASSCLI_KDBPASSWORD, password_file, password_executable, then an
    interactive prompt. Each non-interactive source names a file (its
    content is the password) or an executable (its stdout is).

OUTPUT
    -o stdout|clipboard, -C, KPASSCLI_OUT, default_output, then stdout.
    With clipboard_timeout set, the clipboard is cleared after that many
    seconds by a background process.

EXIT STATUS
    0 on success, 1 on any error, 130 when interrupted.
"""


def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the kpasscli CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Query a KeePass database, macOS Keychain or Bitwarden for a single field.",
    )

    # --- Store Access ---
    p.add_argument(
        "-p", "--kdbpath",
        dest="kdb_path",
        default=None,
        help="KeePass database path, or 'keychain' / 'bitwarden'.",
    )
    p.add_argument(
        "-w", "--kdbpassword",
        dest="kdb_password",
        default=None,
        help="File or executable providing the master password.",
    )
    p.add_argument(
        "-k", "--keyfile",
        dest="key_file",
        default=None,
        help="KeePass key file.",
    )

    # --- Lookup Target ---
    p.add_argument("-i", "--item", default=None, help="Entry title or absolute path.")
    p.add_argument(
        "-f", "--fieldname",
        dest="field_name",
        default=DEFAULT_FIELD_NAME,
        help=f"Field to return (default: {DEFAULT_FIELD_NAME}).",
    )
    p.add_argument("--show-all", action="store_true", help="Print every field of the entry.")
    p.add_argument("-t", "--totp", action="store_true", help="Print the current TOTP code.")
    p.add_argument(
        "-T", "--password-totp",
        dest="password_totp",
        action="store_true",
        help="Print the password followed by the current TOTP code.",
    )

    # --- Match Policy ---
    p.add_argument("-c", "--case-sensitive", action="store_true", help="Case-sensitive matching.")
    p.add_argument("-e", "--exact-match", action="store_true", help="Whole-value matching.")

    # --- Output Routing ---
    p.add_argument("-o", "--out", default=None, help="Output type: stdout or clipboard.")
    p.add_argument(
        "-C", "--Clip",
        dest="clipboard",
        action="store_true",
        help="Shortcut for --out clipboard.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--config",
        dest="config_path",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH}).",
    )
    p.add_argument("--create-config", action="store_true", help="Write an example config.yaml.")
    p.add_argument("--print-config", action="store_true", help="Print the active configuration.")
    p.add_argument("-m", "--man", action="store_true", help="Show the manual page.")
    p.add_argument("-d", "--debug", action="store_true", help="Debug diagnostics on stderr.")
    p.add_argument("-v", "--verify", action="store_true", help="Progress diagnostics on stderr.")

    # Used by the background clipboard clearer only.
    p.add_argument(
        "--clear-clipboard-after",
        dest="clear_clipboard_after",
        type=int,
        default=None,
        help=argparse.SUPPRESS,
    )

    return p
