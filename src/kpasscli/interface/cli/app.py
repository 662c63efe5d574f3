from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates one lookup: logging bootstrap, configuration loading, store
selection, password resolution, search, disambiguation, field extraction and
output routing. Every domain failure is reported as 'Error: <message>' on
stderr with exit code 1; nothing but the requested value reaches stdout.
"""

import os
import sys
from typing import Any, Dict, List, Optional

from kpasscli.backends import BackendType, create_backend
from kpasscli.core.lookup import find_entry, retrieve_value
from kpasscli.core.password_source import resolve_password
from kpasscli.core.validator import validate_config
from kpasscli.domain.config import create_example_config, load_config
from kpasscli.domain.constants import (
    ENV_DB_PASSWORD,
    ENV_DB_PATH,
    ENV_OUTPUT,
    EXAMPLE_CONFIG_FILENAME,
)
from kpasscli.domain.entry_models import MatchPolicy
from kpasscli.domain.errors import KpassError
from kpasscli.infra import clipboard
from kpasscli.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_logger,
    level_from_flags,
)
from kpasscli.interface.cli import args as cli_args
from kpasscli.interface.cli.output import (
    OutputHandler,
    render_all_fields,
    render_config,
    resolve_output_type,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    if args.clear_clipboard_after is not None:
        return _run_clipboard_clearer(args.clear_clipboard_after)

    if args.man:
        print(cli_args.MANUAL)
        return EXIT_OK

    level = level_from_flags(args.debug, args.verify)
    configure_logging(LoggingConfig(level=level, console=True))

    try:
        return _run(args)
    except KpassError as e:
        logger.debug(f"Lookup failed: {type(e).__name__}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED


# -----------------------------------------------------------------------------
# WORKFLOW
# -----------------------------------------------------------------------------

def _run(args: Any) -> int:
    if args.create_config:
        create_example_config(EXAMPLE_CONFIG_FILENAME)
        print(f"Example config file '{EXAMPLE_CONFIG_FILENAME}' created successfully.")
        return EXIT_OK

    config, warnings = validate_config(load_config(args.config_path), strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if config.get("log_file"):
        configure_logging(
            LoggingConfig(
                level=level_from_flags(args.debug, args.verify),
                console=True,
                log_file=config["log_file"],
            ),
            force=True,
        )

    if args.print_config:
        print("\n".join(render_config(config)))
        return EXIT_OK

    if not args.item:
        raise KpassError("item parameter is required")

    location = _resolve_store_location(args.kdb_path, config)
    backend_type = BackendType.from_path(location)
    logger.info(f"Using {backend_type.name} store")

    password = None
    keyfile = None
    if backend_type is BackendType.KEEPASS:
        password = resolve_password(args.kdb_password, config, os.environ.get(ENV_DB_PASSWORD))
        keyfile = args.key_file or config.get("key_file")

    backend = create_backend(location, password=password, keyfile=keyfile)

    policy = MatchPolicy(case_sensitive=args.case_sensitive, exact_match=args.exact_match)
    entry = find_entry(backend, args.item, policy)
    logger.info(f"Found entry {entry.path}")

    if args.show_all:
        print("\n".join(render_all_fields(entry)))
        return EXIT_OK

    value = retrieve_value(
        backend,
        entry,
        args.field_name,
        totp=args.totp,
        password_totp=args.password_totp,
    )

    output_type = resolve_output_type(
        args.out, args.clipboard, os.environ.get(ENV_OUTPUT), config
    )
    OutputHandler(output_type, config.get("clipboard_timeout")).output(value)
    return EXIT_OK


def _resolve_store_location(flag_path: Optional[str], config: Dict[str, Any]) -> str:
    """Store location precedence: --kdbpath, KPASSCLI_KDBPATH, database_path."""
    for candidate in (flag_path, os.environ.get(ENV_DB_PATH), config.get("database_path")):
        if candidate:
            return candidate
    raise KpassError("no database path provided")


def _run_clipboard_clearer(seconds: int) -> int:
    """Body of the detached child spawned after a clipboard copy."""
    try:
        clipboard.clear_clipboard_after(seconds)
    except KpassError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK
