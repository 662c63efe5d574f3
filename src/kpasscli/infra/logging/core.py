from __future__ import annotations

"""
Logging Core Orchestrator.

Idempotent setup of the root logger. Records pass through a QueueHandler to a
QueueListener that owns the real handlers, so a slow log file never delays
the lookup itself. The listener is flushed and stopped at interpreter exit.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from kpasscli.infra.logging.config import _LEVEL_MAP, LoggingConfig
from kpasscli.infra.logging.handlers import (
    _create_console_handler,
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_kpasscli_configured"
_QUEUE_LISTENER_ATTR: str = "_kpasscli_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once per process.

    Args:
        cfg: Logging settings.
        force: Re-create handlers even if logging is already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level_int = _parse_level(cfg.level)
    root.setLevel(level_int)
    reset_logging()

    handlers_list: List[logging.Handler] = []
    if cfg.console:
        handlers_list.append(_create_console_handler(level_int, logging.Formatter(cfg.console_fmt)))
    if cfg.log_file:
        fh = _create_rotating_file_handler(
            cfg.log_file,
            level_int,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh:
            handlers_list.append(fh)

    if not handlers_list:
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
    listener.start()
    root.addHandler(queue_handler)

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    atexit.register(_stop_listener, listener)
    return root


def reset_logging() -> None:
    """Detach kpasscli handlers from the root logger and stop its listener."""
    root = logging.getLogger()
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()

    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a listener; a second call on the same listener is a no-op."""
    if listener is None:
        return
    # QueueListener.stop() fails once its thread has been joined.
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
        for h in listener.handlers:
            h.close()
