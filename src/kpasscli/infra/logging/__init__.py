from __future__ import annotations

from .config import LoggingConfig, level_from_flags
from .core import (
    _CONFIGURED_FLAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_logger,
    reset_logging,
)
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "level_from_flags",
    "configure_logging",
    "get_logger",
    "reset_logging",
]
