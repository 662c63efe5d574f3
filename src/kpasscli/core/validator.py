from __future__ import annotations

"""
Configuration Validation Service.

Normalizes the raw configuration dictionary loaded from YAML: type coercion,
path expansion, and default injection. Non-strict mode records warnings and
falls back to defaults; strict mode raises ConfigError.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from kpasscli.domain.config import get_default_config
from kpasscli.domain.constants import OUTPUT_CLIPBOARD, OUTPUT_STDOUT
from kpasscli.domain.errors import ConfigError
from kpasscli.infra.fs import expand_user_path

logger = logging.getLogger(__name__)

_VALID_OUTPUTS = (OUTPUT_STDOUT, OUTPUT_CLIPBOARD)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise ConfigError instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise ConfigError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for key in sorted(set(merged) - set(defaults) - {"config_file_path"}):
        warnings.append(f"Unknown configuration key '{key}' ignored.")
        del merged[key]

    # Keywords such as 'keychain' survive expansion untouched.
    for field in ("database_path", "password_file", "password_executable", "key_file", "log_file"):
        value = _as_opt_str(merged.get(field), field, warnings, strict)
        merged[field] = expand_user_path(value) if value else None

    output = _as_opt_str(merged.get("default_output"), "default_output", warnings, strict)
    if output is not None and output.lower() not in _VALID_OUTPUTS:
        _reject(f"Invalid field 'default_output': unknown output type '{output}'.", warnings, strict)
        output = None
    merged["default_output"] = output.lower() if output else None

    merged["clipboard_timeout"] = _as_opt_non_negative_int(
        merged.get("clipboard_timeout"), "clipboard_timeout", warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, warnings: List[str], strict: bool) -> None:
    if strict:
        raise ConfigError(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_opt_str(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[str]:
    """Validate optional string inputs; blank strings count as unset."""
    if value is None:
        return None
    if isinstance(value, str):
        v = value.strip()
        return v or None

    _reject(
        f"Invalid field '{field}': expected str, received {type(value).__name__}.",
        warnings,
        strict,
    )
    return None


def _as_opt_non_negative_int(
        value: Any, field: str, warnings: List[str], strict: bool
) -> Optional[int]:
    """Validate optional integer inputs, accepting numeric strings."""
    if value is None:
        return None
    if isinstance(value, bool):
        _reject(f"Invalid field '{field}': expected int, received bool.", warnings, strict)
        return None
    if isinstance(value, int):
        if value < 0:
            _reject(f"Invalid field '{field}': must not be negative.", warnings, strict)
            return None
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())

    _reject(
        f"Invalid field '{field}': expected int, received {type(value).__name__}.",
        warnings,
        strict,
    )
    return None
