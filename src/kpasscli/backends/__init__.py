from __future__ import annotations

"""
Credential Store Backends.

Exposes the backend contract and the factory that turns a store location
into an opened backend.
"""

import logging
from typing import Optional

from .base import Backend, BackendType

logger = logging.getLogger(__name__)


def create_backend(
        location: str,
        password: Optional[str] = None,
        keyfile: Optional[str] = None,
) -> Backend:
    """
    Select and open the backend for a store location.

    Args:
        location: 'keychain', 'bitwarden' or a KeePass database path.
        password: Master password (KeePass only).
        keyfile: Optional key file (KeePass only).

    Returns:
        Backend: The opened backend.

    Raises:
        StoreOpenError: The store could not be opened.
    """
    backend_type = BackendType.from_path(location)
    logger.debug(f"Backend type: {backend_type.name}")

    if backend_type is BackendType.KEEPASS:
        from .keepass import KeePassBackend
        return KeePassBackend(location, password or "", keyfile=keyfile)
    if backend_type is BackendType.KEYCHAIN:
        from .keychain import KeychainBackend
        return KeychainBackend()
    if backend_type is BackendType.BITWARDEN:
        from .bitwarden import BitwardenBackend
        return BitwardenBackend()
    raise ValueError(f"Unsupported backend type: {backend_type}")


__all__ = [
    "Backend",
    "BackendType",
    "create_backend",
]
