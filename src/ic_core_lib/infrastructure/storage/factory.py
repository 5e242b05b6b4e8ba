"""
Storage backend selection.

Environment Variables:
    STORAGE_BACKEND: "file" (default), "memory" or "redis"
    STORAGE_DIR: Directory for the file backend
    REDIS_*: Connection settings for the redis backend (see redis_setup)
"""

import logging
import os
from enum import Enum
from typing import Any, Optional

from ic_core_lib.infrastructure.storage.base import StorageBackend
from ic_core_lib.infrastructure.storage.file import FileStorage
from ic_core_lib.infrastructure.storage.memory import MemoryStorage

logger = logging.getLogger(__name__)


class BackendKind(Enum):
    """Available storage backends."""

    FILE = "file"
    MEMORY = "memory"
    REDIS = "redis"


def create_storage_backend(kind: Optional[str] = None, **kwargs: Any) -> StorageBackend:
    """Build a backend.

    Args:
        kind: Backend kind (overrides STORAGE_BACKEND env var)
        **kwargs: Backend constructor arguments (directory, client, key_prefix, ...)

    Returns:
        A ready StorageBackend; an unknown kind falls back to the file backend
    """
    kind_str = kind or os.getenv("STORAGE_BACKEND", "file")
    try:
        backend_kind = BackendKind(kind_str.lower())
    except ValueError:
        logger.warning(f"Invalid STORAGE_BACKEND '{kind_str}', defaulting to 'file'")
        backend_kind = BackendKind.FILE

    if backend_kind == BackendKind.MEMORY:
        backend = MemoryStorage(**kwargs)
    elif backend_kind == BackendKind.REDIS:
        # Imported here so file/memory users never pay for the redis client setup
        from ic_core_lib.infrastructure.storage.redis_backend import RedisStorage
        backend = RedisStorage(**kwargs)
    else:
        backend = FileStorage(**kwargs)

    logger.info(f"Storage backend initialized: {backend.backend_name}")
    return backend


# Singleton instance for global access
_backend_instance: Optional[StorageBackend] = None


def get_storage_backend() -> StorageBackend:
    """Get or create the global storage backend, configured from the environment.

    Example:
        ```python
        from ic_core_lib.infrastructure.storage import get_storage_backend

        backend = get_storage_backend()
        ```
    """
    global _backend_instance

    if _backend_instance is None:
        _backend_instance = create_storage_backend()

    return _backend_instance


def reset_storage_backend():
    """Reset the global storage backend.

    Used for testing or reconfiguration.
    """
    global _backend_instance
    _backend_instance = None
    logger.warning("Storage backend instance reset")
