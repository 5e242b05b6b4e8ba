"""Storage backends and the incident repository."""

from ic_core_lib.infrastructure.storage.base import StorageBackend
from ic_core_lib.infrastructure.storage.memory import MemoryStorage
from ic_core_lib.infrastructure.storage.file import FileStorage
from ic_core_lib.infrastructure.storage.repository import (
    INCIDENTS_KEY,
    LOVS_KEY,
    IncidentRepository,
)
from ic_core_lib.infrastructure.storage.factory import (
    BackendKind,
    create_storage_backend,
    get_storage_backend,
    reset_storage_backend,
)

__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "FileStorage",
    "INCIDENTS_KEY",
    "LOVS_KEY",
    "IncidentRepository",
    "BackendKind",
    "create_storage_backend",
    "get_storage_backend",
    "reset_storage_backend",
]
