"""In-process storage backend, used for tests and ephemeral sessions."""

from typing import Dict, Optional

from ic_core_lib.infrastructure.storage.base import StorageBackend


class MemoryStorage(StorageBackend):
    """Dict-backed key/value store; nothing survives the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    @property
    def backend_name(self) -> str:
        return "memory"

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
