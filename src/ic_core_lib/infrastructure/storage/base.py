"""
Storage backend interface.

Backends are plain string key/value stores, the shape of the browser
localStorage the dashboard data first lived in. Serialization and
storage keys belong to IncidentRepository, not to the backends.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageBackend(ABC):
    """Abstract base class for all storage backends"""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the unique name of this backend"""
        pass

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a stored value.

        Returns:
            The stored string, or None when the key is absent

        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Raises:
            PersistenceError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key; removing an absent key is not an error"""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} backend={self.backend_name}>"
