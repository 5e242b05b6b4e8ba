"""
File storage backend.

One JSON document per key under STORAGE_DIR. Writes go to a temporary file
in the same directory and are moved into place with os.replace, so a crash
mid-write never leaves a truncated document behind.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from ic_core_lib.exceptions import PersistenceError
from ic_core_lib.infrastructure.storage.base import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = "~/.incident_command"


class FileStorage(StorageBackend):
    """
    Key/value store on the local filesystem.

    Environment Variables:
        STORAGE_DIR: Directory holding the documents (default: ~/.incident_command)
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        directory = directory or os.getenv("STORAGE_DIR", DEFAULT_STORAGE_DIR)
        self.directory = Path(directory).expanduser()
        logger.info(f"FileStorage initialized: directory={self.directory}")

    @property
    def backend_name(self) -> str:
        return "file"

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(
                f"Failed to read {path}: {e}",
                context={"key": key, "path": str(path)},
            ) from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(
                f"Failed to write {path}: {e}",
                context={"key": key, "path": str(path)},
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(f"Wrote {len(value)} characters to {path}")

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Failed to remove {path}: {e}",
                context={"key": key, "path": str(path)},
            ) from e
