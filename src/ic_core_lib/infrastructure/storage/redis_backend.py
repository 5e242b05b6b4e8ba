"""Redis storage backend, for sharing one incident store between processes."""

import logging
import os
from typing import Any, Optional

from redis import Redis
from redis.exceptions import RedisError

from ic_core_lib.exceptions import PersistenceError
from ic_core_lib.infrastructure.redis_setup import get_redis_client
from ic_core_lib.infrastructure.storage.base import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "ic:"


class RedisStorage(StorageBackend):
    """
    Key/value store on Redis strings.

    Args:
        client: Ready Redis client (default: built by get_redis_client from env)
        key_prefix: Namespace prepended to every key (default from REDIS_KEY_PREFIX env)
        **client_kwargs: Forwarded to get_redis_client when no client is given
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        key_prefix: Optional[str] = None,
        **client_kwargs: Any,
    ):
        self.client = client if client is not None else get_redis_client(**client_kwargs)
        self.key_prefix = (
            key_prefix if key_prefix is not None
            else os.getenv("REDIS_KEY_PREFIX", DEFAULT_KEY_PREFIX)
        )
        logger.info(f"RedisStorage initialized: key_prefix={self.key_prefix!r}")

    @property
    def backend_name(self) -> str:
        return "redis"

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self._key(key))
        except RedisError as e:
            raise PersistenceError(f"Redis read failed for {key}: {e}", context={"key": key}) from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value)
        except RedisError as e:
            raise PersistenceError(f"Redis write failed for {key}: {e}", context={"key": key}) from e

    def remove_item(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except RedisError as e:
            raise PersistenceError(f"Redis delete failed for {key}: {e}", context={"key": key}) from e
