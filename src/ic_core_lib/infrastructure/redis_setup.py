"""Redis Connection Factory with Sentinel Support

Builds the synchronous Redis client behind the redis storage backend:
- Standalone Redis (development/self-hosted)
- Redis Sentinel (HA deployments)

Configuration comes from REDIS_* environment variables; explicit arguments
override them.
"""

import logging
import os
from typing import Callable, List, Optional, Tuple

from redis import Redis
from redis.sentinel import Sentinel

from ic_core_lib.utils import storage_startup_retry

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL_PORT = 26379


def parse_sentinel_hosts(hosts_str: str) -> List[Tuple[str, int]]:
    """Parse comma-separated sentinel host:port string.

    Example:
        >>> parse_sentinel_hosts("sentinel1:26379,sentinel2")
        [('sentinel1', 26379), ('sentinel2', 26379)]
    """
    sentinels = []

    for host_port in hosts_str.split(","):
        host_port = host_port.strip()
        if not host_port:
            continue

        if ":" in host_port:
            host, port_str = host_port.rsplit(":", 1)
            sentinels.append((host, int(port_str)))
        else:
            sentinels.append((host_port, DEFAULT_SENTINEL_PORT))

    return sentinels


def verify_redis_connection(client: Redis, retry_policy: Callable = storage_startup_retry) -> None:
    """Ping the server, retrying with backoff.

    Raises:
        redis.exceptions.RedisError: If every attempt fails
    """
    retry_policy(client.ping)()
    logger.info("Redis connection verified")


def get_redis_client(
    mode: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    db: Optional[int] = None,
    password: Optional[str] = None,
    sentinel_hosts: Optional[str] = None,
    master_set: Optional[str] = None,
    socket_keepalive: bool = True,
    health_check_interval: int = 30,
    retry_policy: Callable = storage_startup_retry,
) -> Redis:
    """Get a verified Redis client with Sentinel/Standalone selection.

    Args:
        mode: "standalone" or "sentinel" (default from REDIS_MODE env)
        host: Redis host (default from REDIS_HOST env)
        port: Redis port (default from REDIS_PORT env)
        db: Database index (default from REDIS_DB env)
        password: Redis password (default from REDIS_PASSWORD env)
        sentinel_hosts: Comma-separated sentinel hosts (default from REDIS_SENTINEL_HOSTS env)
        master_set: Sentinel master set name (default from REDIS_MASTER_SET env)
        socket_keepalive: Enable socket keepalive
        health_check_interval: Health check interval in seconds
        retry_policy: Retry decorator applied to the startup ping

    Returns:
        Redis client with decode_responses enabled

    Environment Variables:
        REDIS_MODE: "standalone" (default) or "sentinel"
        REDIS_HOST / REDIS_PORT: standalone address (default localhost:6379)
        REDIS_DB: Database index (default: 0)
        REDIS_PASSWORD: Redis password (optional)
        REDIS_SENTINEL_HOSTS: "host:port" pairs, required for sentinel mode
        REDIS_MASTER_SET: Master set name (default: "mymaster")

    Raises:
        ValueError: If Sentinel mode is configured without sentinel hosts
        redis.exceptions.RedisError: If the connection cannot be verified
    """
    mode = (mode or os.getenv("REDIS_MODE", "standalone")).lower()
    db_index = db if db is not None else int(os.getenv("REDIS_DB", "0"))
    password = password or os.getenv("REDIS_PASSWORD")

    logger.info(f"Initializing Redis client in {mode} mode")

    if mode == "sentinel":
        sentinel_hosts_str = sentinel_hosts or os.getenv("REDIS_SENTINEL_HOSTS", "")
        master_name = master_set or os.getenv("REDIS_MASTER_SET", "mymaster")

        if not sentinel_hosts_str:
            raise ValueError(
                "REDIS_SENTINEL_HOSTS environment variable is required for Sentinel mode"
            )

        sentinels = parse_sentinel_hosts(sentinel_hosts_str)
        if not sentinels:
            raise ValueError(f"No valid sentinel hosts found in: {sentinel_hosts_str}")

        logger.info(f"Connecting to Redis Sentinel: master={master_name}, sentinels={sentinels}")

        sentinel_client = Sentinel(
            sentinels,
            sentinel_kwargs={"password": password} if password else {},
            socket_keepalive=socket_keepalive,
            health_check_interval=health_check_interval,
        )
        # master_for follows failover automatically
        redis_client = sentinel_client.master_for(
            master_name,
            db=db_index,
            password=password,
            decode_responses=True,
            socket_keepalive=socket_keepalive,
            health_check_interval=health_check_interval,
        )
    else:
        redis_host = host or os.getenv("REDIS_HOST", "localhost")
        redis_port = port if port is not None else int(os.getenv("REDIS_PORT", "6379"))

        logger.info(f"Connecting to standalone Redis: {redis_host}:{redis_port}/{db_index}")

        redis_client = Redis(
            host=redis_host,
            port=redis_port,
            db=db_index,
            password=password,
            decode_responses=True,
            socket_keepalive=socket_keepalive,
            health_check_interval=health_check_interval,
            socket_connect_timeout=5,
        )

    verify_redis_connection(redis_client, retry_policy)
    return redis_client
