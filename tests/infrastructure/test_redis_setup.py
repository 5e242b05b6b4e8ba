"""Unit tests for the Redis client factory."""

from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ic_core_lib.infrastructure import redis_setup
from ic_core_lib.infrastructure.redis_setup import get_redis_client, parse_sentinel_hosts
from ic_core_lib.utils import create_custom_retry

NO_WAIT_RETRY = create_custom_retry(max_attempts=3, min_wait=0, max_wait=0)


@pytest.mark.unit
def test_should_parse_sentinel_hosts_with_default_port():
    """Test host lists with and without explicit ports."""
    assert parse_sentinel_hosts("s1:26380, s2,,") == [("s1", 26380), ("s2", 26379)]


@pytest.mark.unit
@patch("ic_core_lib.infrastructure.redis_setup.Redis")
def test_should_build_standalone_client_from_environment(mock_redis, monkeypatch):
    """Test standalone settings come from REDIS_* variables."""
    # Arrange
    monkeypatch.setenv("REDIS_HOST", "cache")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.setenv("REDIS_DB", "2")
    monkeypatch.delenv("REDIS_MODE", raising=False)

    # Act
    client = get_redis_client(retry_policy=NO_WAIT_RETRY)

    # Assert
    assert client is mock_redis.return_value
    kwargs = mock_redis.call_args.kwargs
    assert (kwargs["host"], kwargs["port"], kwargs["db"]) == ("cache", 6380, 2)
    assert kwargs["decode_responses"] is True
    client.ping.assert_called_once()


@pytest.mark.unit
@patch("ic_core_lib.infrastructure.redis_setup.Sentinel")
def test_should_build_sentinel_master_client(mock_sentinel):
    """Test sentinel mode asks the sentinels for the master."""
    client = get_redis_client(
        mode="sentinel",
        sentinel_hosts="a:1,b:2",
        master_set="primary",
        retry_policy=NO_WAIT_RETRY,
    )

    assert mock_sentinel.call_args.args[0] == [("a", 1), ("b", 2)]
    mock_sentinel.return_value.master_for.assert_called_once()
    assert mock_sentinel.return_value.master_for.call_args.args[0] == "primary"
    assert client is mock_sentinel.return_value.master_for.return_value


@pytest.mark.unit
def test_should_require_sentinel_hosts(monkeypatch):
    """Test sentinel mode without hosts is a configuration error."""
    monkeypatch.delenv("REDIS_SENTINEL_HOSTS", raising=False)

    with pytest.raises(ValueError, match="REDIS_SENTINEL_HOSTS"):
        get_redis_client(mode="sentinel")


@pytest.mark.unit
def test_should_retry_ping_until_it_succeeds():
    """Test transient ping failures are retried."""
    client = MagicMock()
    client.ping.side_effect = [RedisConnectionError("booting"), True]

    redis_setup.verify_redis_connection(client, NO_WAIT_RETRY)

    assert client.ping.call_count == 2


@pytest.mark.unit
def test_should_reraise_after_last_attempt():
    """Test the final connection error propagates."""
    client = MagicMock()
    client.ping.side_effect = RedisConnectionError("down")

    with pytest.raises(RedisConnectionError):
        redis_setup.verify_redis_connection(client, NO_WAIT_RETRY)

    assert client.ping.call_count == 3
