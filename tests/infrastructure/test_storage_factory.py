"""Unit tests for storage backend selection."""

import logging
from unittest.mock import patch

import pytest

from ic_core_lib.infrastructure.storage import (
    FileStorage,
    MemoryStorage,
    create_storage_backend,
    get_storage_backend,
    reset_storage_backend,
)


@pytest.fixture(autouse=True)
def clean_singleton():
    reset_storage_backend()
    yield
    reset_storage_backend()


@pytest.mark.unit
def test_should_default_to_file_backend(tmp_path, monkeypatch):
    """Test STORAGE_BACKEND defaults to file."""
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path))

    backend = create_storage_backend()

    assert isinstance(backend, FileStorage)
    assert backend.directory == tmp_path


@pytest.mark.unit
def test_should_prefer_argument_over_environment(monkeypatch):
    """Test an explicit kind overrides STORAGE_BACKEND."""
    monkeypatch.setenv("STORAGE_BACKEND", "file")

    assert isinstance(create_storage_backend("memory"), MemoryStorage)


@pytest.mark.unit
def test_should_fall_back_to_file_for_invalid_kind(tmp_path, caplog):
    """Test an unknown backend logs a warning and uses files."""
    with caplog.at_level(logging.WARNING):
        backend = create_storage_backend("postgres", directory=tmp_path)

    assert isinstance(backend, FileStorage)
    assert "Invalid STORAGE_BACKEND 'postgres'" in caplog.text


@pytest.mark.unit
@patch("ic_core_lib.infrastructure.storage.redis_backend.get_redis_client")
def test_should_build_redis_backend(mock_get_client):
    """Test the redis kind builds a RedisStorage."""
    backend = create_storage_backend("REDIS", key_prefix="x:")

    assert backend.backend_name == "redis"
    assert backend.key_prefix == "x:"
    mock_get_client.assert_called_once_with()


@pytest.mark.unit
def test_should_reuse_singleton_until_reset(monkeypatch):
    """Test get_storage_backend caches its instance."""
    monkeypatch.setenv("STORAGE_BACKEND", "memory")

    first = get_storage_backend()
    assert get_storage_backend() is first

    reset_storage_backend()
    assert get_storage_backend() is not first
