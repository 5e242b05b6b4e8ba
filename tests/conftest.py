"""Shared fixtures: a fixed clock, incident factories and in-memory storage."""

from datetime import datetime, timedelta, timezone

import pytest

from ic_core_lib.infrastructure.storage import IncidentRepository, MemoryStorage
from ic_core_lib.models import Incident, IncidentUpdate, UpdateType, default_lovs
from ic_core_lib.store import IncidentStore

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_incident():
    """Factory for valid incidents; keyword arguments override any field."""

    def _make(id="INC-1", created=NOW, **overrides):
        data = {
            "id": id,
            "summary": f"Issue {id}",
            "category": "Login",
            "priority": "P4: Low",
            "status": "New",
            "warroom": "Unassigned",
            "impact_category": "Operation",
            "requestor_name": "Alice Johnson",
            "requestor_email": "alice@example.com",
            "channel_type": "Portal",
            "timestamp": created,
            "updated_at": created,
            "updates": [
                IncidentUpdate(
                    timestamp=created,
                    user="System",
                    message="Incident created via Portal",
                    type=UpdateType.CREATION,
                )
            ],
        }
        data.update(overrides)
        return Incident(**data)

    return _make


@pytest.fixture
def make_incidents(make_incident):
    """Factory for n incidents created one hour apart, oldest first."""

    def _make(n=3, **overrides):
        return [
            make_incident(id=f"INC-{i + 1}", created=NOW - timedelta(hours=n - i), **overrides)
            for i in range(n)
        ]

    return _make


@pytest.fixture
def lovs():
    return default_lovs()


@pytest.fixture
def memory_backend():
    return MemoryStorage()


@pytest.fixture
def repository(memory_backend):
    return IncidentRepository(memory_backend)


@pytest.fixture
def store(repository):
    return IncidentStore(repository)
