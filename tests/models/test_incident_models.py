"""Unit tests for the incident models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from ic_core_lib.models import (
    Incident,
    IncidentFilters,
    IncidentPatch,
    IncidentUpdate,
    StatusGroup,
    UpdateType,
    to_iso_z,
)


@pytest.mark.unit
def test_should_dump_camel_case_keys_for_storage(make_incident):
    """Test to_storage writes the persisted camelCase keys."""
    # Arrange
    incident = make_incident(impact_area="Zone 3", resolved_at=None)

    # Act
    stored = incident.to_storage()

    # Assert
    assert stored["requestorName"] == "Alice Johnson"
    assert stored["impactCategory"] == "Operation"
    assert stored["impactArea"] == "Zone 3"
    assert stored["timestamp"] == "2024-05-01T12:00:00.000Z"
    assert stored["updatedAt"] == "2024-05-01T12:00:00.000Z"
    assert "resolvedAt" not in stored
    assert stored["updates"][0] == {
        "timestamp": "2024-05-01T12:00:00.000Z",
        "user": "System",
        "message": "Incident created via Portal",
        "type": "creation",
    }


@pytest.mark.unit
def test_should_load_stored_record_with_zulu_timestamps():
    """Test a record in the stored layout validates into an Incident."""
    # Arrange
    record = {
        "id": "INC-100001",
        "summary": "POS Terminal frozen - EMEA",
        "requestorName": "Bob Smith",
        "status": "Resolved",
        "timestamp": "2024-04-30T08:15:00.250Z",
        "updatedAt": "2024-04-30T09:00:00.000Z",
        "resolvedAt": "2024-04-30T09:00:00.000Z",
        "updates": [
            {
                "timestamp": "2024-04-30T08:15:00.250Z",
                "user": "System",
                "message": "Incident created via Mock Seed",
                "type": "creation",
            }
        ],
    }

    # Act
    incident = Incident.model_validate(record)

    # Assert
    assert incident.requestor_name == "Bob Smith"
    assert incident.is_terminal is True
    assert incident.timestamp == datetime(2024, 4, 30, 8, 15, 0, 250000, tzinfo=timezone.utc)
    assert incident.to_storage()["resolvedAt"] == "2024-04-30T09:00:00.000Z"


@pytest.mark.unit
def test_should_reject_audit_trail_not_starting_with_creation(now):
    """Test the creation entry must head the audit trail."""
    with pytest.raises(PydanticValidationError):
        Incident(
            id="INC-1",
            summary="x",
            timestamp=now,
            updated_at=now,
            updates=[IncidentUpdate(timestamp=now, user="Warroom", message="hi", type=UpdateType.COMMENT)],
        )


@pytest.mark.unit
def test_should_reject_empty_summary_and_empty_audit_trail(now):
    """Test summary and updates are required to be non-empty."""
    with pytest.raises(PydanticValidationError):
        Incident(id="INC-1", summary="", timestamp=now, updated_at=now, updates=[])


@pytest.mark.unit
def test_should_be_immutable(make_incident):
    """Test incidents cannot be modified in place."""
    incident = make_incident()

    with pytest.raises(PydanticValidationError):
        incident.status = "Resolved"


@pytest.mark.unit
def test_should_assume_utc_for_naive_timestamps(make_incident):
    """Test naive datetimes are treated as UTC."""
    incident = make_incident(created=datetime(2024, 1, 1, 10, 0))

    assert incident.timestamp.tzinfo == timezone.utc


@pytest.mark.unit
def test_should_report_only_explicitly_set_patch_fields():
    """Test IncidentPatch.changes ignores unset fields and accepts camelCase."""
    patch = IncidentPatch.model_validate({"status": "Resolved", "fixType": "Restart", "impactArea": None})

    assert patch.changes() == {"status": "Resolved", "fix_type": "Restart", "impact_area": None}


@pytest.mark.unit
def test_should_detect_empty_filters():
    """Test IncidentFilters.is_empty for wildcards and set values."""
    assert IncidentFilters().is_empty is True
    assert IncidentFilters(status_group=StatusGroup.BAU).is_empty is False
    assert IncidentFilters.model_validate({"impactCategory": "Revenue"}).impact_category == "Revenue"


@pytest.mark.unit
def test_should_render_zulu_timestamps():
    """Test to_iso_z renders UTC with millisecond precision and a Z suffix."""
    dt = datetime(2025, 10, 17, 4, 2, 59, 123000, tzinfo=timezone.utc)

    assert to_iso_z(dt) == "2025-10-17T04:02:59.123Z"
