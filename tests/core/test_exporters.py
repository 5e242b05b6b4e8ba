"""Unit tests for CSV export."""

import csv
import io
from datetime import datetime, timezone

import pytest

from ic_core_lib.core.exporters import CSV_HEADERS, export_csv, export_filename


@pytest.mark.unit
def test_should_export_header_only_for_no_incidents():
    """Test an empty export is just the header line."""
    assert export_csv([]) == (
        "ID,Timestamp,Status,Priority,Warroom,Category,Summary,"
        "Requestor Name,Store Name,Region,SME,Resolved At\n"
    )


@pytest.mark.unit
def test_should_quote_fields_so_readers_recover_them(make_incident, now):
    """Test commas, quotes and newlines survive a CSV reader."""
    # Arrange
    summary = 'Login "fails", again\nfor store 12'
    incident = make_incident(summary=summary, status="Resolved", resolved_at=now)

    # Act
    rows = list(csv.reader(io.StringIO(export_csv([incident]))))

    # Assert
    assert rows[0] == CSV_HEADERS
    assert rows[1][0] == "INC-1"
    assert rows[1][1] == "2024-05-01T12:00:00.000Z"
    assert rows[1][6] == summary
    assert rows[1][11] == "2024-05-01T12:00:00.000Z"


@pytest.mark.unit
def test_should_leave_resolved_at_blank_when_unset(make_incident):
    """Test open incidents export an empty Resolved At."""
    rows = list(csv.reader(io.StringIO(export_csv([make_incident()]))))

    assert rows[1][-1] == ""


@pytest.mark.unit
def test_should_name_export_after_the_date():
    """Test the download filename carries the export date."""
    assert export_filename(datetime(2024, 5, 1, 23, 59, tzinfo=timezone.utc)) == "incident_export_2024-05-01.csv"
