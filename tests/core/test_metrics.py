"""Unit tests for dashboard aggregation."""

import pytest

from ic_core_lib.core.metrics import PriorityBreakdown, dashboard_metrics, warroom_matrix


@pytest.mark.unit
def test_should_break_down_groups_by_priority(make_incident):
    """Test per-group priority counts and the BAU breakdown."""
    # Arrange
    incidents = [
        make_incident(id="INC-1", status="New", priority="P1: Critical"),
        make_incident(id="INC-2", status="Outage", priority="P1: Critical"),
        make_incident(id="INC-3", status="In Progress", priority="P3: Medium"),
        make_incident(id="INC-4", status="Resolved", priority="P2: High"),
        make_incident(id="INC-5", status="Closed"),
        make_incident(id="INC-6", status="Duplicate"),
        make_incident(id="INC-7", status="Duplicate"),
        make_incident(id="INC-8", status="Custom"),
    ]

    # Act
    metrics = dashboard_metrics(incidents)

    # Assert
    assert metrics.active == PriorityBreakdown(total=3, p1=2, p2=0, p3=1, p4=0)
    assert metrics.resolved == PriorityBreakdown(total=1, p2=1)
    assert metrics.closed == PriorityBreakdown(total=1, p4=1)
    assert metrics.bau.total == 2
    assert metrics.bau.by_status == {
        "Return to BAU": 0,
        "Duplicate": 2,
        "Invalid Issue": 0,
        "Post Hypercare": 0,
    }


@pytest.mark.unit
def test_should_rank_warrooms_by_active_load(make_incident):
    """Test the matrix counts active incidents only, busiest first, stable ties."""
    incidents = [
        make_incident(id="INC-1", warroom="Infra", priority="P1: Critical"),
        make_incident(id="INC-2", warroom="Infra"),
        make_incident(id="INC-3", warroom="SFA", status="Resolved"),
        make_incident(id="INC-4", warroom="Migration"),
        make_incident(id="INC-5", warroom="Unassigned"),
    ]

    rows = warroom_matrix(incidents, ["SFA", "Migration", "Infra", "Onboarding"])

    assert [(r.name, r.total) for r in rows] == [
        ("Infra", 2), ("Migration", 1), ("SFA", 0), ("Onboarding", 0),
    ]
    assert rows[0].counts.p1 == 1
