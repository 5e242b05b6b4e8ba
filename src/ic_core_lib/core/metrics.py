"""Dashboard aggregation.

Priority counts per status group, the BAU breakdown, and the
warroom x priority matrix over active incidents.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from ic_core_lib.core.classifier import BAU_STATUSES, classify
from ic_core_lib.models import Incident, StatusGroup


@dataclass
class PriorityBreakdown:
    """Incident count per priority token"""

    total: int = 0
    p1: int = 0
    p2: int = 0
    p3: int = 0
    p4: int = 0

    @classmethod
    def of(cls, incidents: Iterable[Incident]) -> "PriorityBreakdown":
        counts = cls()
        for incident in incidents:
            counts.total += 1
            # Containment, like the priority filter: a label may carry several tokens
            if "P1" in incident.priority:
                counts.p1 += 1
            if "P2" in incident.priority:
                counts.p2 += 1
            if "P3" in incident.priority:
                counts.p3 += 1
            if "P4" in incident.priority:
                counts.p4 += 1
        return counts


@dataclass
class BAUBreakdown:
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)


@dataclass
class DashboardMetrics:
    active: PriorityBreakdown
    resolved: PriorityBreakdown
    closed: PriorityBreakdown
    bau: BAUBreakdown


@dataclass
class WarroomLoad:
    """One row of the warroom x priority matrix"""

    name: str
    counts: PriorityBreakdown

    @property
    def total(self) -> int:
        return self.counts.total


def group_incidents(incidents: Iterable[Incident]) -> Dict[StatusGroup, List[Incident]]:
    """Bucket incidents by status group; ungrouped statuses are dropped."""
    buckets: Dict[StatusGroup, List[Incident]] = {group: [] for group in StatusGroup}
    for incident in incidents:
        group = classify(incident)
        if group is not None:
            buckets[group].append(incident)
    return buckets


def dashboard_metrics(incidents: Iterable[Incident]) -> DashboardMetrics:
    buckets = group_incidents(incidents)

    bau = buckets[StatusGroup.BAU]
    by_status = {status: 0 for status in BAU_STATUSES}
    for incident in bau:
        by_status[incident.status] += 1

    return DashboardMetrics(
        active=PriorityBreakdown.of(buckets[StatusGroup.ACTIVE]),
        resolved=PriorityBreakdown.of(buckets[StatusGroup.RESOLVED]),
        closed=PriorityBreakdown.of(buckets[StatusGroup.CLOSED]),
        bau=BAUBreakdown(total=len(bau), by_status=by_status),
    )


def warroom_matrix(incidents: Iterable[Incident], warrooms: Sequence[str]) -> List[WarroomLoad]:
    """
    Active incident load per configured warroom, busiest first.

    Warrooms with equal totals keep their LOV order. Incidents routed to a
    warroom outside the LOV (including Unassigned) are not counted.
    """
    active = group_incidents(incidents)[StatusGroup.ACTIVE]
    rows = [
        WarroomLoad(name=room, counts=PriorityBreakdown.of(i for i in active if i.warroom == room))
        for room in warrooms
    ]
    return sorted(rows, key=lambda row: row.total, reverse=True)
