"""Status classification, SLA windows and workflow stage.

Status groups are an explicit tag table built once at import time:
STATUS_GROUPS maps every grouped status to exactly one StatusGroup, so
classification is a dictionary lookup rather than repeated list scans.
Statuses missing from the table (custom LOV additions) belong to no group.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple, Union

from ic_core_lib.models import (
    DEFAULT_PRIORITY,
    Incident,
    STATUS_NEW,
    StatusGroup,
    TERMINAL_STATUSES,
    UNASSIGNED_WARROOM,
    utc_now,
)


# Group definitions, in display order
STATUS_GROUP_DEFINITIONS: Tuple[Tuple[StatusGroup, Tuple[str, ...]], ...] = (
    (StatusGroup.ACTIVE, ("New", "Acknowledged", "In Progress", "ReOpen", "Outage", "Need more info")),
    (StatusGroup.BAU, ("Return to BAU", "Duplicate", "Invalid Issue", "Post Hypercare")),
    (StatusGroup.RESOLVED, ("Resolved",)),
    (StatusGroup.CLOSED, ("Closed",)),
)


def _build_status_groups(
    definitions: Iterable[Tuple[StatusGroup, Iterable[str]]]
) -> Dict[str, StatusGroup]:
    """Flatten group definitions into a status -> group tag table.

    Raises:
        ValueError: If a status is tagged with more than one group
    """
    table: Dict[str, StatusGroup] = {}
    for group, statuses in definitions:
        for status in statuses:
            if status in table:
                raise ValueError(
                    f"Status '{status}' assigned to both '{table[status].value}' and '{group.value}'"
                )
            table[status] = group
    return table


STATUS_GROUPS: Dict[str, StatusGroup] = _build_status_groups(STATUS_GROUP_DEFINITIONS)

BAU_STATUSES: Tuple[str, ...] = dict(STATUS_GROUP_DEFINITIONS)[StatusGroup.BAU]

# SLA budget per priority token, checked in this order
SLA_HOURS: Tuple[Tuple[str, int], ...] = (("P1", 2), ("P2", 4), ("P3", 12))
DEFAULT_SLA_HOURS = 24
CLOSE_TO_BREACH = timedelta(hours=1)

PRIORITY_TOKENS = ("P1", "P2", "P3", "P4")


def classify(subject: Union[Incident, str]) -> Optional[StatusGroup]:
    """Status group of an incident (or a bare status string), None if ungrouped."""
    status = subject.status if isinstance(subject, Incident) else subject
    return STATUS_GROUPS.get(status)


def in_group(incident: Incident, group: Union[StatusGroup, str]) -> bool:
    return classify(incident) == StatusGroup(group)


def priority_token(priority: str) -> Optional[str]:
    """First P1..P4 token contained in the priority label."""
    for token in PRIORITY_TOKENS:
        if token in priority:
            return token
    return None


def sla_hours(priority: str) -> int:
    """SLA budget in hours, by substring match on the priority label."""
    for token, hours in SLA_HOURS:
        if token in priority:
            return hours
    return DEFAULT_SLA_HOURS


@dataclass(frozen=True)
class SLAStatus:
    """SLA position of an open incident at a given instant"""

    hours: int
    deadline: datetime
    remaining: timedelta

    @property
    def is_breached(self) -> bool:
        return self.remaining < timedelta(0)

    @property
    def is_close_to_breach(self) -> bool:
        return timedelta(0) <= self.remaining < CLOSE_TO_BREACH

    @property
    def overrun(self) -> timedelta:
        """Positive overrun magnitude; zero while within SLA"""
        return -self.remaining if self.is_breached else timedelta(0)

    def describe(self) -> str:
        span = self.overrun if self.is_breached else self.remaining
        total_minutes = int(span.total_seconds() // 60)
        hours, minutes = divmod(total_minutes, 60)
        if self.is_breached:
            return f"Breached by {hours}h {minutes}m"
        return f"{hours}h {minutes}m remaining"


def compute_sla(incident: Incident, now: Optional[datetime] = None) -> Optional[SLAStatus]:
    """
    SLA deadline and remaining time for an incident.

    Deadline = creation timestamp + sla_hours(priority). Undefined (None) once
    the incident is Resolved or Closed.

    Args:
        incident: Incident to evaluate
        now: Evaluation instant (default: current UTC time)

    Returns:
        SLAStatus, or None for terminal incidents
    """
    if incident.status in TERMINAL_STATUSES:
        return None

    hours = sla_hours(incident.priority)
    deadline = incident.timestamp + timedelta(hours=hours)
    remaining = deadline - (now or utc_now())
    return SLAStatus(hours=hours, deadline=deadline, remaining=remaining)


class WorkflowStage(int, Enum):
    """Progress marker shown above an incident: New -> Triaged -> Assigned -> Resolved"""

    NEW = 1
    TRIAGED = 2
    ASSIGNED = 3
    RESOLVED = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


def workflow_stage(incident: Incident, default_priority: str = DEFAULT_PRIORITY) -> WorkflowStage:
    """
    Current workflow stage.

    - RESOLVED: status is Resolved or Closed
    - ASSIGNED: an SME is set
    - TRIAGED: routed to a warroom with a non-default priority, or moved past New
    - NEW: otherwise
    """
    if incident.status in TERMINAL_STATUSES:
        return WorkflowStage.RESOLVED
    if incident.sme:
        return WorkflowStage.ASSIGNED
    triaged = incident.warroom != UNASSIGNED_WARROOM and incident.priority != default_priority
    if triaged or incident.status != STATUS_NEW:
        return WorkflowStage.TRIAGED
    return WorkflowStage.NEW


def age_hours(incident: Incident, now: Optional[datetime] = None) -> int:
    """Whole hours elapsed since creation"""
    elapsed = (now or utc_now()) - incident.timestamp
    return int(elapsed.total_seconds() // 3600)
