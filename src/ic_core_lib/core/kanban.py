"""Kanban mapper.

Derives board columns from the LOV kanban configuration:
- Configured columns hold incidents whose status is in the column's set
- Incidents whose status is in no column go to a synthetic, non-droppable
  "Unmapped Statuses" column shown first
- With no configured columns at all, one auto column per LOV status is
  generated and nothing is unmapped
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Set

from ic_core_lib.core.filters import newest_first
from ic_core_lib.core.mutations import apply_edit
from ic_core_lib.exceptions import InvalidMoveError, NotFoundError
from ic_core_lib.models import EditorRole, Incident, IncidentPatch, KanbanColumnConfig

logger = logging.getLogger(__name__)

UNMAPPED_COLUMN_ID = "col-unmapped"
UNMAPPED_COLUMN_TITLE = "Unmapped Statuses"
AUTO_COLUMN_PREFIX = "col-auto-"


@dataclass
class KanbanColumn:
    """One rendered board column"""

    id: str
    title: str
    statuses: List[str] = field(default_factory=list)
    items: List[Incident] = field(default_factory=list)
    is_unmapped: bool = False

    @property
    def droppable(self) -> bool:
        """Whether incidents may be dropped into this column"""
        return not self.is_unmapped


def mapped_statuses(column_configs: Iterable[KanbanColumnConfig]) -> Set[str]:
    """Union of all statuses referenced by any column."""
    return {status for col in column_configs for status in col.statuses}


def unmapped_incidents(
    incidents: Iterable[Incident],
    column_configs: Sequence[KanbanColumnConfig],
) -> List[Incident]:
    """Incidents whose status no configured column claims (empty when none are configured)."""
    if not column_configs:
        return []
    known = mapped_statuses(column_configs)
    return [i for i in incidents if i.status not in known]


def count_unmapped(
    incidents: Iterable[Incident],
    column_configs: Sequence[KanbanColumnConfig],
) -> int:
    return len(unmapped_incidents(incidents, column_configs))


def map_to_columns(
    incidents: Sequence[Incident],
    column_configs: Sequence[KanbanColumnConfig],
    statuses: Sequence[str] = (),
    show_unmapped: bool = True,
) -> List[KanbanColumn]:
    """
    Build board columns.

    Args:
        incidents: Incidents in store order
        column_configs: Configured kanban columns
        statuses: LOV statuses, used for auto columns when nothing is configured;
            when empty too, the distinct incident statuses in first-seen order
        show_unmapped: Prepend the unmapped column when orphans exist

    Returns:
        Columns in display order, each with items sorted newest-first
    """
    if not column_configs:
        statuses = list(statuses) or list(dict.fromkeys(i.status for i in incidents))
        logger.debug(f"No kanban columns configured; generating {len(statuses)} auto columns")
        return [
            KanbanColumn(
                id=f"{AUTO_COLUMN_PREFIX}{status}",
                title=status,
                statuses=[status],
                items=newest_first(i for i in incidents if i.status == status),
            )
            for status in statuses
        ]

    columns = [
        KanbanColumn(
            id=config.id,
            title=config.title,
            statuses=list(config.statuses),
            items=newest_first(i for i in incidents if i.status in config.statuses),
        )
        for config in column_configs
    ]

    orphans = unmapped_incidents(incidents, column_configs)
    if orphans and show_unmapped:
        columns.insert(
            0,
            KanbanColumn(
                id=UNMAPPED_COLUMN_ID,
                title=UNMAPPED_COLUMN_TITLE,
                statuses=sorted({i.status for i in orphans}),
                items=newest_first(orphans),
                is_unmapped=True,
            ),
        )

    return columns


def find_column(
    column_id: str,
    column_configs: Sequence[KanbanColumnConfig],
) -> Optional[KanbanColumnConfig]:
    return next((c for c in column_configs if c.id == column_id), None)


def resolve_move_status(
    incident: Incident,
    target_column_id: str,
    column_configs: Sequence[KanbanColumnConfig],
) -> str:
    """
    Status an incident takes when dropped on a column.

    - Unmapped column: always rejected
    - Auto column (no configuration): the column's status
    - Configured column: unchanged if the current status already belongs to
      the column, otherwise the column's first status

    Raises:
        InvalidMoveError: Drop onto the unmapped column or a column without statuses
        NotFoundError: Unknown column id
    """
    if target_column_id == UNMAPPED_COLUMN_ID:
        raise InvalidMoveError(
            "Incidents cannot be moved into the unmapped column",
            context={"incident_id": incident.id, "column_id": target_column_id},
        )

    if not column_configs and target_column_id.startswith(AUTO_COLUMN_PREFIX):
        return target_column_id[len(AUTO_COLUMN_PREFIX):]

    target = find_column(target_column_id, column_configs)
    if target is None:
        raise NotFoundError(
            f"Kanban column not found: {target_column_id}",
            context={"column_id": target_column_id},
        )

    if not target.statuses:
        raise InvalidMoveError(
            f"Kanban column '{target.title}' has no statuses configured",
            context={"incident_id": incident.id, "column_id": target.id},
        )

    if incident.status in target.statuses:
        return incident.status
    return target.statuses[0]


def move_to_column(
    incident: Incident,
    target_column_id: str,
    column_configs: Sequence[KanbanColumnConfig],
    now: Optional[datetime] = None,
) -> Incident:
    """
    Apply a board drop.

    Returns the incident unchanged when its status does not change; otherwise
    an edited incident with one status_change entry (Admin) and a System note
    recording the board move.
    """
    new_status = resolve_move_status(incident, target_column_id, column_configs)
    if new_status == incident.status:
        return incident

    target = find_column(target_column_id, column_configs)
    title = target.title if target else new_status

    logger.info(f"Moving {incident.id} from '{incident.status}' to '{new_status}' via board")
    return apply_edit(
        incident,
        IncidentPatch(status=new_status),
        comment=f"Moved to {title} (Status: {new_status}) via Kanban",
        editor=EditorRole.ADMIN,
        comment_author=EditorRole.SYSTEM,
        now=now,
    )
