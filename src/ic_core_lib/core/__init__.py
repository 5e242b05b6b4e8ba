"""
Incident command core logic.

Pure functions over Incident/LOVData values: classification and SLA,
filtering, the mutation/audit engine, kanban mapping, dashboard metrics,
CSV export and mock generation. Nothing here touches storage.
"""

from ic_core_lib.core.classifier import (
    STATUS_GROUPS,
    BAU_STATUSES,
    SLA_HOURS,
    DEFAULT_SLA_HOURS,
    SLAStatus,
    WorkflowStage,
    classify,
    in_group,
    priority_token,
    sla_hours,
    compute_sla,
    workflow_stage,
    age_hours,
)

from ic_core_lib.core.filters import (
    newest_first,
    apply_filters,
    find_requestor_tickets,
    sme_worklist,
    known_smes,
)

from ic_core_lib.core.mutations import (
    ATTACHMENT_MAX_BYTES,
    generate_incident_id,
    create_incident,
    apply_edit,
    add_requestor_comment,
    quick_resolve,
    quick_assign,
)

from ic_core_lib.core.kanban import (
    UNMAPPED_COLUMN_ID,
    KanbanColumn,
    map_to_columns,
    count_unmapped,
    resolve_move_status,
    move_to_column,
)

from ic_core_lib.core.metrics import (
    PriorityBreakdown,
    BAUBreakdown,
    DashboardMetrics,
    WarroomLoad,
    dashboard_metrics,
    warroom_matrix,
)

from ic_core_lib.core.exporters import export_csv, export_filename
from ic_core_lib.core.seed import generate_mock_incidents

__all__ = [
    # Classifier
    "STATUS_GROUPS", "BAU_STATUSES", "SLA_HOURS", "DEFAULT_SLA_HOURS",
    "SLAStatus", "WorkflowStage", "classify", "in_group", "priority_token",
    "sla_hours", "compute_sla", "workflow_stage", "age_hours",
    # Filters
    "newest_first", "apply_filters", "find_requestor_tickets",
    "sme_worklist", "known_smes",
    # Mutations
    "ATTACHMENT_MAX_BYTES", "generate_incident_id", "create_incident",
    "apply_edit", "add_requestor_comment", "quick_resolve", "quick_assign",
    # Kanban
    "UNMAPPED_COLUMN_ID", "KanbanColumn", "map_to_columns", "count_unmapped",
    "resolve_move_status", "move_to_column",
    # Metrics
    "PriorityBreakdown", "BAUBreakdown", "DashboardMetrics", "WarroomLoad",
    "dashboard_metrics", "warroom_matrix",
    # Export / seed
    "export_csv", "export_filename", "generate_mock_incidents",
]
