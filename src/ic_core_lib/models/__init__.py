"""
Incident command data models.

Pydantic models for incidents, their audit trail, query/edit inputs and the
list-of-values configuration.
"""

from ic_core_lib.models.common import (
    utc_now,
    to_iso_z,
)

from ic_core_lib.models.incident import (
    # Core incident
    Incident,
    IncidentUpdate,
    UpdateType,
    EditorRole,
    StatusGroup,

    # Inputs
    IncidentDraft,
    IncidentPatch,
    IncidentFilters,

    # Canonical values
    STATUS_NEW,
    STATUS_RESOLVED,
    STATUS_CLOSED,
    TERMINAL_STATUSES,
    UNASSIGNED_WARROOM,
    DEFAULT_PRIORITY,
    DEFAULT_CHANNEL,
    DEFAULT_IMPACT_CATEGORY,
)

from ic_core_lib.models.lov import (
    LOVData,
    KanbanColumnConfig,
    EDITABLE_LOV_FIELDS,
    default_lovs,
    merge_with_defaults,
)

__all__ = [
    # Common
    "utc_now", "to_iso_z",
    # Incident
    "Incident", "IncidentUpdate", "UpdateType", "EditorRole", "StatusGroup",
    # Inputs
    "IncidentDraft", "IncidentPatch", "IncidentFilters",
    # Canonical values
    "STATUS_NEW", "STATUS_RESOLVED", "STATUS_CLOSED", "TERMINAL_STATUSES",
    "UNASSIGNED_WARROOM", "DEFAULT_PRIORITY", "DEFAULT_CHANNEL",
    "DEFAULT_IMPACT_CATEGORY",
    # LOV
    "LOVData", "KanbanColumnConfig", "EDITABLE_LOV_FIELDS",
    "default_lovs", "merge_with_defaults",
]
