"""Incident Command Core Library

Incident models, triage/audit logic, kanban mapping and storage for the
Incident Command dashboard.
"""

__version__ = "0.1.0"

# Models and errors first (no internal dependencies)
from ic_core_lib.exceptions import (
    IncidentCommandError,
    ValidationError,
    InvalidMoveError,
    NotFoundError,
    PersistenceError,
)
from ic_core_lib.models import (
    Incident, IncidentUpdate, IncidentDraft, IncidentPatch, IncidentFilters,
    LOVData, KanbanColumnConfig, StatusGroup, UpdateType, EditorRole,
)

# Storage
from ic_core_lib.infrastructure.storage import (
    IncidentRepository,
    MemoryStorage,
    FileStorage,
    get_storage_backend,
    reset_storage_backend,
)


# The store pulls in every core module, so load it on first use
def __getattr__(name):
    """Lazy import for IncidentStore."""
    if name == "IncidentStore":
        from ic_core_lib.store import IncidentStore
        return IncidentStore
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    # Errors
    "IncidentCommandError", "ValidationError", "InvalidMoveError",
    "NotFoundError", "PersistenceError",
    # Models
    "Incident", "IncidentUpdate", "IncidentDraft", "IncidentPatch",
    "IncidentFilters", "LOVData", "KanbanColumnConfig", "StatusGroup",
    "UpdateType", "EditorRole",
    # Store (lazy loaded)
    "IncidentStore",
    # Storage
    "IncidentRepository", "MemoryStorage", "FileStorage",
    "get_storage_backend", "reset_storage_backend",
]
