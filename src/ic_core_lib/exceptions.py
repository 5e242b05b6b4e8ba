"""Exception hierarchy for the incident command core.

Every error raised by the library derives from IncidentCommandError and
carries a machine-readable error_code plus a context dict for the caller's
user-facing messaging:

- ValidationError: rejected input, raised before any store mutation
- InvalidMoveError: kanban drop onto a column that cannot accept it
- NotFoundError: edit/delete/move targeting an unknown incident or column
- PersistenceError: storage backend read/write failure
"""

from typing import Any, Dict, Optional


class IncidentCommandError(Exception):
    """Base class for all incident command errors"""

    default_code = "INCIDENT_COMMAND_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(IncidentCommandError):
    """Input rejected before touching the store"""

    default_code = "VALIDATION_ERROR"


class InvalidMoveError(ValidationError):
    """Kanban move onto a column that is not a valid drop target"""

    default_code = "INVALID_MOVE"


class NotFoundError(IncidentCommandError):
    """Referenced incident or kanban column does not exist"""

    default_code = "NOT_FOUND"


class PersistenceError(IncidentCommandError):
    """Storage backend failed to read or write"""

    default_code = "PERSISTENCE_ERROR"
