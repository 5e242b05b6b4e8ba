"""Incident data models.

Key Models:
- Incident: Root incident entity with an append-only audit trail
- IncidentUpdate: One immutable audit entry
- IncidentDraft: Requestor submission, turned into an Incident on create
- IncidentPatch: Field-level edit merged over an existing Incident
- IncidentFilters: Ephemeral query state for the filter engine

Python attribute names are snake_case; the persisted JSON keeps the camelCase
keys the dashboard has always written (impactCategory, resolvedAt, ...), so
every model accepts both and dumps by alias for storage.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ic_core_lib.models.common import to_iso_z


# ============================================================
# Canonical values
# ============================================================

STATUS_NEW = "New"
STATUS_RESOLVED = "Resolved"
STATUS_CLOSED = "Closed"
TERMINAL_STATUSES = (STATUS_RESOLVED, STATUS_CLOSED)

UNASSIGNED_WARROOM = "Unassigned"
DEFAULT_PRIORITY = "P4: Low"
DEFAULT_CHANNEL = "Portal"
DEFAULT_IMPACT_CATEGORY = "Operation"


class UpdateType(str, Enum):
    """Kind of audit entry"""

    STATUS_CHANGE = "status_change"
    COMMENT = "comment"
    ASSIGNMENT = "assignment"
    CREATION = "creation"


class EditorRole(str, Enum):
    """Who authored an audit entry"""

    SYSTEM = "System"
    REQUESTOR = "Requestor"
    WARROOM = "Warroom"
    SME = "SME"
    ADMIN = "Admin"


class StatusGroup(str, Enum):
    """
    Coarse bucket over the fine-grained status field.

    Membership is fixed (see ic_core_lib.core.classifier); statuses outside
    every group belong to none of them.
    """

    ACTIVE = "active"
    BAU = "bau"
    RESOLVED = "resolved"
    CLOSED = "closed"


# ============================================================
# Audit Trail
# ============================================================

class IncidentUpdate(BaseModel):
    """
    One audit entry.
    Entries are appended to Incident.updates and never modified afterwards.
    """

    timestamp: datetime = Field(description="When the entry was recorded")
    user: str = Field(description="Author role: System | Requestor | Warroom | SME | Admin")
    message: str = Field(description="Human-readable description of the change")
    type: UpdateType = Field(description="Entry kind")

    @field_validator("timestamp")
    @classmethod
    def timestamp_is_utc(cls, v):
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v

    @field_serializer("timestamp", when_used="json")
    def serialize_timestamp(self, v: datetime) -> str:
        return to_iso_z(v)

    class Config:
        frozen = True


# ============================================================
# Incident
# ============================================================

class Incident(BaseModel):
    """
    Root incident entity.
    Represents one reported issue tracked from broadcast to resolution.
    """

    # Identity
    id: str = Field(description="Globally unique, immutable incident identifier", min_length=1)

    # Classification
    category: str = Field(default="", description="LOV category")
    priority: str = Field(default=DEFAULT_PRIORITY, description="Priority label, 'P{1-4}: <label>'")
    status: str = Field(default=STATUS_NEW, description="Fine-grained lifecycle status")
    warroom: str = Field(default=UNASSIGNED_WARROOM, description="Owning war room")
    impact_category: str = Field(default="", description="LOV impact category")
    impact_area: Optional[str] = Field(default=None, description="Free-text impact area")

    # Requestor / store info
    requestor_name: str = Field(default="", description="Who broadcast the incident")
    requestor_email: str = Field(default="")
    channel_type: str = Field(default="", description="LOV channel the incident arrived through")
    store_name: str = Field(default="")
    store_id: str = Field(default="")
    region: str = Field(default="")
    affected_user_id: str = Field(default="")

    # Details
    summary: str = Field(description="Short issue summary", min_length=1)
    description: str = Field(default="")
    attachment: Optional[str] = Field(default=None, description="Encoded image payload (data URL)")

    # Resolution
    sme: str = Field(default="", description="Assigned subject-matter expert")
    fix_type: str = Field(default="")
    root_cause: str = Field(default="")

    # Timestamps
    timestamp: datetime = Field(description="Creation time, immutable")
    updated_at: datetime = Field(description="Last mutation time")
    resolved_at: Optional[datetime] = Field(
        default=None,
        description="First time the incident reached Resolved/Closed; never cleared",
    )

    # Audit trail
    updates: List[IncidentUpdate] = Field(
        min_length=1,
        description="Append-only audit trail, creation entry first",
    )

    @property
    def is_terminal(self) -> bool:
        """Resolved or Closed"""
        return self.status in TERMINAL_STATUSES

    @field_validator("timestamp", "updated_at", "resolved_at")
    @classmethod
    def timestamps_are_utc(cls, v):
        if v is None:
            return v
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v

    @model_validator(mode="after")
    def creation_entry_first(self) -> "Incident":
        """Every incident keeps its creation entry at the head of the audit trail"""
        if self.updates[0].type != UpdateType.CREATION:
            raise ValueError(
                f"Incident {self.id}: first audit entry must be of type 'creation', "
                f"got '{self.updates[0].type.value}'"
            )
        return self

    @field_serializer("timestamp", "updated_at", "resolved_at", when_used="json")
    def serialize_timestamps(self, v: Optional[datetime]) -> Optional[str]:
        return to_iso_z(v) if v is not None else None

    def to_storage(self) -> Dict[str, Any]:
        """JSON-compatible dict with the persisted camelCase keys"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    class Config:
        frozen = True
        populate_by_name = True
        alias_generator = to_camel


# ============================================================
# Inputs
# ============================================================

class IncidentDraft(BaseModel):
    """
    Requestor submission.

    Required fields (summary, requestor_name) are checked by create_incident
    so the caller gets an ic_core_lib ValidationError, not a pydantic one.
    """

    requestor_name: str = ""
    requestor_email: str = ""
    channel_type: str = DEFAULT_CHANNEL
    store_name: str = ""
    store_id: str = ""
    region: str = ""
    affected_user_id: str = ""
    category: str = ""
    summary: str = ""
    description: str = ""
    attachment: Optional[str] = None
    impact_category: str = DEFAULT_IMPACT_CATEGORY
    impact_area: Optional[str] = ""

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class IncidentPatch(BaseModel):
    """
    Field-level edit.
    Only fields explicitly set are merged; id, timestamps and the audit
    trail are managed by the mutation engine and cannot be patched.
    """

    category: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    warroom: Optional[str] = None
    impact_category: Optional[str] = None
    impact_area: Optional[str] = None
    requestor_name: Optional[str] = None
    requestor_email: Optional[str] = None
    channel_type: Optional[str] = None
    store_name: Optional[str] = None
    store_id: Optional[str] = None
    region: Optional[str] = None
    affected_user_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None
    sme: Optional[str] = None
    fix_type: Optional[str] = None
    root_cause: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """Explicitly set fields, by attribute name"""
        return self.model_dump(exclude_unset=True)

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class IncidentFilters(BaseModel):
    """Query state; empty string fields are wildcards"""

    search: str = ""
    category: str = ""
    priority: str = ""
    status: str = ""
    warroom: str = ""
    impact_category: str = ""
    status_group: Optional[StatusGroup] = None

    @property
    def is_empty(self) -> bool:
        return not any([
            self.search, self.category, self.priority, self.status,
            self.warroom, self.impact_category, self.status_group,
        ])

    class Config:
        populate_by_name = True
        alias_generator = to_camel
