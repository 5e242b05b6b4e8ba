"""Mutation/audit engine.

Every mutation returns a NEW Incident (models are frozen) with:
- the original audit entries untouched and new entries appended
- updated_at refreshed
- resolved_at set on the first transition into Resolved/Closed and kept
  forever after ("first resolution time"), even if the status later leaves
  the terminal states
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from ic_core_lib.exceptions import ValidationError
from ic_core_lib.models import (
    DEFAULT_PRIORITY,
    EditorRole,
    Incident,
    IncidentDraft,
    IncidentPatch,
    IncidentUpdate,
    LOVData,
    STATUS_NEW,
    STATUS_RESOLVED,
    TERMINAL_STATUSES,
    UNASSIGNED_WARROOM,
    UpdateType,
    utc_now,
)

logger = logging.getLogger(__name__)

# Decoded size limit for image attachments
ATTACHMENT_MAX_BYTES = 1_000_000

# Fields whose change produces a status_change entry, in message order
AUDITED_FIELDS = (
    ("status", "Status"),
    ("priority", "Priority"),
    ("warroom", "Warroom"),
    ("sme", "SME"),
)

# Patch fields that may be explicitly cleared to None
NULLABLE_FIELDS = frozenset({"impact_area", "attachment"})

CREATED_VIA_PORTAL = "Incident created via Portal"
RESOLVED_VIA_WORKLIST = "Marked as Resolved via Worklist"

Role = Union[EditorRole, str]


def generate_incident_id() -> str:
    """New incident identifier, e.g. 'INC-3F9A0C12BE'."""
    return f"INC-{uuid4().hex[:10].upper()}"


def attachment_size(attachment: str) -> int:
    """Decoded byte size of a base64 payload, with or without a data URL prefix."""
    payload = attachment
    if attachment.startswith("data:") and "," in attachment:
        payload = attachment.split(",", 1)[1]
    payload = payload.strip()
    padding = len(payload) - len(payload.rstrip("="))
    return max(len(payload) * 3 // 4 - padding, 0)


def make_entry(now: datetime, user: Role, message: str, entry_type: UpdateType) -> IncidentUpdate:
    return IncidentUpdate(
        timestamp=now,
        user=user.value if isinstance(user, EditorRole) else user,
        message=message,
        type=entry_type,
    )


def create_incident(
    draft: Union[IncidentDraft, Mapping[str, Any]],
    lovs: Optional[LOVData] = None,
    now: Optional[datetime] = None,
    id_factory=generate_incident_id,
) -> Incident:
    """
    Create a new incident from a requestor submission.

    Triage fields get their canonical defaults: status New, the lowest
    configured priority, warroom Unassigned, no SME. The audit trail starts
    with exactly one creation entry authored by System.

    Args:
        draft: Submission (IncidentDraft or mapping of its fields)
        lovs: LOV configuration providing the lowest priority (optional)
        now: Creation instant (default: current UTC time)
        id_factory: Callable producing the new incident id

    Returns:
        The new Incident

    Raises:
        ValidationError: If summary or requestor name is blank, or the
            attachment is too large
    """
    if not isinstance(draft, IncidentDraft):
        draft = IncidentDraft.model_validate(draft)

    missing = [
        label
        for field, label in (("summary", "Summary"), ("requestor_name", "Requestor Name"))
        if not getattr(draft, field).strip()
    ]
    if missing:
        raise ValidationError(
            f"Please fill in the required fields: {', '.join(missing)}",
            context={"missing": missing},
        )

    if draft.attachment:
        size = attachment_size(draft.attachment)
        if size > ATTACHMENT_MAX_BYTES:
            raise ValidationError(
                f"Attachment is too large ({size:,} bytes, max {ATTACHMENT_MAX_BYTES:,})",
                context={"size": size, "max_size": ATTACHMENT_MAX_BYTES},
            )

    now = now or utc_now()
    incident = Incident(
        **draft.model_dump(),
        id=id_factory(),
        status=STATUS_NEW,
        priority=lovs.lowest_priority if lovs else DEFAULT_PRIORITY,
        warroom=UNASSIGNED_WARROOM,
        sme="",
        fix_type="",
        root_cause="",
        timestamp=now,
        updated_at=now,
        updates=[make_entry(now, EditorRole.SYSTEM, CREATED_VIA_PORTAL, UpdateType.CREATION)],
    )

    logger.info(f"Created incident {incident.id}: {incident.summary!r}")
    return incident


def apply_edit(
    original: Incident,
    patch: Optional[Union[IncidentPatch, Mapping[str, Any]]] = None,
    comment: Optional[str] = None,
    editor: Role = EditorRole.WARROOM,
    comment_author: Optional[Role] = None,
    now: Optional[datetime] = None,
) -> Incident:
    """
    Merge a patch over an incident and record the audit trail.

    Audit rules:
    - One status_change entry (by editor) listing every changed field among
      Status, Priority, Warroom, SME as "Field: newValue", comma separated
    - One comment entry (by comment_author, default editor) when the comment
      is non-blank; the text is stored exactly as given
    - No entries at all when nothing audited changed and there is no comment

    Args:
        original: Incident before the edit
        patch: Fields to change (IncidentPatch or mapping, camelCase or snake_case)
        comment: Optional free-text comment
        editor: Role performing the edit (Warroom, SME, Admin, ...)
        comment_author: Author recorded on the comment entry
        now: Edit instant (default: current UTC time)

    Returns:
        The updated Incident (same id)

    Raises:
        ValidationError: If the patch blanks the summary or yields an invalid incident
    """
    if patch is None:
        patch = IncidentPatch()
    elif not isinstance(patch, IncidentPatch):
        patch = IncidentPatch.model_validate(patch)

    changes = {
        field: value
        for field, value in patch.changes().items()
        if value is not None or field in NULLABLE_FIELDS
    }
    if "summary" in changes and not changes["summary"].strip():
        raise ValidationError("Summary cannot be empty", context={"incident_id": original.id})

    now = now or utc_now()
    data = original.model_dump()
    data.update(changes)

    entries: List[IncidentUpdate] = []

    changed = [
        f"{label}: {data[field]}"
        for field, label in AUDITED_FIELDS
        if data[field] != getattr(original, field)
    ]
    if changed:
        entries.append(make_entry(now, editor, ", ".join(changed), UpdateType.STATUS_CHANGE))

    if comment and comment.strip():
        entries.append(make_entry(now, comment_author or editor, comment, UpdateType.COMMENT))

    updated = _finalize(original, data, entries, now)
    logger.debug(f"Edited incident {original.id}: {len(entries)} audit entries appended")
    return updated


def add_requestor_comment(
    incident: Incident,
    text: str,
    now: Optional[datetime] = None,
) -> Incident:
    """Requestor follow-up on their own ticket."""
    if not text or not text.strip():
        raise ValidationError("Comment cannot be empty", context={"incident_id": incident.id})
    return apply_edit(incident, comment=text, editor=EditorRole.REQUESTOR, now=now)


def quick_resolve(incident: Incident, now: Optional[datetime] = None) -> Incident:
    """SME worklist one-click resolution."""
    return apply_edit(
        incident,
        IncidentPatch(status=STATUS_RESOLVED),
        comment=RESOLVED_VIA_WORKLIST,
        editor=EditorRole.SME,
        comment_author=EditorRole.SYSTEM,
        now=now,
    )


def quick_assign(
    incident: Incident,
    warroom: str,
    sme: str,
    note: str = "",
    now: Optional[datetime] = None,
) -> Incident:
    """
    Board quick edit: reassign warroom and SME, optionally with a note.

    Records a Warroom comment for a non-blank note, then one assignment entry
    per changed field ("Warroom changed to X", "SME changed to Y").
    """
    now = now or utc_now()
    data = incident.model_dump()
    data.update(warroom=warroom, sme=sme)

    entries: List[IncidentUpdate] = []
    if note and note.strip():
        entries.append(make_entry(now, EditorRole.WARROOM, note, UpdateType.COMMENT))
    if warroom != incident.warroom:
        entries.append(
            make_entry(now, EditorRole.WARROOM, f"Warroom changed to {warroom}", UpdateType.ASSIGNMENT)
        )
    if sme != incident.sme:
        entries.append(
            make_entry(now, EditorRole.WARROOM, f"SME changed to {sme}", UpdateType.ASSIGNMENT)
        )

    return _finalize(incident, data, entries, now)


def _finalize(
    original: Incident,
    data: Dict[str, Any],
    entries: List[IncidentUpdate],
    now: datetime,
) -> Incident:
    """Append entries, refresh updated_at, apply the sticky resolved_at rule."""
    data["updates"] = [*original.updates, *entries]
    data["updated_at"] = now
    if data["status"] in TERMINAL_STATUSES and original.resolved_at is None:
        data["resolved_at"] = now

    try:
        return Incident.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid update for incident {original.id}: {e.error_count()} field error(s)",
            context={"incident_id": original.id, "errors": e.errors(include_url=False)},
        ) from e
