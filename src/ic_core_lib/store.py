"""
Incident store.

IncidentStore is the single owner of the incident collection and the LOV
configuration. Every operation delegates to the pure functions in
ic_core_lib.core, swaps in a whole new tuple, then flushes it through the
repository. A failed flush is logged and kept in last_persistence_error; the
in-memory change stands.
"""

import logging
import re
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from ic_core_lib.core import (
    DashboardMetrics,
    KanbanColumn,
    WarroomLoad,
    add_requestor_comment,
    apply_edit,
    apply_filters,
    count_unmapped,
    create_incident,
    dashboard_metrics,
    export_csv,
    export_filename,
    find_requestor_tickets,
    generate_incident_id,
    generate_mock_incidents,
    known_smes,
    map_to_columns,
    move_to_column,
    quick_assign,
    quick_resolve,
    sme_worklist,
    warroom_matrix,
)
from ic_core_lib.core.seed import MOCK_ID_START
from ic_core_lib.exceptions import NotFoundError, PersistenceError
from ic_core_lib.infrastructure.storage import IncidentRepository, get_storage_backend
from ic_core_lib.models import (
    EditorRole,
    Incident,
    IncidentDraft,
    IncidentFilters,
    IncidentPatch,
    LOVData,
    default_lovs,
)

logger = logging.getLogger(__name__)

DEFAULT_SEED_COUNT = 200
MOCK_ID_PATTERN = re.compile(r"^INC-(\d+)$")


class IncidentStore:
    """
    In-memory incident collection backed by a repository.

    Example:
        ```python
        store = IncidentStore(IncidentRepository(MemoryStorage()))
        incident = store.create({"summary": "POS down", "requestorName": "Ana"})
        store.edit(incident.id, {"status": "Resolved"})
        ```
    """

    def __init__(
        self,
        repository: Optional[IncidentRepository] = None,
        autoload: bool = True,
        id_factory: Callable[[], str] = generate_incident_id,
    ):
        self.repository = repository or IncidentRepository(get_storage_backend())
        self.id_factory = id_factory
        self.last_persistence_error: Optional[PersistenceError] = None
        self._incidents: Tuple[Incident, ...] = ()
        self._lovs: LOVData = default_lovs()

        if autoload:
            self.load()

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def incidents(self) -> Tuple[Incident, ...]:
        """All incidents in store order (most recently created first)"""
        return self._incidents

    @property
    def lovs(self) -> LOVData:
        return self._lovs

    def __len__(self) -> int:
        return len(self._incidents)

    def load(self) -> None:
        """Replace in-memory state with what the repository holds."""
        try:
            incidents = self.repository.load_incidents()
            lovs = self.repository.load_lovs()
        except PersistenceError as e:
            logger.error(f"Failed to load incident data, starting empty: {e}")
            self.last_persistence_error = e
            return

        self._incidents = tuple(incidents)
        self._lovs = lovs
        logger.info(f"Loaded {len(incidents)} incidents")

    def get(self, incident_id: str) -> Optional[Incident]:
        return next((i for i in self._incidents if i.id == incident_id), None)

    def _require(self, incident_id: str) -> Incident:
        incident = self.get(incident_id)
        if incident is None:
            raise NotFoundError(
                f"Incident not found: {incident_id}",
                context={"incident_id": incident_id},
            )
        return incident

    # ------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------

    def _persist(self) -> bool:
        try:
            self.repository.save_incidents(self._incidents)
        except PersistenceError as e:
            logger.error(f"Failed to persist {len(self._incidents)} incidents: {e}")
            self.last_persistence_error = e
            return False
        self.last_persistence_error = None
        return True

    def _persist_lovs(self) -> bool:
        try:
            self.repository.save_lovs(self._lovs)
        except PersistenceError as e:
            logger.error(f"Failed to persist LOV configuration: {e}")
            self.last_persistence_error = e
            return False
        self.last_persistence_error = None
        return True

    def _replace(self, updated: Incident) -> Incident:
        self._incidents = tuple(updated if i.id == updated.id else i for i in self._incidents)
        self._persist()
        return updated

    # ------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------

    def _unique_id(self) -> str:
        taken = {i.id for i in self._incidents}
        new_id = self.id_factory()
        while new_id in taken:
            logger.warning(f"Generated incident id {new_id} already exists, regenerating")
            new_id = self.id_factory()
        return new_id

    def create(self, draft: Union[IncidentDraft, Mapping[str, Any]]) -> Incident:
        """Broadcast a new incident; it goes to the front of the store."""
        incident = create_incident(draft, lovs=self._lovs, id_factory=self._unique_id)
        self._incidents = (incident, *self._incidents)
        self._persist()
        return incident

    def edit(
        self,
        incident_id: str,
        patch: Optional[Union[IncidentPatch, Mapping[str, Any]]] = None,
        comment: Optional[str] = None,
        editor: Union[EditorRole, str] = EditorRole.WARROOM,
        comment_author: Optional[Union[EditorRole, str]] = None,
    ) -> Incident:
        """
        Edit an incident by id.

        Raises:
            NotFoundError: Unknown incident id (store unchanged)
            ValidationError: Invalid patch (store unchanged)
        """
        original = self._require(incident_id)
        return self._replace(
            apply_edit(original, patch, comment=comment, editor=editor, comment_author=comment_author)
        )

    def delete(self, incident_id: str) -> Incident:
        """Hard delete; there is no undo."""
        removed = self._require(incident_id)
        self._incidents = tuple(i for i in self._incidents if i.id != incident_id)
        logger.info(f"Deleted incident {incident_id}")
        self._persist()
        return removed

    def move(self, incident_id: str, column_id: str) -> Incident:
        """Kanban drop of an incident onto a column."""
        original = self._require(incident_id)
        moved = move_to_column(original, column_id, self._lovs.kanban_columns)
        if moved is original:
            return original
        return self._replace(moved)

    def quick_assign(self, incident_id: str, warroom: str, sme: str, note: str = "") -> Incident:
        original = self._require(incident_id)
        return self._replace(quick_assign(original, warroom, sme, note))

    def add_requestor_comment(self, incident_id: str, text: str) -> Incident:
        original = self._require(incident_id)
        return self._replace(add_requestor_comment(original, text))

    def resolve_from_worklist(self, incident_id: str) -> Incident:
        original = self._require(incident_id)
        return self._replace(quick_resolve(original))

    def seed(self, count: int = DEFAULT_SEED_COUNT) -> List[Incident]:
        """Prepend generated mock incidents, numbered past any existing mock id."""
        mock_numbers = [
            int(match.group(1))
            for match in (MOCK_ID_PATTERN.match(i.id) for i in self._incidents)
            if match
        ]
        start = max(mock_numbers) + 1 if mock_numbers else MOCK_ID_START

        generated = generate_mock_incidents(count, lovs=self._lovs, start_number=start)
        self._incidents = (*generated, *self._incidents)
        logger.info(f"Seeded {count} mock incidents (INC-{start} onwards)")
        self._persist()
        return generated

    def clear_all(self) -> None:
        """Drop every incident and the stored incident document."""
        self._incidents = ()
        logger.info("Cleared all incident data")
        try:
            self.repository.clear_incidents()
        except PersistenceError as e:
            logger.error(f"Failed to clear stored incidents: {e}")
            self.last_persistence_error = e

    # ------------------------------------------------------------
    # LOV configuration
    # ------------------------------------------------------------

    def update_lovs(self, lovs: LOVData) -> LOVData:
        self._lovs = lovs
        self._persist_lovs()
        return lovs

    def add_lov_value(self, field: str, value: str) -> LOVData:
        return self.update_lovs(self._lovs.add_value(field, value))

    def remove_lov_value(self, field: str, value: str) -> LOVData:
        return self.update_lovs(self._lovs.remove_value(field, value))

    # ------------------------------------------------------------
    # Views
    # ------------------------------------------------------------

    def query(self, filters: Optional[Union[IncidentFilters, Mapping[str, Any]]] = None) -> List[Incident]:
        return apply_filters(self._incidents, filters)

    def board(self, show_unmapped: bool = True) -> List[KanbanColumn]:
        return map_to_columns(
            self._incidents,
            self._lovs.kanban_columns,
            statuses=self._lovs.statuses,
            show_unmapped=show_unmapped,
        )

    def unmapped_count(self) -> int:
        return count_unmapped(self._incidents, self._lovs.kanban_columns)

    def requestor_tickets(self, query: str) -> List[Incident]:
        return find_requestor_tickets(self._incidents, query)

    def worklist(self, sme_name: str, resolved: bool = False) -> List[Incident]:
        return sme_worklist(self._incidents, sme_name, resolved=resolved)

    def known_smes(self) -> List[str]:
        return known_smes(self._incidents)

    def metrics(self) -> DashboardMetrics:
        return dashboard_metrics(self._incidents)

    def warroom_load(self) -> List[WarroomLoad]:
        return warroom_matrix(self._incidents, self._lovs.warrooms)

    def export_csv(self, filters: Optional[Union[IncidentFilters, Mapping[str, Any]]] = None) -> str:
        """CSV of the (optionally filtered) incidents, newest-first."""
        return export_csv(self.query(filters))

    def export_filename(self) -> str:
        return export_filename()
