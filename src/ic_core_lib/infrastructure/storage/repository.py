"""
Incident repository.

Knows the storage keys and the JSON document layout:
- incident_command_data_v3: JSON array of incidents (camelCase keys)
- incident_command_lovs_v3: JSON object of LOV lists plus kanbanColumns

Loading is tolerant. A corrupt document is logged and treated as absent;
an individual incident record that fails validation is logged and skipped.
Skipped records are kept verbatim in skipped_records and written back after
the valid incidents on every save, so only clear_incidents removes them.
Saving is strict: backend failures surface as PersistenceError.
"""

import json
import logging
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ic_core_lib.infrastructure.storage.base import StorageBackend
from ic_core_lib.models import Incident, LOVData, default_lovs, merge_with_defaults

logger = logging.getLogger(__name__)

INCIDENTS_KEY = "incident_command_data_v3"
LOVS_KEY = "incident_command_lovs_v3"


class IncidentRepository:
    """Serialization layer between the incident store and a backend"""

    def __init__(self, backend: StorageBackend):
        self.backend = backend
        self.skipped_records: List[Any] = []

    def _load_document(self, key: str) -> Optional[Any]:
        raw = self.backend.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored document '{key}' is not valid JSON, ignoring it: {e}")
            return None

    def load_incidents(self) -> List[Incident]:
        """
        Stored incidents, in stored order.

        Returns:
            Empty list when nothing (or nothing readable) is stored

        Raises:
            PersistenceError: If the backend cannot be read
        """
        self.skipped_records = []
        document = self._load_document(INCIDENTS_KEY)
        if document is None:
            return []
        if not isinstance(document, list):
            logger.warning(f"Stored incidents are a {type(document).__name__}, expected a list; ignoring")
            return []

        incidents = []
        for position, record in enumerate(document):
            try:
                incidents.append(Incident.model_validate(record))
            except PydanticValidationError as e:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.warning(
                    f"Skipping invalid stored incident #{position} ({record_id}): "
                    f"{e.error_count()} field error(s)"
                )
                self.skipped_records.append(record)

        logger.debug(f"Loaded {len(incidents)} incidents from {self.backend.backend_name}")
        return incidents

    def save_incidents(self, incidents: Iterable[Incident]) -> None:
        """Write the incidents, followed by any records skipped on load."""
        payload = [incident.to_storage() for incident in incidents]
        self.backend.set_item(INCIDENTS_KEY, json.dumps([*payload, *self.skipped_records]))
        logger.debug(
            f"Saved {len(payload)} incidents (+{len(self.skipped_records)} unreadable kept) "
            f"to {self.backend.backend_name}"
        )

    def clear_incidents(self) -> None:
        self.backend.remove_item(INCIDENTS_KEY)
        self.skipped_records = []

    def load_lovs(self) -> LOVData:
        """Stored LOVs merged over the defaults (defaults when nothing is stored)."""
        document = self._load_document(LOVS_KEY)
        if document is None:
            return default_lovs()
        if not isinstance(document, dict):
            logger.warning("Stored LOV document is not an object; using defaults")
            return default_lovs()
        return merge_with_defaults(document)

    def save_lovs(self, lovs: LOVData) -> None:
        self.backend.set_item(LOVS_KEY, json.dumps(lovs.to_storage()))
