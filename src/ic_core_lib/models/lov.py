"""List-of-values (LOV) registry.

LOVData holds the configurable enumerations backing every dropdown field plus
the kanban column configuration. Stored LOV data from older saves may lack
newer keys, so loading always goes through merge_with_defaults(), an explicit
field-by-field default fill.
"""

import logging
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ic_core_lib.exceptions import ValidationError
from ic_core_lib.models.incident import DEFAULT_PRIORITY

logger = logging.getLogger(__name__)


class KanbanColumnConfig(BaseModel):
    """Maps one board column to a set of statuses"""

    id: str = Field(description="Stable column identifier (droppable id)", min_length=1)
    title: str = Field(description="Display title")
    statuses: List[str] = Field(
        default_factory=list,
        description="Statuses shown in this column; the first one is the drop target status",
    )

    class Config:
        frozen = True


class LOVData(BaseModel):
    """Valid values for each classification field"""

    categories: List[str] = Field(default_factory=list)
    priorities: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)
    warrooms: List[str] = Field(default_factory=list)
    impact_categories: List[str] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)
    regions: List[str] = Field(default_factory=list)
    kanban_columns: List[KanbanColumnConfig] = Field(default_factory=list)

    @property
    def lowest_priority(self) -> str:
        """Default priority for untriaged incidents (last configured entry)"""
        return self.priorities[-1] if self.priorities else DEFAULT_PRIORITY

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def add_value(self, field: str, value: str) -> "LOVData":
        """Return a copy with value appended to the given list field.

        Blank values and duplicates leave the list unchanged.

        Raises:
            ValidationError: If field is not an editable list
        """
        current = self._editable_list(field)
        value = value.strip()
        if not value or value in current:
            return self
        return self.model_copy(update={field: [*current, value]})

    def remove_value(self, field: str, value: str) -> "LOVData":
        """Return a copy without value in the given list field.

        Raises:
            ValidationError: If field is not an editable list
        """
        current = self._editable_list(field)
        return self.model_copy(update={field: [v for v in current if v != value]})

    def _editable_list(self, field: str) -> List[str]:
        if field not in EDITABLE_LOV_FIELDS:
            raise ValidationError(
                f"Unknown LOV field: {field}",
                context={"field": field, "editable": list(EDITABLE_LOV_FIELDS)},
            )
        return getattr(self, field)

    class Config:
        populate_by_name = True
        alias_generator = to_camel


EDITABLE_LOV_FIELDS = (
    "categories",
    "priorities",
    "statuses",
    "warrooms",
    "impact_categories",
    "channels",
    "regions",
)


def default_lovs() -> LOVData:
    """Built-in LOV configuration used when nothing has been stored yet."""
    return LOVData(
        categories=[
            "Login", "Onboarding", "Order Management", "Inventory Management",
            "SFA", "Reporting/Batch", "Sell Through", "Infra / 3PP",
            "Migration", "Sell In", "Activation", "Channel", "Requirement Gap",
        ],
        priorities=["P1: Critical", "P2: High", "P3: Medium", "P4: Low"],
        statuses=[
            "New", "Acknowledged", "In Progress", "Resolved", "Closed",
            "ReOpen", "Return to BAU", "Outage", "Duplicate",
            "Invalid Issue", "Post Hypercare", "Need more info",
        ],
        warrooms=[
            "Onboarding", "Order Management", "SFA", "Migration",
            "Infra", "Reporting/Batch", "3PPs/Integration",
        ],
        impact_categories=["Customer", "Revenue", "Operation", "Finance", "Batch"],
        channels=["Email", "Phone", "Slack", "Portal", "Automated Alert"],
        regions=["North America", "EMEA", "APAC", "LATAM"],
        kanban_columns=[
            KanbanColumnConfig(
                id="col-new",
                title="New / Triage",
                statuses=["New", "ReOpen", "Need more info", "Outage"],
            ),
            KanbanColumnConfig(id="col-assigned", title="Assigned", statuses=["Acknowledged"]),
            KanbanColumnConfig(id="col-progress", title="In Progress", statuses=["In Progress"]),
            KanbanColumnConfig(
                id="col-done",
                title="Done",
                statuses=[
                    "Resolved", "Closed", "Return to BAU", "Duplicate",
                    "Invalid Issue", "Post Hypercare",
                ],
            ),
        ],
    )


def merge_with_defaults(stored: Mapping[str, Any]) -> LOVData:
    """Fill stored LOV data field by field from the defaults.

    Rules:
    - A list field present in stored data (even empty) is kept as stored
    - A list field missing or malformed takes the default
    - kanbanColumns missing, empty or malformed takes the default columns

    Args:
        stored: Raw stored LOV mapping (camelCase or snake_case keys)

    Returns:
        Fully populated LOVData
    """
    defaults = default_lovs()
    merged: Dict[str, Any] = {}

    for field in EDITABLE_LOV_FIELDS:
        raw = _lookup(stored, field)
        if isinstance(raw, list) and all(isinstance(v, str) for v in raw):
            merged[field] = list(raw)
        else:
            if raw is not None:
                logger.warning(f"Ignoring malformed stored LOV field '{field}'")
            merged[field] = list(getattr(defaults, field))

    merged["kanban_columns"] = _merge_columns(_lookup(stored, "kanban_columns"), defaults)
    return LOVData(**merged)


def _lookup(stored: Mapping[str, Any], field: str) -> Any:
    alias = to_camel(field)
    if alias in stored:
        return stored[alias]
    return stored.get(field)


def _merge_columns(raw: Any, defaults: LOVData) -> List[KanbanColumnConfig]:
    if not raw:
        return list(defaults.kanban_columns)
    try:
        return [KanbanColumnConfig.model_validate(col) for col in raw]
    except (PydanticValidationError, TypeError) as e:
        logger.warning(f"Ignoring malformed stored kanban columns: {e}")
        return list(defaults.kanban_columns)
