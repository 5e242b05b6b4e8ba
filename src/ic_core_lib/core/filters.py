"""Filter/query engine.

Composes the IncidentFilters predicates (logical AND) and always returns
incidents newest-first. Python's sort is stable, so incidents sharing a
timestamp keep their store order.
"""

import logging
from typing import Callable, Iterable, List, Optional, Union

from ic_core_lib.core.classifier import classify
from ic_core_lib.models import Incident, IncidentFilters, TERMINAL_STATUSES

logger = logging.getLogger(__name__)

Predicate = Callable[[Incident], bool]


def newest_first(incidents: Iterable[Incident]) -> List[Incident]:
    """Sort by creation timestamp, descending, stable for ties."""
    return sorted(incidents, key=lambda i: i.timestamp, reverse=True)


def build_predicates(filters: IncidentFilters) -> List[Predicate]:
    """
    Translate filters into predicates.

    - search: case-insensitive substring of summary OR id
    - category/status/warroom/impact_category: exact match when non-empty
    - priority: substring containment, so "P1" matches "P1: Critical"
    - status_group: incident status must classify into the group
    """
    predicates: List[Predicate] = []

    if filters.search:
        needle = filters.search.lower()
        predicates.append(
            lambda i: needle in i.summary.lower() or needle in i.id.lower()
        )

    if filters.category:
        predicates.append(lambda i: i.category == filters.category)

    if filters.priority:
        predicates.append(lambda i: filters.priority in i.priority)

    if filters.status:
        predicates.append(lambda i: i.status == filters.status)

    if filters.warroom:
        predicates.append(lambda i: i.warroom == filters.warroom)

    if filters.impact_category:
        predicates.append(lambda i: i.impact_category == filters.impact_category)

    if filters.status_group is not None:
        group = filters.status_group
        predicates.append(lambda i: classify(i) == group)

    return predicates


def apply_filters(
    incidents: Iterable[Incident],
    filters: Optional[Union[IncidentFilters, dict]] = None,
) -> List[Incident]:
    """
    Filtered, newest-first view of the incidents.

    Args:
        incidents: Incidents in store order
        filters: IncidentFilters (or a mapping of its fields); None = no filter

    Returns:
        New list; the input is never modified
    """
    if filters is None:
        filters = IncidentFilters()
    elif not isinstance(filters, IncidentFilters):
        filters = IncidentFilters.model_validate(filters)

    predicates = build_predicates(filters)
    matched = [i for i in incidents if all(p(i) for p in predicates)]

    logger.debug(f"Filter matched {len(matched)} incidents ({len(predicates)} predicates)")
    return newest_first(matched)


def find_requestor_tickets(incidents: Iterable[Incident], query: str) -> List[Incident]:
    """Tickets whose requestor email or name contains the query (case-insensitive)."""
    needle = query.strip().lower()
    if not needle:
        return []
    return newest_first(
        i for i in incidents
        if needle in i.requestor_email.lower() or needle in i.requestor_name.lower()
    )


def sme_worklist(
    incidents: Iterable[Incident],
    sme_name: str,
    resolved: bool = False,
) -> List[Incident]:
    """
    Incidents assigned to an SME.

    Args:
        incidents: Incidents in store order
        sme_name: SME name, matched case-insensitively
        resolved: True for the Resolved/Closed tab, False for active tasks

    Returns:
        Matching incidents in store order
    """
    name = sme_name.strip().lower()
    if not name:
        return []
    return [
        i for i in incidents
        if i.sme.lower() == name and (i.status in TERMINAL_STATUSES) == resolved
    ]


def known_smes(incidents: Iterable[Incident]) -> List[str]:
    """Distinct non-empty SME names, first-seen order."""
    return list(dict.fromkeys(i.sme for i in incidents if i.sme))
