"""CSV export of the incident store."""

import csv
import io
from datetime import datetime
from typing import Iterable, List, Optional

from ic_core_lib.models import Incident, to_iso_z, utc_now

CSV_HEADERS = [
    "ID", "Timestamp", "Status", "Priority", "Warroom", "Category",
    "Summary", "Requestor Name", "Store Name", "Region", "SME", "Resolved At",
]


def incident_row(incident: Incident) -> List[str]:
    return [
        incident.id,
        to_iso_z(incident.timestamp),
        incident.status,
        incident.priority,
        incident.warroom,
        incident.category,
        incident.summary,
        incident.requestor_name,
        incident.store_name,
        incident.region,
        incident.sme,
        to_iso_z(incident.resolved_at) if incident.resolved_at else "",
    ]


def export_csv(incidents: Iterable[Incident]) -> str:
    """
    Flat CSV rendering of the incidents, in the given order.

    Fields containing the delimiter, quotes or newlines are quoted and
    escaped, so any CSV reader recovers the original strings. An empty input
    yields the header line only.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(incident_row(incident) for incident in incidents)
    return buffer.getvalue()


def export_filename(now: Optional[datetime] = None) -> str:
    """Download name, e.g. 'incident_export_2024-05-01.csv'"""
    return f"incident_export_{(now or utc_now()).date().isoformat()}.csv"
