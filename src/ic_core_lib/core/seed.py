"""Mock incident generator for demos and load testing."""

import logging
import random
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from ic_core_lib.models import (
    EditorRole,
    Incident,
    LOVData,
    TERMINAL_STATUSES,
    UpdateType,
    default_lovs,
    utc_now,
)
from ic_core_lib.core.mutations import make_entry

logger = logging.getLogger(__name__)

MOCK_ID_START = 100000
MOCK_WINDOW = timedelta(days=30)
MOCK_RESOLUTION_WINDOW = timedelta(hours=48)
CREATED_VIA_SEED = "Incident created via Mock Seed"

# (upper bound of the random draw, priority)
PRIORITY_WEIGHTS = (
    (0.05, "P1: Critical"),
    (0.20, "P2: High"),
    (0.50, "P3: Medium"),
    (1.00, "P4: Low"),
)

MOCK_SUMMARIES = [
    "Login failure for multiple users",
    "Slow dashboard loading times",
    "Inventory sync mismatch",
    "POS Terminal frozen",
    "Payment gateway timeout",
    "Order status not updating",
    "Report generation failed",
    "VPN connection unstable",
    "Data migration stuck at 90%",
    "User permission denied error",
]
MOCK_NAMES = ["Alice Johnson", "Bob Smith", "Charlie Brown", "Diana Prince", "Evan Wright"]
MOCK_STORES = ["Flagship NYC", "Mall of America", "Downtown LA", "London Oxford St", "Online Store"]
MOCK_SMES = ["Tech Support A", "Network Team", "Database Admin", "App Dev Lead", ""]


def _pick(rng: random.Random, values: Sequence[str]) -> str:
    return rng.choice(values) if values else "Unknown"


def _weighted_priority(rng: random.Random) -> str:
    draw = rng.random()
    for bound, priority in PRIORITY_WEIGHTS:
        if draw < bound:
            return priority
    return PRIORITY_WEIGHTS[-1][1]


def generate_mock_incidents(
    count: int,
    lovs: Optional[LOVData] = None,
    start_number: int = MOCK_ID_START,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[Incident]:
    """
    Generate realistic-looking incidents.

    Category, status, warroom, impact category, channel and region are drawn
    from the LOVs; priority is weighted towards P4. Creation times fall
    within the last 30 days and terminal incidents get a resolution time up
    to 48 hours later (never in the future).

    Args:
        count: Number of incidents
        lovs: LOV configuration (default: built-in defaults)
        start_number: First mock id number (INC-<start_number>)
        rng: Random source, for reproducible output
        now: Reference instant (default: current UTC time)

    Returns:
        Incidents sorted newest-first
    """
    lovs = lovs or default_lovs()
    rng = rng or random.Random()
    now = now or utc_now()

    incidents = []
    for i in range(count):
        created = now - MOCK_WINDOW * rng.random()
        status = _pick(rng, lovs.statuses)
        resolved_at = None
        if status in TERMINAL_STATUSES:
            resolved_at = min(created + MOCK_RESOLUTION_WINDOW * rng.random(), now)

        warroom = _pick(rng, lovs.warrooms)
        region = _pick(rng, lovs.regions)
        email_name = _pick(rng, MOCK_NAMES).split(" ")[0].lower()

        incidents.append(
            Incident(
                id=f"INC-{start_number + i}",
                category=_pick(rng, lovs.categories),
                priority=_weighted_priority(rng),
                status=status,
                warroom=warroom,
                impact_category=_pick(rng, lovs.impact_categories),
                impact_area=f"Zone {rng.randrange(10)}",
                requestor_name=_pick(rng, MOCK_NAMES),
                requestor_email=f"{email_name}@example.com",
                channel_type=_pick(rng, lovs.channels),
                store_name=_pick(rng, MOCK_STORES),
                store_id=f"ST-{rng.randrange(500)}",
                region=region,
                affected_user_id=f"EMP-{rng.randrange(9000)}",
                summary=f"{_pick(rng, MOCK_SUMMARIES)} - {region}",
                description=(
                    "Automated mock incident generated for testing. "
                    f"Issue observed in {warroom} domain."
                ),
                sme=_pick(rng, MOCK_SMES) if rng.random() > 0.3 else "",
                fix_type="",
                root_cause="",
                timestamp=created,
                updated_at=created,
                resolved_at=resolved_at,
                updates=[make_entry(created, EditorRole.SYSTEM, CREATED_VIA_SEED, UpdateType.CREATION)],
            )
        )

    logger.debug(f"Generated {count} mock incidents starting at INC-{start_number}")
    return sorted(incidents, key=lambda inc: inc.timestamp, reverse=True)
