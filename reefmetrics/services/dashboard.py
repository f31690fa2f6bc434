"""
Dashboard Service

Loads an aquarium's measurements and its type's optimal ranges from the
reference data store and turns them into the dashboard payload.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from reefmetrics.core.status import (
    MeasurementAggregator,
    ParameterStatusView,
    format_relative_time,
    latest_per_parameter,
    most_recent_measurement_time,
    status_label,
)
from reefmetrics.utils import get_logger
from .reference_data import Aquarium, AquariumType, ReferenceDataStore

logger = get_logger(__name__)


def _card(view: ParameterStatusView, now: datetime) -> Dict[str, Any]:
    """Status row plus the display strings shown on a parameter card."""
    return {
        **view.to_dict(),
        "statusLabel": status_label(view.tier),
        "lastMeasured": (
            format_relative_time(view.measurement_time, now=now) if view.measurement_time else None
        ),
    }


@dataclass
class DashboardData:
    aquarium: Aquarium
    aquarium_type: AquariumType
    parameters: List[ParameterStatusView] = field(default_factory=list)
    last_measurement_time: Optional[datetime] = None
    summary: Dict[str, int] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aquarium": {
                "id": self.aquarium.id,
                "name": self.aquarium.name,
                "aquariumType": {"id": self.aquarium_type.id, "name": self.aquarium_type.name},
            },
            "parameters": [_card(p, self.generated_at) for p in self.parameters],
            "lastMeasurementTime": (
                self.last_measurement_time.isoformat() if self.last_measurement_time else None
            ),
            "summary": self.summary,
        }


class DashboardService:
    """Builds dashboards on demand; nothing is cached between requests."""

    def __init__(
        self,
        store: ReferenceDataStore,
        aggregator: Optional[MeasurementAggregator] = None,
    ):
        self.store = store
        self.aggregator = aggregator or MeasurementAggregator()

    def get_dashboard(self, aquarium_id: str, now: Optional[datetime] = None) -> DashboardData:
        """
        Args:
            aquarium_id: Aquarium to render
            now: Reference time for the "measured ... ago" strings (defaults to now)

        Raises:
            NotFoundError: unknown aquarium
        """
        aquarium = self.store.get_aquarium(aquarium_id)
        aquarium_type = self.store.get_aquarium_type(aquarium.aquarium_type_id)

        measurements = self.store.measurements_for_aquarium(aquarium_id)
        ranges = self.store.ranges_for_type(aquarium_type.id)

        views = self.aggregator.aggregate(measurements, ranges)
        latest = latest_per_parameter(measurements)

        logger.info(
            f"Dashboard [{aquarium.name}]: {len(measurements)} measurement(s), "
            f"{len(views)} parameter(s)"
        )
        return DashboardData(
            aquarium=aquarium,
            aquarium_type=aquarium_type,
            parameters=views,
            last_measurement_time=most_recent_measurement_time(latest.values()),
            summary=self.aggregator.summarise(views),
            generated_at=now or datetime.now(timezone.utc),
        )
