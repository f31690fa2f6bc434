"""
Measurement Aggregator

Reduces an aquarium's measurement history to one status row per parameter
that has an optimal range for the aquarium's type.

Usage:
    from reefmetrics.core.status import MeasurementAggregator

    views = MeasurementAggregator().aggregate(measurements, ranges)
    for v in views:
        print(v.name, v.tier, v.deviation_pct)
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from reefmetrics.utils import get_logger
from .base import MeasurementRecord, OptimalRange, ParameterStatusView, Tier
from .classifier import classify

logger = get_logger(__name__)

# Tier sort order (lower = more severe → shown first on the dashboard)
_TIER_ORDER = {
    Tier.CRITICAL: 0,
    Tier.WARNING:  1,
    Tier.NORMAL:   2,
    Tier.NO_DATA:  3,
}


def latest_per_parameter(
    measurements: Iterable[MeasurementRecord],
) -> Dict[str, MeasurementRecord]:
    """
    Latest-wins reduction: keep the most recently created record per parameter.

    Records are folded in ``created_at`` descending order and the first
    record seen for a parameter is kept. The sort is stable, so records with
    equal ``created_at`` keep their input order; input already sorted newest
    first is therefore reduced exactly as given.
    """
    ordered = sorted(measurements, key=lambda m: m.created_at, reverse=True)

    latest: Dict[str, MeasurementRecord] = {}
    for record in ordered:
        if record.parameter_id not in latest:
            latest[record.parameter_id] = record
    return latest


def most_recent_measurement_time(
    measurements: Iterable[MeasurementRecord],
) -> Optional[datetime]:
    """Latest observation time across ``measurements``; None when empty."""
    times = [m.measurement_time for m in measurements]
    return max(times) if times else None


def _sort_key(view: ParameterStatusView):
    return (_TIER_ORDER.get(view.tier, 99), view.name)


class MeasurementAggregator:
    """
    Merges measurements with reference ranges into prioritised status views.

    Stateless; safe to call from multiple threads / concurrent requests.
    """

    def aggregate(
        self,
        measurements: Sequence[MeasurementRecord],
        ranges: Sequence[OptimalRange],
    ) -> List[ParameterStatusView]:
        """
        Build one ParameterStatusView per optimal range.

        Args:
            measurements: Measurement history of a single aquarium
            ranges: Optimal ranges for the aquarium's type

        Returns:
            Views sorted critical → warning → normal → no_data, then by
            parameter name. Parameters that were never measured are
            included with tier NO_DATA. Empty ``ranges`` gives an empty list.
        """
        if not ranges:
            return []

        latest = latest_per_parameter(measurements)
        views = [self._build_view(r, latest.get(r.parameter_id)) for r in ranges]
        views.sort(key=_sort_key)

        logger.debug(
            f"MeasurementAggregator: {len(views)} parameter(s), "
            f"{sum(1 for v in views if v.tier == Tier.CRITICAL)} critical, "
            f"{sum(1 for v in views if v.tier == Tier.WARNING)} warning"
        )
        return views

    @staticmethod
    def _build_view(
        optimal: OptimalRange,
        measurement: Optional[MeasurementRecord],
    ) -> ParameterStatusView:
        current_value = measurement.value if measurement else None
        status = classify(current_value, optimal.min_value, optimal.max_value)
        return ParameterStatusView(
            parameter=optimal.parameter,
            current_value=current_value,
            optimal_min=optimal.min_value,
            optimal_max=optimal.max_value,
            deviation_pct=status.deviation_pct,
            tier=status.tier,
            measurement_time=measurement.measurement_time if measurement else None,
        )

    @staticmethod
    def summarise(views: List[ParameterStatusView]) -> Dict[str, int]:
        """
        Count views per tier for the dashboard header.

        Example output:
        {"total": 7, "critical": 1, "warning": 2, "normal": 3, "no_data": 1}
        """
        summary = {"total": len(views)}
        for tier in Tier:
            summary[tier.value] = sum(1 for v in views if v.tier == tier)
        return summary


def aggregate(
    measurements: Sequence[MeasurementRecord],
    ranges: Sequence[OptimalRange],
) -> List[ParameterStatusView]:
    """Module-level shortcut for ``MeasurementAggregator().aggregate``."""
    return MeasurementAggregator().aggregate(measurements, ranges)
