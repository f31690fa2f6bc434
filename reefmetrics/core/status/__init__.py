"""
Parameter Status Layer

Classifies water parameters against their optimal ranges and builds the
severity-ordered dashboard view.

Usage:
    from reefmetrics.core.status import classify, MeasurementAggregator

    result = classify(8.5, 7.8, 8.3)            # StatusResult(tier=NORMAL, ...)
    views = MeasurementAggregator().aggregate(measurements, ranges)
"""
from .base import (
    Tier,
    TrackedQuantity,
    OptimalRange,
    MeasurementRecord,
    StatusResult,
    ParameterStatusView,
)
from .classifier import (
    classify,
    calculate_deviation,
    tier_for_deviation,
    status_label,
    format_relative_time,
)
from .aggregator import (
    MeasurementAggregator,
    aggregate,
    latest_per_parameter,
    most_recent_measurement_time,
)

__all__ = [
    "Tier",
    "TrackedQuantity",
    "OptimalRange",
    "MeasurementRecord",
    "StatusResult",
    "ParameterStatusView",
    "classify",
    "calculate_deviation",
    "tier_for_deviation",
    "status_label",
    "format_relative_time",
    "MeasurementAggregator",
    "aggregate",
    "latest_per_parameter",
    "most_recent_measurement_time",
]
