"""
Parameter Status Classifier

Turns a measured value and an optimal range into a severity tier.

Deviation is measured against the bound that was violated:
    below range:  (min - value) / min * 100
    above range:  (value - max) / max * 100
    inside range (bounds inclusive): 0

Tiers are half-open bands on the deviation:
    [0, 10)   normal
    [10, 20)  warning
    [20, ∞)   critical
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from reefmetrics.utils import ValidationError
from .base import StatusResult, Tier

WARNING_THRESHOLD_PCT = 10.0
CRITICAL_THRESHOLD_PCT = 20.0


def calculate_deviation(current_value: float, optimal_min: float, optimal_max: float) -> float:
    """
    Percentage by which ``current_value`` lies outside [optimal_min, optimal_max].

    Precondition: ``optimal_min > 0`` whenever the value can fall below the
    range. A below-range value with a non-positive minimum has no meaningful
    percentage and raises ValidationError. Reference ranges guarantee
    ``optimal_min >= 0`` and measurements are non-negative, so this only
    happens with a negative reading against a zero minimum.
    """
    if current_value < optimal_min:
        if optimal_min <= 0:
            raise ValidationError(
                "Cannot compute a below-range deviation against a non-positive minimum",
                field="optimal_min",
                details={"current_value": current_value, "optimal_min": optimal_min},
            )
        return (optimal_min - current_value) / optimal_min * 100

    if current_value > optimal_max:
        return (current_value - optimal_max) / optimal_max * 100

    # NaN compares false against both bounds and lands here
    return 0.0


def tier_for_deviation(deviation_pct: float) -> Tier:
    if deviation_pct < WARNING_THRESHOLD_PCT:
        return Tier.NORMAL
    if deviation_pct < CRITICAL_THRESHOLD_PCT:
        return Tier.WARNING
    return Tier.CRITICAL


def classify(
    current_value: Optional[float],
    optimal_min: float,
    optimal_max: float,
) -> StatusResult:
    """
    Classify a value against its optimal range.

    Args:
        current_value: Latest measured value, or None if never measured
        optimal_min: Lower bound of the optimal range
        optimal_max: Upper bound of the optimal range

    Returns:
        StatusResult; NO_DATA with a None deviation when there is no value.
    """
    if current_value is None:
        return StatusResult(tier=Tier.NO_DATA, deviation_pct=None)

    deviation = calculate_deviation(current_value, optimal_min, optimal_max)
    return StatusResult(tier=tier_for_deviation(deviation), deviation_pct=deviation)


def status_label(tier: Tier) -> str:
    return tier.label


def format_relative_time(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """
    Human-friendly age of a measurement, e.g. "3 hours ago".

    Readings four weeks old or more are shown as a plain date. Naive
    datetimes are treated as UTC.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - timestamp).total_seconds())
    if seconds < 60:
        return "just now"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} {'minute' if minutes == 1 else 'minutes'} ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours} {'hour' if hours == 1 else 'hours'} ago"

    days = hours // 24
    if days < 7:
        return f"{days} {'day' if days == 1 else 'days'} ago"

    weeks = days // 7
    if weeks < 4:
        return f"{weeks} {'week' if weeks == 1 else 'weeks'} ago"

    return timestamp.date().isoformat()
