"""
Parameter Status Layer - Base Types

Reference data (tracked quantities, optimal ranges), measurement records and
the computed per-parameter status view consumed by the dashboard.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from reefmetrics.utils import ValidationError


class Tier(str, Enum):
    """
    Severity of a measurement against its optimal range.

    CRITICAL – deviation of 20 % or more
    WARNING  – deviation of at least 10 % and below 20 %
    NORMAL   – deviation below 10 %
    NO_DATA  – nothing has been measured yet
    """
    NORMAL   = "normal"
    WARNING  = "warning"
    CRITICAL = "critical"
    NO_DATA  = "no_data"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    Tier.NORMAL:   "Normal",
    Tier.WARNING:  "Warning",
    Tier.CRITICAL: "Critical",
    Tier.NO_DATA:  "No Data",
}


@dataclass(frozen=True)
class TrackedQuantity:
    """A named, unit-bearing water parameter, e.g. Ca / Calcium / ppm."""
    id: str
    name: str          # short code shown on cards
    full_name: str
    unit: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "fullName": self.full_name,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class OptimalRange:
    """Acceptable [min, max] band of one parameter for one aquarium type."""
    aquarium_type_id: str
    parameter: TrackedQuantity
    min_value: float
    max_value: float

    def __post_init__(self):
        if math.isnan(self.min_value) or math.isnan(self.max_value):
            raise ValidationError("Optimal range bounds must be numbers", field="min_value")
        if self.min_value < 0:
            raise ValidationError(
                f"Optimal minimum for {self.parameter.name} must be non-negative",
                field="min_value",
            )
        if self.max_value <= self.min_value:
            raise ValidationError(
                f"Optimal maximum for {self.parameter.name} must be greater than the minimum",
                field="max_value",
            )

    @property
    def parameter_id(self) -> str:
        return self.parameter.id


@dataclass(frozen=True)
class MeasurementRecord:
    """One observed value. Never mutated by the status pipeline."""
    id: str
    aquarium_id: str
    parameter_id: str
    value: float
    measurement_time: datetime
    created_at: datetime
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "aquariumId": self.aquarium_id,
            "parameterId": self.parameter_id,
            "value": self.value,
            "measurementTime": self.measurement_time.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class StatusResult:
    """Tier plus deviation; ``deviation_pct`` is None exactly when tier is NO_DATA."""
    tier: Tier
    deviation_pct: Optional[float]


@dataclass
class ParameterStatusView:
    """Dashboard row for one parameter of one aquarium."""
    parameter: TrackedQuantity
    current_value: Optional[float]
    optimal_min: float
    optimal_max: float
    deviation_pct: Optional[float]
    tier: Tier
    measurement_time: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.parameter.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quantityId": self.parameter.id,
            "name": self.parameter.name,
            "fullName": self.parameter.full_name,
            "unit": self.parameter.unit,
            "currentValue": self.current_value,
            "optimalMin": self.optimal_min,
            "optimalMax": self.optimal_max,
            "deviationPct": self.deviation_pct,
            "tier": self.tier.value,
            "measurementTime": (
                self.measurement_time.isoformat() if self.measurement_time else None
            ),
        }
