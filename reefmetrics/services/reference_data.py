"""
Reference Data Store

In-memory source of tracked parameters, aquarium types, default optimal
ranges, aquariums and their measurements (replace with database in
production). Seeded with the seven reef parameters and the default ranges
for the four aquarium types.

All lookups return immutable records; ownership and authorisation are the
caller's concern.
"""
from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from reefmetrics.core.status import MeasurementRecord, OptimalRange, TrackedQuantity
from reefmetrics.utils import get_logger, ConflictError, NotFoundError, ValidationError

logger = get_logger(__name__)

_ID_NAMESPACE = uuid.UUID("6f1c1a52-3b7e-4c55-9a8e-2d4f0b7c9e11")


def stable_id(kind: str, name: str) -> str:
    """Deterministic id for seeded rows, e.g. stable_id("parameter", "Ca")."""
    return str(uuid.uuid5(_ID_NAMESPACE, f"{kind}:{name}"))


@dataclass(frozen=True)
class AquariumType:
    id: str
    name: str
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class Aquarium:
    id: str
    name: str
    aquarium_type_id: str
    volume: Optional[float] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "aquariumTypeId": self.aquarium_type_id,
            "volume": self.volume,
            "description": self.description,
        }


# ── Seed data ────────────────────────────────────────────────────────────────
# (name, full name, unit, description)
DEFAULT_PARAMETERS: List[Tuple[str, str, str, str]] = [
    ("SG",   "Salinity",           "SG",  "Specific gravity measures salt concentration."),
    ("kH",   "Carbonate Hardness", "dKH", "Alkalinity buffer that stabilizes pH and supports coral skeleton growth."),
    ("Ca",   "Calcium",            "ppm", "Essential element for coral skeleton and coralline algae growth."),
    ("Mg",   "Magnesium",          "ppm", "Helps maintain calcium and alkalinity levels, prevents precipitation."),
    ("PO4",  "Phosphates",         "ppm", "Nutrient that should be kept low to prevent algae growth."),
    ("NO3",  "Nitrates",           "ppm", "Nitrogen compound from biological filtration."),
    ("Temp", "Temperature",        "°C",  "Water temperature."),
]

DEFAULT_AQUARIUM_TYPES: List[Tuple[str, str]] = [
    ("LPS",       "Large Polyp Stony corals - hardy corals with large, fleshy polyps."),
    ("SPS",       "Small Polyp Stony corals - requires stable parameters and strong lighting."),
    ("Fish Only", "Fish-only aquarium without corals. More forgiving water parameters."),
    ("Mixed",     "Mixed reef with various coral types."),
]

# aquarium type → parameter → (min, max)
DEFAULT_OPTIMAL_VALUES: Dict[str, Dict[str, Tuple[float, float]]] = {
    "LPS": {
        "SG": (1.024, 1.026), "kH": (8.0, 11.0), "Ca": (400.0, 450.0), "Mg": (1250.0, 1350.0),
        "PO4": (0.0, 0.1), "NO3": (5.0, 15.0), "Temp": (24.0, 26.0),
    },
    "SPS": {
        "SG": (1.025, 1.026), "kH": (7.0, 9.0), "Ca": (420.0, 450.0), "Mg": (1300.0, 1400.0),
        "PO4": (0.0, 0.05), "NO3": (1.0, 5.0), "Temp": (24.0, 26.0),
    },
    "Fish Only": {
        "SG": (1.020, 1.026), "kH": (7.0, 12.0), "Ca": (350.0, 450.0), "Mg": (1200.0, 1400.0),
        "PO4": (0.0, 0.5), "NO3": (0.0, 40.0), "Temp": (24.0, 27.0),
    },
    "Mixed": {
        "SG": (1.024, 1.026), "kH": (7.5, 10.0), "Ca": (400.0, 450.0), "Mg": (1250.0, 1400.0),
        "PO4": (0.0, 0.1), "NO3": (2.0, 10.0), "Temp": (24.0, 26.0),
    },
}


class ReferenceDataStore:
    """
    Thread-safe in-memory store.

    Reference data (parameters, types, ranges) is loaded once; aquariums and
    measurements can be added at runtime.
    """

    def __init__(self, seed: bool = True):
        self._lock = threading.Lock()
        self._parameters: Dict[str, TrackedQuantity] = {}
        self._aquarium_types: Dict[str, AquariumType] = {}
        self._ranges: Dict[str, List[OptimalRange]] = {}
        self._aquariums: Dict[str, Aquarium] = {}
        self._measurements: Dict[str, List[MeasurementRecord]] = {}

        if seed:
            self._load_defaults()

    def _load_defaults(self) -> None:
        for name, full_name, unit, description in DEFAULT_PARAMETERS:
            self.add_parameter(TrackedQuantity(
                id=stable_id("parameter", name),
                name=name,
                full_name=full_name,
                unit=unit,
                description=description,
            ))

        for name, description in DEFAULT_AQUARIUM_TYPES:
            type_id = stable_id("aquarium_type", name)
            self.add_aquarium_type(AquariumType(id=type_id, name=name, description=description))
            for param_name, (min_value, max_value) in DEFAULT_OPTIMAL_VALUES[name].items():
                self.add_optimal_range(
                    type_id, self.find_parameter_by_name(param_name).id, min_value, max_value
                )

        logger.info(
            f"Reference data loaded: {len(self._parameters)} parameters, "
            f"{len(self._aquarium_types)} aquarium types"
        )

    # ── Parameters ───────────────────────────────────────────────────────
    def add_parameter(self, parameter: TrackedQuantity) -> TrackedQuantity:
        with self._lock:
            self._parameters[parameter.id] = parameter
        return parameter

    def get_parameter(self, parameter_id: str) -> TrackedQuantity:
        parameter = self._parameters.get(parameter_id)
        if parameter is None:
            raise NotFoundError("Parameter not found", resource="parameter")
        return parameter

    def find_parameter_by_name(self, name: str) -> TrackedQuantity:
        for parameter in self._parameters.values():
            if parameter.name == name:
                return parameter
        raise NotFoundError(f"Parameter {name} not found", resource="parameter")

    def list_parameters(self) -> List[TrackedQuantity]:
        return sorted(self._parameters.values(), key=lambda p: p.name)

    # ── Aquarium types & ranges ──────────────────────────────────────────
    def add_aquarium_type(self, aquarium_type: AquariumType) -> AquariumType:
        with self._lock:
            self._aquarium_types[aquarium_type.id] = aquarium_type
            self._ranges.setdefault(aquarium_type.id, [])
        return aquarium_type

    def get_aquarium_type(self, type_id: str) -> AquariumType:
        aquarium_type = self._aquarium_types.get(type_id)
        if aquarium_type is None:
            raise NotFoundError("Aquarium type not found", resource="aquarium_type")
        return aquarium_type

    def find_aquarium_type_by_name(self, name: str) -> AquariumType:
        for aquarium_type in self._aquarium_types.values():
            if aquarium_type.name == name:
                return aquarium_type
        raise NotFoundError(f"Aquarium type {name} not found", resource="aquarium_type")

    def list_aquarium_types(self) -> List[AquariumType]:
        return sorted(self._aquarium_types.values(), key=lambda t: t.name)

    def add_optimal_range(
        self, type_id: str, parameter_id: str, min_value: float, max_value: float
    ) -> OptimalRange:
        """Register the range for (type, parameter); one range per pair."""
        self.get_aquarium_type(type_id)
        optimal = OptimalRange(
            aquarium_type_id=type_id,
            parameter=self.get_parameter(parameter_id),
            min_value=min_value,
            max_value=max_value,
        )
        with self._lock:
            ranges = [r for r in self._ranges[type_id] if r.parameter_id != parameter_id]
            ranges.append(optimal)
            self._ranges[type_id] = ranges
        return optimal

    def ranges_for_type(self, type_id: str) -> List[OptimalRange]:
        self.get_aquarium_type(type_id)
        return list(self._ranges.get(type_id, []))

    # ── Aquariums & measurements ─────────────────────────────────────────
    def add_aquarium(
        self,
        name: str,
        aquarium_type_id: str,
        aquarium_id: Optional[str] = None,
        volume: Optional[float] = None,
        description: Optional[str] = None,
    ) -> Aquarium:
        self.get_aquarium_type(aquarium_type_id)
        aquarium = Aquarium(
            id=aquarium_id or str(uuid.uuid4()),
            name=name,
            aquarium_type_id=aquarium_type_id,
            volume=volume,
            description=description,
        )
        with self._lock:
            if any(a.name == name for a in self._aquariums.values()):
                raise ConflictError("An aquarium with this name already exists", resource="aquarium")
            self._aquariums[aquarium.id] = aquarium
            self._measurements.setdefault(aquarium.id, [])
        logger.info(f"Aquarium created: {aquarium.name} ({aquarium.id})")
        return aquarium

    def get_aquarium(self, aquarium_id: str) -> Aquarium:
        aquarium = self._aquariums.get(aquarium_id)
        if aquarium is None:
            raise NotFoundError("Aquarium not found", resource="aquarium")
        return aquarium

    def add_measurement(
        self,
        aquarium_id: str,
        parameter_id: str,
        value: float,
        measurement_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> MeasurementRecord:
        self.get_aquarium(aquarium_id)
        self.get_parameter(parameter_id)
        if value < 0:
            raise ValidationError("Measurement value must be non-negative", field="value")

        now = datetime.now(timezone.utc)
        # naive timestamps are UTC
        if measurement_time is not None and measurement_time.tzinfo is None:
            measurement_time = measurement_time.replace(tzinfo=timezone.utc)
        record = MeasurementRecord(
            id=str(uuid.uuid4()),
            aquarium_id=aquarium_id,
            parameter_id=parameter_id,
            value=value,
            measurement_time=measurement_time or now,
            created_at=created_at or now,
            notes=notes,
        )
        with self._lock:
            self._measurements[aquarium_id].append(record)
        return record

    def measurements_for_aquarium(self, aquarium_id: str) -> List[MeasurementRecord]:
        """All measurements of an aquarium, newest ``created_at`` first."""
        self.get_aquarium(aquarium_id)
        with self._lock:
            records = list(self._measurements.get(aquarium_id, []))
        return sorted(records, key=lambda m: m.created_at, reverse=True)
