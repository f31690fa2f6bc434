"""
Pytest Configuration and Fixtures

Shared fixtures for the ReefMetrics tests.
"""
import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reefmetrics.core.status import MeasurementRecord, OptimalRange, TrackedQuantity
from reefmetrics.services import ReferenceDataStore

BASE_TIME = datetime(2025, 11, 2, 12, 0, tzinfo=timezone.utc)


def make_quantity(name: str, full_name: Optional[str] = None, unit: str = "ppm") -> TrackedQuantity:
    return TrackedQuantity(id=f"param-{name}", name=name, full_name=full_name or name, unit=unit)


def make_record(parameter_id: str, value: float, created_minutes: int,
                record_id: Optional[str] = None) -> MeasurementRecord:
    """Measurement created ``created_minutes`` after BASE_TIME."""
    at = BASE_TIME + timedelta(minutes=created_minutes)
    return MeasurementRecord(
        id=record_id or f"m-{parameter_id}-{created_minutes}",
        aquarium_id="aq-1",
        parameter_id=parameter_id,
        value=value,
        measurement_time=at,
        created_at=at,
    )


def completion_body(content: Any, finish_reason: str = "stop",
                    usage: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
    """An OpenRouter chat-completions response body."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {
        "id": "gen-123",
        "model": "anthropic/claude-3.5-sonnet",
        "choices": [{
            "message": {"role": "assistant", "content": content},
            "finish_reason": finish_reason,
        }],
        "usage": usage or {"prompt_tokens": 120, "completion_tokens": 80, "total_tokens": 200},
    }


class StubAdvisoryClient:
    """Call-counting stand-in for OpenRouterClient."""

    def __init__(self, result: Any = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.requests: List[Any] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def complete(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return request.response_model.model_validate(self.result)


@pytest.fixture
def calcium() -> TrackedQuantity:
    return make_quantity("Ca", "Calcium")


@pytest.fixture
def store() -> ReferenceDataStore:
    return ReferenceDataStore()


@pytest.fixture
def lps_aquarium(store):
    lps = store.find_aquarium_type_by_name("LPS")
    return store.add_aquarium("Display Tank", lps.id)


@pytest.fixture
def advice_payload() -> Dict[str, Any]:
    return {
        "analysis": "Calcium is well below the optimal range, which slows coral growth.",
        "recommendations": [
            "Test calcium again to confirm the reading.",
            "Dose a calcium supplement in small daily increments.",
            "Check alkalinity and magnesium before raising calcium.",
        ],
    }


@pytest.fixture
def ranges_abc():
    """Optimal ranges for quantities A, B and C."""
    return [
        OptimalRange("type-1", make_quantity("A"), 10.0, 20.0),
        OptimalRange("type-1", make_quantity("B"), 10.0, 20.0),
        OptimalRange("type-1", make_quantity("C"), 10.0, 20.0),
    ]
