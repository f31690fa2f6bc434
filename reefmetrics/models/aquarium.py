"""
API request/response models.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


class RecommendationRequest(BaseModel):
    """Body of POST /api/v1/aquariums/{aquarium_id}/recommendations."""
    parameter_id: UUID
    current_value: float = Field(..., gt=0, description="Current value must be positive")
    optimal_min: float = Field(..., ge=0, description="Optimal minimum must be non-negative")
    optimal_max: float = Field(..., gt=0, description="Optimal maximum must be positive")

    @model_validator(mode="after")
    def check_range(self) -> "RecommendationRequest":
        if self.optimal_max <= self.optimal_min:
            raise ValueError("Optimal maximum must be greater than optimal minimum")
        return self

    model_config = {
        "json_schema_extra": {"example": {
            "parameter_id": "5b0c6f6e-7c9a-5d0f-9a52-0b1de4a3c2f1",
            "current_value": 0.75,
            "optimal_min": 1.0,
            "optimal_max": 1.1,
        }}
    }


class AquariumCreate(BaseModel):
    """Body of POST /api/v1/aquariums."""
    name: str = Field(..., min_length=1, description="Name is required and must not be empty")
    aquarium_type_id: UUID
    description: Optional[str] = None
    volume: Optional[float] = Field(None, gt=0, description="Volume must be a positive number")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required and must not be empty")
        return value


class AquariumOut(BaseModel):
    id: str
    name: str
    aquariumTypeId: str
    volume: Optional[float] = None
    description: Optional[str] = None


class AquariumResponse(BaseModel):
    data: AquariumOut


class MeasurementCreate(BaseModel):
    """Body of POST /api/v1/measurements/{aquarium_id}."""
    parameter_id: UUID
    value: float = Field(..., ge=0, description="Measurement value must be non-negative")
    measurement_time: Optional[datetime] = None
    notes: Optional[str] = None


class MeasurementOut(BaseModel):
    id: str
    aquariumId: str
    parameterId: str
    value: float
    measurementTime: str
    createdAt: str
    notes: Optional[str] = None


class MeasurementResponse(BaseModel):
    data: MeasurementOut


class QuantityOut(BaseModel):
    id: str
    name: str
    fullName: str
    unit: str


class OptimalRangeOut(BaseModel):
    min: float
    max: float


class RecommendationOut(BaseModel):
    quantity: QuantityOut
    currentValue: float
    optimalRange: OptimalRangeOut
    deviationPct: float
    tier: str
    analysis: str
    recommendations: List[str]
    disclaimer: str


class RecommendationResponse(BaseModel):
    data: RecommendationOut


class ParameterStatusOut(BaseModel):
    quantityId: str
    name: str
    fullName: str
    unit: str
    currentValue: Optional[float] = None
    optimalMin: float
    optimalMax: float
    deviationPct: Optional[float] = None
    tier: str
    measurementTime: Optional[str] = None
    statusLabel: str
    lastMeasured: Optional[str] = None


class DashboardResponse(BaseModel):
    aquarium: Dict[str, Any]
    parameters: List[ParameterStatusOut]
    lastMeasurementTime: Optional[str] = None
    summary: Dict[str, int]


class OptimalValueOut(BaseModel):
    quantity: QuantityOut
    min: float
    max: float


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    advisory_configured: bool
