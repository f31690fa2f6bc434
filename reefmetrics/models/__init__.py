from .aquarium import (
    RecommendationRequest,
    RecommendationResponse,
    RecommendationOut,
    AquariumCreate,
    AquariumResponse,
    MeasurementCreate,
    MeasurementResponse,
    DashboardResponse,
    ParameterStatusOut,
    OptimalValueOut,
    QuantityOut,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "RecommendationRequest",
    "RecommendationResponse",
    "RecommendationOut",
    "AquariumCreate",
    "AquariumResponse",
    "MeasurementCreate",
    "MeasurementResponse",
    "DashboardResponse",
    "ParameterStatusOut",
    "OptimalValueOut",
    "QuantityOut",
    "ErrorResponse",
    "HealthResponse",
]
