"""
ReefMetrics - FastAPI Application

Main application entry point with API endpoints for:
- Parameter dashboard (latest value and status per water parameter)
- AI recommendations for out-of-range parameters
- Reference data (parameters, aquarium types, optimal values)
- Aquarium and measurement entry
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reefmetrics.config import settings
from reefmetrics.core.llm import OpenRouterClient, ParameterAdvisor
from reefmetrics.models import (
    AquariumCreate,
    AquariumResponse,
    DashboardResponse,
    MeasurementCreate,
    MeasurementResponse,
    ErrorResponse,
    HealthResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from reefmetrics.services import DashboardService, ReferenceDataStore
from reefmetrics.utils import get_logger, setup_logging, ReefMetricsError

setup_logging(settings.log_level, settings.log_file)
logger = get_logger(__name__)


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.advisory_configured:
        logger.warning("Advisory service not configured - recommendations will return 503")
    logger.info("API ready to accept requests")
    yield
    logger.info("ReefMetrics API shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Water parameter status and AI recommendations for reef aquariums",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

START_TIME = datetime.now()

# ---- Singletons ----
_store = ReferenceDataStore()
_dashboard_service = DashboardService(_store)
_advisor = ParameterAdvisor(OpenRouterClient(), _store)


def get_store() -> ReferenceDataStore:
    return _store


def get_dashboard_service() -> DashboardService:
    return _dashboard_service


def get_advisor() -> ParameterAdvisor:
    return _advisor


# ---- Error Handling ----

def _error_response(status_code: int, error: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


@app.exception_handler(ReefMetricsError)
async def reefmetrics_error_handler(request: Request, exc: ReefMetricsError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed [{exc.code}]: {exc.message}")
    return _error_response(exc.status_code, exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return _error_response(400, {
        "code": "VALIDATION_ERROR",
        "message": "Invalid request data",
        "details": details,
    })


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error in {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error_response(500, {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
    })


# ---- API Endpoints ----

def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        advisory_configured=settings.advisory_configured,
    )


@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.get("/api/v1/parameters", tags=["Reference Data"])
async def list_parameters(store: ReferenceDataStore = Depends(get_store)):
    """List all tracked water parameters."""
    return {"parameters": [p.to_dict() for p in store.list_parameters()]}


@app.get("/api/v1/aquarium-types", tags=["Reference Data"])
async def list_aquarium_types(store: ReferenceDataStore = Depends(get_store)):
    """List aquarium types."""
    return {"aquariumTypes": [t.to_dict() for t in store.list_aquarium_types()]}


@app.get(
    "/api/v1/aquarium-types/{type_id}/optimal-values",
    responses={404: {"model": ErrorResponse}},
    tags=["Reference Data"],
)
async def list_optimal_values(type_id: str, store: ReferenceDataStore = Depends(get_store)):
    """Default optimal range of every parameter for one aquarium type."""
    aquarium_type = store.get_aquarium_type(type_id)
    ranges = sorted(store.ranges_for_type(type_id), key=lambda r: r.parameter.name)
    values: List[Dict[str, Any]] = [
        {"quantity": r.parameter.to_dict(), "min": r.min_value, "max": r.max_value}
        for r in ranges
    ]
    return {"aquariumType": aquarium_type.to_dict(), "optimalValues": values}


@app.post(
    "/api/v1/aquariums",
    status_code=201,
    response_model=AquariumResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Aquariums"],
)
async def create_aquarium(request: AquariumCreate, store: ReferenceDataStore = Depends(get_store)):
    """Create an aquarium of one of the seeded aquarium types."""
    aquarium = store.add_aquarium(
        request.name,
        str(request.aquarium_type_id),
        volume=request.volume,
        description=request.description,
    )
    return {"data": aquarium.to_dict()}


@app.post(
    "/api/v1/measurements/{aquarium_id}",
    status_code=201,
    response_model=MeasurementResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Measurements"],
)
async def create_measurement(
    aquarium_id: UUID,
    request: MeasurementCreate,
    store: ReferenceDataStore = Depends(get_store),
):
    """Record one parameter reading; the observation time defaults to now."""
    measurement = store.add_measurement(
        str(aquarium_id),
        str(request.parameter_id),
        request.value,
        measurement_time=request.measurement_time,
        notes=request.notes,
    )
    return {"data": measurement.to_dict()}


@app.get(
    "/api/v1/aquariums/{aquarium_id}/dashboard",
    response_model=DashboardResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Dashboard"],
)
async def get_dashboard(
    aquarium_id: UUID,
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Latest value and status of every parameter tracked for the aquarium's type,
    most severe first.
    """
    return service.get_dashboard(str(aquarium_id)).to_dict()


@app.post(
    "/api/v1/aquariums/{aquarium_id}/recommendations",
    response_model=RecommendationResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    tags=["Recommendations"],
)
async def get_recommendations(
    aquarium_id: UUID,
    request: RecommendationRequest,
    store: ReferenceDataStore = Depends(get_store),
    advisor: ParameterAdvisor = Depends(get_advisor),
):
    """
    AI recommendations for one parameter reading.

    Readings inside the normal band get a fixed answer without calling the
    AI service. If the AI service fails the response is 503
    AI_SERVICE_UNAVAILABLE.
    """
    aquarium = store.get_aquarium(str(aquarium_id))
    aquarium_type = store.get_aquarium_type(aquarium.aquarium_type_id)

    advice = await advisor.advise(
        str(request.parameter_id),
        request.current_value,
        request.optimal_min,
        request.optimal_max,
        aquarium_type=aquarium_type.name,
    )
    return {"data": advice.to_dict()}
