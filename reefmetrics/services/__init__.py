"""
Application Services

Reference data access and the dashboard builder used by the API layer.
"""
from .reference_data import (
    ReferenceDataStore,
    Aquarium,
    AquariumType,
    stable_id,
)
from .dashboard import DashboardService, DashboardData

__all__ = [
    "ReferenceDataStore",
    "Aquarium",
    "AquariumType",
    "stable_id",
    "DashboardService",
    "DashboardData",
]
