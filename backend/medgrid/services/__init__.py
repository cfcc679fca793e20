"""
Business logic services.
"""
from medgrid.services.occupancy_service import OccupancyService, OccupancyResult
from medgrid.services.billing_service import BillingService
from medgrid.services.auth_service import AuthService, auth_service

__all__ = [
    "OccupancyService",
    "OccupancyResult",
    "BillingService",
    "AuthService",
    "auth_service",
]
