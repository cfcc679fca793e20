"""
Main router grouping every sub-router.
"""
from fastapi import APIRouter

from medgrid.api.auth_router import router as auth_router
from medgrid.api import health
from medgrid.api import departments
from medgrid.api import beds
from medgrid.api import patients
from medgrid.api import billing
from medgrid.api import websocket

api_router = APIRouter()
api_router.include_router(auth_router)

# Health check (no authentication, for load balancers)
api_router.include_router(health.router)

api_router.include_router(
    departments.router,
    prefix="/departments",
    tags=["Departments"]
)

api_router.include_router(
    beds.router,
    prefix="/beds",
    tags=["Beds"]
)

api_router.include_router(
    patients.router,
    prefix="/patients",
    tags=["Patients"]
)

api_router.include_router(
    billing.router,
    prefix="/billing",
    tags=["Billing"]
)

api_router.include_router(
    websocket.router,
    tags=["WebSocket"]
)
