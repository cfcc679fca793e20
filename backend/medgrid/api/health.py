"""
Health check endpoints.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlmodel import Session
from datetime import datetime

from medgrid.config import settings
from medgrid.core.database import get_session, check_database_health
from medgrid.core.notification_channel import channel

router = APIRouter(
    prefix="/health",
    tags=["health"],
    responses={
        200: {"description": "System healthy"},
        503: {"description": "System unavailable"}
    }
)


@router.get(
    "",
    summary="Health Check",
    description="Checks the application and its database",
    response_model=None
)
async def health_check(session: Session = Depends(get_session)) -> JSONResponse:
    """
    Returns 200 when the API is running and the database answers,
    503 otherwise.
    """
    db_health = check_database_health(session)
    healthy = db_health.get("status") == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "OK" if healthy else "UNAVAILABLE",
            "message": "MedGrid API is running",
            "timestamp": datetime.utcnow().isoformat(),
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
            "components": {
                "database": db_health,
                "notifications": {"sessions": channel.session_count},
            }
        }
    )


@router.get(
    "/liveness",
    summary="Liveness Probe",
    response_model=None
)
async def liveness_probe() -> JSONResponse:
    """Returns 200 while the process is alive, without touching the database."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "alive",
            "timestamp": datetime.utcnow().isoformat()
        }
    )
