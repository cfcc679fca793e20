"""
Bed schemas.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from medgrid.models.enums import BedStatusEnum


class BedResponse(BaseModel):
    """Bed as returned by the API."""
    id: str
    label: str
    department_id: str
    status: BedStatusEnum
    current_patient_id: Optional[str] = None
    status_updated_at: datetime
    version: int

    # Occupant summary
    patient_name: Optional[str] = None

    class Config:
        from_attributes = True


class BedMaintenanceRequest(BaseModel):
    """Request to put a bed into or out of maintenance."""
    maintenance: bool

    class Config:
        extra = "forbid"
