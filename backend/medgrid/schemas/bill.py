"""
Bill schemas.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from medgrid.models.enums import BillStatusEnum


class BillResponse(BaseModel):
    id: str
    patient_id: str
    admission_id: Optional[str] = None
    status: BillStatusEnum
    created_at: datetime
    status_updated_at: datetime

    class Config:
        from_attributes = True


class BillStatusUpdate(BaseModel):
    """Request to move a bill to another status."""
    status: BillStatusEnum

    class Config:
        extra = "forbid"
