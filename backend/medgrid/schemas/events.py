"""
Notification payloads pushed to dashboard sessions.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from medgrid.models.enums import BedStatusEnum, OccupancyActionEnum

OCCUPANCY_CHANGED = "occupancy-changed"
RESYNC_REQUIRED = "resync-required"


class OccupancyChangedEvent(BaseModel):
    """
    A bed changed status.

    Serialized with camelCase keys, e.g.
    {"type": "occupancy-changed", "bedId": ..., "departmentId": ...,
     "status": "occupied", "patientId": ...}
    """
    type: str = OCCUPANCY_CHANGED
    hospital_id: str = Field(..., alias="hospitalId")
    department_id: str = Field(..., alias="departmentId")
    bed_id: str = Field(..., alias="bedId")
    status: BedStatusEnum
    patient_id: Optional[str] = Field(None, alias="patientId")
    action: OccupancyActionEnum
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        populate_by_name = True

    def to_message(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
