"""
Department schemas.
"""
from pydantic import BaseModel
from typing import Optional


class DepartmentResponse(BaseModel):
    """Department with its derived capacity."""
    id: str
    name: str
    code: str
    hospital_id: str
    description: Optional[str] = None

    # Derived from the beds
    capacity: int = 0
    available_beds: int = 0
    occupied_beds: int = 0
    maintenance_beds: int = 0
    occupancy_percentage: float = 0.0
