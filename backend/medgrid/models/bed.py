"""
Bed model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
import uuid

from medgrid.models.enums import BedStatusEnum

if TYPE_CHECKING:
    from medgrid.models.department import Department
    from medgrid.models.patient import Patient


class Bed(SQLModel, table=True):
    """
    Hospital bed model.

    A physical bed inside a department. `status` and `current_patient_id`
    only change through conditional updates issued by OccupancyService:
    status is OCCUPIED exactly when current_patient_id is set.
    """
    __tablename__ = "bed"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    label: str = Field(index=True)  # ICU-01, MED-12, ...
    department_id: str = Field(foreign_key="department.id", index=True)
    status: BedStatusEnum = Field(default=BedStatusEnum.AVAILABLE, index=True)

    # Back-reference to the occupying patient (non-owning)
    current_patient_id: Optional[str] = Field(
        default=None,
        foreign_key="patient.id",
        unique=True
    )

    status_updated_at: datetime = Field(default_factory=datetime.utcnow)
    # Bumped by every conditional update
    version: int = Field(default=0)

    # Relationships
    department: "Department" = Relationship(back_populates="beds")
    current_patient: Optional["Patient"] = Relationship()

    def __repr__(self) -> str:
        return f"Bed(id={self.id}, label={self.label}, status={self.status})"
