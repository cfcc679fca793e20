"""
Admission model.
One row per hospital stay; the patient's append-only admission history.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
import uuid

if TYPE_CHECKING:
    from medgrid.models.patient import Patient
    from medgrid.models.bed import Bed
    from medgrid.models.department import Department


class Admission(SQLModel, table=True):
    """
    Admission model.

    Active while discharged_at is unset. Transfers move department_id and
    bed_id in place; admitted_at never changes and a closed admission is
    never reopened.
    """
    __tablename__ = "admission"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    patient_id: str = Field(foreign_key="patient.id", index=True)
    department_id: str = Field(foreign_key="department.id", index=True)
    bed_id: str = Field(foreign_key="bed.id", index=True)
    reason: str

    # ============================================
    # TIMESTAMPS
    # ============================================
    admitted_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    discharged_at: Optional[datetime] = Field(default=None, index=True)

    # ============================================
    # TRANSFERS
    # ============================================
    transfer_count: int = Field(default=0)
    last_transferred_at: Optional[datetime] = Field(default=None)

    # ============================================
    # AUDIT
    # ============================================
    admitted_by: Optional[str] = Field(default=None)  # user id
    discharged_by: Optional[str] = Field(default=None)

    # Relationships
    patient: "Patient" = Relationship(back_populates="admissions")
    bed: "Bed" = Relationship()
    department: "Department" = Relationship()

    def __repr__(self) -> str:
        return (
            f"Admission(id={self.id}, patient_id={self.patient_id}, "
            f"bed_id={self.bed_id}, active={self.is_active})"
        )

    @property
    def is_active(self) -> bool:
        return self.discharged_at is None
