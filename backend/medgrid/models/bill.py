"""
Bill model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
import uuid

from medgrid.models.enums import BillStatusEnum

if TYPE_CHECKING:
    from medgrid.models.patient import Patient


class Bill(SQLModel, table=True):
    """
    Patient bill.

    Usually opened at admission time; its lifecycle is independent from bed
    occupancy and follows BILL_TRANSITIONS.
    """
    __tablename__ = "bill"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    patient_id: str = Field(foreign_key="patient.id", index=True)
    admission_id: Optional[str] = Field(default=None, foreign_key="admission.id", index=True)
    status: BillStatusEnum = Field(default=BillStatusEnum.DRAFT, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    status_updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    patient: "Patient" = Relationship(back_populates="bills")

    def __repr__(self) -> str:
        return f"Bill(id={self.id}, patient_id={self.patient_id}, status={self.status})"
