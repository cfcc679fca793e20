"""
Patient model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, date
import uuid

from medgrid.models.enums import GenderEnum, BillStatusEnum

if TYPE_CHECKING:
    from medgrid.models.admission import Admission
    from medgrid.models.bill import Bill


class Patient(SQLModel, table=True):
    """
    Patient model.

    Demographics, emergency contact and the pointer to the active admission.
    The admission history itself lives in the `admission` table; at most one
    admission is active (active_admission_id set) at any time.
    """
    __tablename__ = "patient"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )

    # ============================================
    # DEMOGRAPHICS
    # ============================================
    first_name: str
    last_name: str = Field(index=True)
    date_of_birth: date
    gender: GenderEnum
    contact_number: str

    # ============================================
    # EMERGENCY CONTACT
    # ============================================
    emergency_contact_name: str
    emergency_contact_relationship: str
    emergency_contact_number: str

    # ============================================
    # ADMISSION & BILLING STATE
    # ============================================
    # Plain column (no FK) so patient <-> admission does not form a cycle
    active_admission_id: Optional[str] = Field(default=None, index=True)
    bill_status: BillStatusEnum = Field(default=BillStatusEnum.DRAFT)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    admissions: List["Admission"] = Relationship(back_populates="patient")
    bills: List["Bill"] = Relationship(back_populates="patient")

    def __repr__(self) -> str:
        return f"Patient(id={self.id}, name={self.full_name})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def active_admission(self) -> Optional["Admission"]:
        """The active admission record, if any."""
        if not self.active_admission_id:
            return None
        for admission in self.admissions:
            if admission.id == self.active_admission_id:
                return admission
        return None
