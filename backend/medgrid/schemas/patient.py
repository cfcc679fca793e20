"""
Patient and admission schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from medgrid.models.enums import GenderEnum, BillStatusEnum


class EmergencyContact(BaseModel):
    """Emergency contact captured on the admission form."""
    name: str = Field(..., max_length=200)
    relationship: str = Field(..., max_length=100)
    contact_number: str = Field(..., max_length=30)

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class AdmitRequest(BaseModel):
    """
    Request to admit a patient into a bed.

    Either `patient_id` (readmission of a known patient) or the full set of
    demographics must be provided. Completeness is checked by the service so
    that the error is a VALIDATION_ERROR with a readable message.
    """

    # Readmission
    patient_id: Optional[str] = None

    # Demographics (new patient)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[GenderEnum] = None
    contact_number: Optional[str] = Field(None, max_length=30)
    emergency_contact: Optional[EmergencyContact] = None

    # Admission
    department_id: str
    bed_id: str
    reason_for_admission: str = Field(..., max_length=1000)
    bill_status: BillStatusEnum = BillStatusEnum.DRAFT

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class TransferRequest(BaseModel):
    """Request to move an admitted patient to another bed."""
    department_id: str
    bed_id: str

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class AdmissionResponse(BaseModel):
    """One admission of the patient history."""
    id: str
    department_id: str
    bed_id: str
    department_name: Optional[str] = None
    bed_label: Optional[str] = None
    reason: str
    admitted_at: datetime
    discharged_at: Optional[datetime] = None
    transfer_count: int = 0
    last_transferred_at: Optional[datetime] = None
    is_active: bool

    class Config:
        from_attributes = True


class PatientResponse(BaseModel):
    """Patient with the active admission and the admission history."""
    id: str
    first_name: str
    last_name: str
    full_name: str
    date_of_birth: date
    gender: GenderEnum
    contact_number: str
    emergency_contact: EmergencyContact
    bill_status: BillStatusEnum
    active_admission: Optional[AdmissionResponse] = None
    admissions: List[AdmissionResponse] = []
    created_at: datetime
    updated_at: datetime
