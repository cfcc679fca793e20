"""
Patient endpoints: admission, discharge, transfer and lookup.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from medgrid.core.database import get_session
from medgrid.core.auth_dependencies import require_permissions, ensure_hospital_access
from medgrid.models.user import User, PermissionEnum
from medgrid.repositories.hospital_repo import DepartmentRepository
from medgrid.schemas.patient import AdmitRequest, TransferRequest, PatientResponse
from medgrid.schemas.responses import MessageResponse
from medgrid.services.occupancy_service import OccupancyService
from medgrid.utils.helpers import create_patient_response

router = APIRouter()

PATIENT_FIELDS = {
    "patient_id",
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "contact_number",
    "emergency_contact",
}


def _check_department_access(session: Session, user: User, department_id: str) -> None:
    """Unknown departments are left to the service (404)."""
    department = DepartmentRepository(session).get_by_id(department_id)
    if department:
        ensure_hospital_access(user, department.hospital_id)


@router.post("/admit", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def admit_patient(
    data: AdmitRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.PATIENT_ADMIT))
):
    """
    Admits a new or returning patient into an available bed.

    Returns 409 BED_UNAVAILABLE when the bed was taken, even by a request
    that arrived a moment earlier.
    """
    _check_department_access(session, current_user, data.department_id)

    service = OccupancyService(session)
    result = service.admit(
        patient_data=data.model_dump(include=PATIENT_FIELDS),
        department_id=data.department_id,
        bed_id=data.bed_id,
        reason=data.reason_for_admission,
        bill_status=data.bill_status,
        admitted_by=current_user.id,
    )

    history = service.get_history(result.patient.id)
    return create_patient_response(result.patient, history)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.PATIENT_VIEW))
):
    """Returns a patient with the admission history."""
    service = OccupancyService(session)
    patient = service.get_patient(patient_id)
    history = service.get_history(patient_id)
    if history:
        _check_department_access(session, current_user, history[0].department_id)

    return create_patient_response(patient, history)


@router.post("/{patient_id}/discharge", response_model=MessageResponse)
async def discharge_patient(
    patient_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.PATIENT_DISCHARGE))
):
    """Discharges a patient and frees the bed."""
    service = OccupancyService(session)
    patient = service.get_patient(patient_id)
    if patient.active_admission:
        _check_department_access(session, current_user, patient.active_admission.department_id)

    result = service.discharge(patient_id, discharged_by=current_user.id)

    return MessageResponse(
        success=True,
        message=result.message,
        data={
            "patient_id": patient_id,
            "admission_id": result.admission.id,
            "bed_id": result.admission.bed_id,
            "discharged_at": result.admission.discharged_at.isoformat(),
        }
    )


@router.post("/{patient_id}/transfer", response_model=MessageResponse)
async def transfer_patient(
    patient_id: str,
    data: TransferRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.PATIENT_TRANSFER))
):
    """Moves an admitted patient to another bed."""
    _check_department_access(session, current_user, data.department_id)

    service = OccupancyService(session)
    result = service.transfer(patient_id, data.department_id, data.bed_id)

    return MessageResponse(
        success=True,
        message=result.message,
        data={
            "patient_id": patient_id,
            "admission_id": result.admission.id,
            "department_id": result.admission.department_id,
            "bed_id": result.admission.bed_id,
            "transfer_count": result.admission.transfer_count,
        }
    )
