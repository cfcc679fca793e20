"""
Shared response builders.
"""
from typing import Any, List, Optional

from medgrid.models.admission import Admission
from medgrid.models.bed import Bed
from medgrid.models.patient import Patient
from medgrid.models.user import User


def create_bed_response(bed: Bed) -> Any:
    """
    Builds the API representation of a bed.

    Args:
        bed: Bed object

    Returns:
        BedResponse
    """
    from medgrid.schemas.bed import BedResponse

    patient = bed.current_patient
    return BedResponse(
        id=bed.id,
        label=bed.label,
        department_id=bed.department_id,
        status=bed.status,
        current_patient_id=bed.current_patient_id,
        status_updated_at=bed.status_updated_at,
        version=bed.version,
        patient_name=patient.full_name if patient else None,
    )


def create_admission_response(admission: Admission) -> Any:
    from medgrid.schemas.patient import AdmissionResponse

    return AdmissionResponse(
        id=admission.id,
        department_id=admission.department_id,
        bed_id=admission.bed_id,
        department_name=admission.department.name if admission.department else None,
        bed_label=admission.bed.label if admission.bed else None,
        reason=admission.reason,
        admitted_at=admission.admitted_at,
        discharged_at=admission.discharged_at,
        transfer_count=admission.transfer_count,
        last_transferred_at=admission.last_transferred_at,
        is_active=admission.is_active,
    )


def create_patient_response(
    patient: Patient,
    history: Optional[List[Admission]] = None
) -> Any:
    """
    Builds the API representation of a patient.

    Args:
        patient: Patient object
        history: Admission history, newest first (omitted when None)

    Returns:
        PatientResponse
    """
    from medgrid.schemas.patient import PatientResponse, EmergencyContact

    history = history or []
    active = next(
        (a for a in history if a.id == patient.active_admission_id),
        None
    )
    if active is None and patient.active_admission_id:
        active = patient.active_admission

    return PatientResponse(
        id=patient.id,
        first_name=patient.first_name,
        last_name=patient.last_name,
        full_name=patient.full_name,
        date_of_birth=patient.date_of_birth,
        gender=patient.gender,
        contact_number=patient.contact_number,
        emergency_contact=EmergencyContact(
            name=patient.emergency_contact_name,
            relationship=patient.emergency_contact_relationship,
            contact_number=patient.emergency_contact_number,
        ),
        bill_status=patient.bill_status,
        active_admission=create_admission_response(active) if active else None,
        admissions=[create_admission_response(a) for a in history],
        created_at=patient.created_at,
        updated_at=patient.updated_at,
    )


def create_user_response(user: User) -> Any:
    from medgrid.schemas.auth_schemas import UserResponse

    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        hospital_id=user.hospital_id,
        is_active=user.is_active,
        created_at=user.created_at,
        last_login=user.last_login,
        permissions=sorted(p.value for p in user.permissions),
    )
