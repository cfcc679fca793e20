"""
Billing endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List

from medgrid.core.database import get_session
from medgrid.core.auth_dependencies import require_permissions, ensure_hospital_access
from medgrid.models.user import User, PermissionEnum
from medgrid.schemas.bill import BillResponse, BillStatusUpdate
from medgrid.services.billing_service import BillingService
from medgrid.services.occupancy_service import OccupancyService

router = APIRouter()


def _check_patient_access(session: Session, user: User, patient_id: str) -> None:
    hospital_id = OccupancyService(session).get_patient_hospital_id(patient_id)
    if hospital_id:
        ensure_hospital_access(user, hospital_id)


@router.get("/patient/{patient_id}", response_model=List[BillResponse])
async def get_patient_bills(
    patient_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.BILLING_VIEW))
):
    """Bills of a patient, newest first."""
    service = BillingService(session)
    service.get_patient(patient_id)
    _check_patient_access(session, current_user, patient_id)

    bills = service.get_patient_bills(patient_id)
    return [BillResponse.model_validate(b) for b in bills]


@router.patch("/{bill_id}/status", response_model=BillResponse)
async def update_bill_status(
    bill_id: str,
    request: BillStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.BILLING_UPDATE))
):
    """Moves a bill to a new status (draft -> generated -> sent -> paid)."""
    service = BillingService(session)
    bill = service.get_bill(bill_id)
    _check_patient_access(session, current_user, bill.patient_id)

    bill = service.change_status(bill_id, request.status)
    return BillResponse.model_validate(bill)
