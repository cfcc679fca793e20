"""
Billing service.
Bill status lifecycle, independent from bed occupancy.
"""
from typing import List
from sqlmodel import Session
import logging

from medgrid.models.bill import Bill
from medgrid.models.patient import Patient
from medgrid.models.enums import BillStatusEnum, BILL_TRANSITIONS
from medgrid.repositories.bill_repo import BillRepository
from medgrid.repositories.patient_repo import PatientRepository, AdmissionRepository
from medgrid.core.exceptions import (
    BillNotFoundError,
    PatientNotFoundError,
    InvalidBillTransitionError,
)

logger = logging.getLogger("medgrid.billing")


class BillingService:
    """
    Service for patient bills.

    Handles:
    - Listing the bills of a patient
    - Status transitions following BILL_TRANSITIONS
    """

    def __init__(self, session: Session):
        self.session = session
        self.bill_repo = BillRepository(session)
        self.patient_repo = PatientRepository(session)
        self.admission_repo = AdmissionRepository(session)

    def get_patient(self, patient_id: str) -> Patient:
        patient = self.patient_repo.get_by_id(patient_id)
        if not patient:
            raise PatientNotFoundError(patient_id)
        return patient

    def get_bill(self, bill_id: str) -> Bill:
        bill = self.bill_repo.get_fresh(bill_id)
        if not bill:
            raise BillNotFoundError(bill_id)
        return bill

    def get_patient_bills(self, patient_id: str) -> List[Bill]:
        self.get_patient(patient_id)
        return self.bill_repo.get_by_patient(patient_id)

    def change_status(self, bill_id: str, new_status: BillStatusEnum) -> Bill:
        """
        Moves a bill to a new status.

        The patient's bill_status mirrors the bill of the active or latest
        admission only; bills of earlier stays leave it untouched.

        Args:
            bill_id: Bill ID
            new_status: Target status

        Returns:
            The updated bill

        Raises:
            BillNotFoundError: Unknown bill
            InvalidBillTransitionError: Transition not allowed from the current status
        """
        bill = self.get_bill(bill_id)

        current = bill.status
        new_status = BillStatusEnum(new_status)
        allowed = BILL_TRANSITIONS.get(current, [])

        if new_status not in allowed:
            raise InvalidBillTransitionError(
                current.value, new_status.value, [s.value for s in allowed]
            )

        try:
            if not self.bill_repo.change_status(bill_id, current, new_status):
                # Someone changed it first
                fresh = self.bill_repo.get_fresh(bill_id)
                raise InvalidBillTransitionError(fresh.status.value, new_status.value)

            latest = self.admission_repo.get_latest(bill.patient_id)
            if latest is not None and latest.id == bill.admission_id:
                self.patient_repo.set_bill_status(bill.patient_id, new_status)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Bill {bill_id}: {current.value} -> {new_status.value}")

        return self.bill_repo.get_fresh(bill_id)
