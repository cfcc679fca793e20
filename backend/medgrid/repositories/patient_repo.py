"""
Patient and admission repositories.
"""
from typing import Optional, List
from sqlmodel import Session, select
from datetime import datetime

from medgrid.repositories.base import BaseRepository
from medgrid.models.patient import Patient
from medgrid.models.admission import Admission
from medgrid.models.enums import BillStatusEnum


class PatientRepository(BaseRepository[Patient]):
    """Repository for patient operations."""

    def __init__(self, session: Session):
        super().__init__(session, Patient)

    def bind_admission(
        self,
        patient_id: str,
        admission_id: str,
        bill_status: BillStatusEnum
    ) -> bool:
        """
        Marks an admission as the patient's active one, only if the patient
        has none.
        """
        return self.compare_and_set(
            patient_id,
            expected={"active_admission_id": None},
            values={
                "active_admission_id": admission_id,
                "bill_status": bill_status,
                "updated_at": datetime.utcnow(),
            },
        )

    def unbind_admission(self, patient_id: str, admission_id: str) -> bool:
        """
        Clears the active admission, only if it is still the given one.
        """
        return self.compare_and_set(
            patient_id,
            expected={"active_admission_id": admission_id},
            values={
                "active_admission_id": None,
                "updated_at": datetime.utcnow(),
            },
        )

    def set_bill_status(self, patient_id: str, bill_status: BillStatusEnum) -> None:
        """Mirrors the latest bill status on the patient. Does not commit."""
        patient = self.get_by_id(patient_id)
        if patient:
            patient.bill_status = bill_status
            patient.updated_at = datetime.utcnow()
            self.session.add(patient)


class AdmissionRepository(BaseRepository[Admission]):
    """Repository for admission records."""

    def __init__(self, session: Session):
        super().__init__(session, Admission)

    def get_history(self, patient_id: str) -> List[Admission]:
        """
        Returns every admission of a patient, newest first.

        Args:
            patient_id: Patient ID

        Returns:
            List of admissions
        """
        query = (
            select(Admission)
            .where(Admission.patient_id == patient_id)
            .order_by(Admission.admitted_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.exec(query).all())

    def get_latest(self, patient_id: str) -> Optional[Admission]:
        """The active admission, or the most recent closed one."""
        query = (
            select(Admission)
            .where(Admission.patient_id == patient_id)
            .order_by(Admission.admitted_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return self.session.exec(query).first()

    def close(self, admission_id: str, discharged_by: Optional[str] = None) -> bool:
        """
        Sets the discharge timestamp, only if the admission is still open.
        """
        return self.compare_and_set(
            admission_id,
            expected={"discharged_at": None},
            values={
                "discharged_at": datetime.utcnow(),
                "discharged_by": discharged_by,
            },
        )

    def move(
        self,
        admission_id: str,
        from_bed_id: str,
        to_bed_id: str,
        to_department_id: str
    ) -> bool:
        """
        Points an open admission at a new bed, only if it is still open and
        on from_bed_id. The admission start timestamp is left untouched.
        """
        return self.compare_and_set(
            admission_id,
            expected={
                "discharged_at": None,
                "bed_id": from_bed_id,
            },
            values={
                "bed_id": to_bed_id,
                "department_id": to_department_id,
                "transfer_count": Admission.transfer_count + 1,
                "last_transferred_at": datetime.utcnow(),
            },
        )
