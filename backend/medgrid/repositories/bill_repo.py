"""
Bill repository.
"""
from typing import List
from sqlmodel import Session, select
from datetime import datetime

from medgrid.repositories.base import BaseRepository
from medgrid.models.bill import Bill
from medgrid.models.enums import BillStatusEnum


class BillRepository(BaseRepository[Bill]):
    """Repository for bill operations."""

    def __init__(self, session: Session):
        super().__init__(session, Bill)

    def get_by_patient(self, patient_id: str) -> List[Bill]:
        """
        Returns the bills of a patient, newest first.

        Args:
            patient_id: Patient ID

        Returns:
            List of bills
        """
        query = (
            select(Bill)
            .where(Bill.patient_id == patient_id)
            .order_by(Bill.created_at.desc())
        )
        return list(self.session.exec(query).all())

    def change_status(
        self,
        bill_id: str,
        from_status: BillStatusEnum,
        to_status: BillStatusEnum
    ) -> bool:
        """
        Changes the bill status only if it is still from_status.
        """
        return self.compare_and_set(
            bill_id,
            expected={"status": from_status},
            values={
                "status": to_status,
                "status_updated_at": datetime.utcnow(),
            },
        )
