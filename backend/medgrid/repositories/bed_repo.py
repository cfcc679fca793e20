"""
Bed repository.
"""
from typing import Optional, List
from sqlmodel import Session, select
from datetime import datetime

from medgrid.repositories.base import BaseRepository
from medgrid.models.bed import Bed
from medgrid.models.enums import BedStatusEnum


class BedRepository(BaseRepository[Bed]):
    """Repository for bed operations."""

    def __init__(self, session: Session):
        super().__init__(session, Bed)

    def get_by_department(
        self,
        department_id: str,
        status: Optional[BedStatusEnum] = None
    ) -> List[Bed]:
        """
        Returns the beds of a department, always re-read from the store.

        Args:
            department_id: Department ID
            status: Optional status filter

        Returns:
            List of beds ordered by label
        """
        query = select(Bed).where(Bed.department_id == department_id)

        if status is not None:
            query = query.where(Bed.status == status)

        query = query.order_by(Bed.label).execution_options(populate_existing=True)
        return list(self.session.exec(query).all())

    # ============================================
    # CONDITIONAL TRANSITIONS
    # ============================================

    def claim(self, bed_id: str, patient_id: str) -> bool:
        """
        available -> occupied by patient_id, only if the bed is still
        available and unlinked.

        Returns:
            False when the bed was taken, under maintenance or missing
        """
        return self.compare_and_set(
            bed_id,
            expected={
                "status": BedStatusEnum.AVAILABLE,
                "current_patient_id": None,
            },
            values={
                "status": BedStatusEnum.OCCUPIED,
                "current_patient_id": patient_id,
                "status_updated_at": datetime.utcnow(),
                "version": Bed.version + 1,
            },
        )

    def release(self, bed_id: str, patient_id: str) -> bool:
        """
        occupied by patient_id -> available, only if this patient still
        holds the bed.
        """
        return self.compare_and_set(
            bed_id,
            expected={
                "status": BedStatusEnum.OCCUPIED,
                "current_patient_id": patient_id,
            },
            values={
                "status": BedStatusEnum.AVAILABLE,
                "current_patient_id": None,
                "status_updated_at": datetime.utcnow(),
                "version": Bed.version + 1,
            },
        )

    def change_status(
        self,
        bed_id: str,
        from_status: BedStatusEnum,
        to_status: BedStatusEnum
    ) -> bool:
        """
        Moves an unoccupied bed between available and maintenance.
        """
        return self.compare_and_set(
            bed_id,
            expected={
                "status": from_status,
                "current_patient_id": None,
            },
            values={
                "status": to_status,
                "status_updated_at": datetime.utcnow(),
                "version": Bed.version + 1,
            },
        )

    def count_by_status(self, department_id: str) -> dict:
        """
        Counts the beds of a department per status.

        Args:
            department_id: Department ID

        Returns:
            Dictionary status value -> count
        """
        counts = {status.value: 0 for status in BedStatusEnum}
        for bed in self.get_by_department(department_id):
            counts[bed.status.value] += 1
        return counts
