"""
Hospital and department repositories.
"""
from typing import Optional, List
from sqlmodel import Session, select

from medgrid.repositories.base import BaseRepository
from medgrid.models.hospital import Hospital
from medgrid.models.department import Department


class HospitalRepository(BaseRepository[Hospital]):
    """Repository for hospital operations."""

    def __init__(self, session: Session):
        super().__init__(session, Hospital)

    def get_by_code(self, code: str) -> Optional[Hospital]:
        """
        Returns a hospital by its code.

        Args:
            code: Hospital code (e.g. "MGH")

        Returns:
            The hospital or None
        """
        query = select(Hospital).where(Hospital.code == code)
        return self.session.exec(query).first()


class DepartmentRepository(BaseRepository[Department]):
    """Repository for department operations."""

    def __init__(self, session: Session):
        super().__init__(session, Department)

    def get_by_hospital(self, hospital_id: Optional[str] = None) -> List[Department]:
        """
        Returns the departments of a hospital, or of every hospital.

        Args:
            hospital_id: Hospital ID (None = all)

        Returns:
            List of departments ordered by name
        """
        query = select(Department)
        if hospital_id:
            query = query.where(Department.hospital_id == hospital_id)
        query = query.order_by(Department.name)
        return list(self.session.exec(query).all())
