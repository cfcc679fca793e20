"""
Department endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import List, Optional

from medgrid.core.database import get_session
from medgrid.core.auth_dependencies import require_permissions, ensure_hospital_access
from medgrid.core.exceptions import DepartmentNotFoundError, HospitalNotFoundError
from medgrid.models.department import Department
from medgrid.models.user import User, PermissionEnum, RoleEnum
from medgrid.repositories.hospital_repo import HospitalRepository, DepartmentRepository
from medgrid.schemas.department import DepartmentResponse
from medgrid.services.occupancy_service import OccupancyService

router = APIRouter()


def _department_response(department: Department, service: OccupancyService) -> DepartmentResponse:
    return DepartmentResponse(
        id=department.id,
        name=department.name,
        code=department.code,
        hospital_id=department.hospital_id,
        description=department.description,
        **service.department_occupancy(department),
    )


@router.get("", response_model=List[DepartmentResponse])
async def list_departments(
    hospital_id: Optional[str] = Query(None, description="Hospital ID"),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.DEPARTMENT_VIEW))
):
    """Departments with their derived capacity."""
    # Users bound to a hospital only see their own
    if hospital_id:
        ensure_hospital_access(current_user, hospital_id)
        if not HospitalRepository(session).get_by_id(hospital_id):
            raise HospitalNotFoundError(hospital_id)
    elif current_user.role != RoleEnum.ADMIN and current_user.hospital_id:
        hospital_id = current_user.hospital_id

    service = OccupancyService(session)
    departments = DepartmentRepository(session).get_by_hospital(hospital_id)
    return [_department_response(d, service) for d in departments]


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.DEPARTMENT_VIEW))
):
    department = DepartmentRepository(session).get_by_id(department_id)
    if not department:
        raise DepartmentNotFoundError(department_id)
    ensure_hospital_access(current_user, department.hospital_id)

    return _department_response(department, OccupancyService(session))
