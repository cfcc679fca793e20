"""
Bed endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import List, Optional

from medgrid.core.database import get_session
from medgrid.core.auth_dependencies import require_permissions, ensure_hospital_access
from medgrid.models.enums import BedStatusEnum
from medgrid.models.user import User, PermissionEnum
from medgrid.repositories.hospital_repo import DepartmentRepository
from medgrid.schemas.bed import BedResponse, BedMaintenanceRequest
from medgrid.services.occupancy_service import OccupancyService
from medgrid.utils.helpers import create_bed_response

router = APIRouter()


@router.get("", response_model=List[BedResponse])
async def list_beds(
    department_id: str = Query(..., description="Department ID"),
    status: Optional[BedStatusEnum] = Query(None, description="Status filter (all when omitted)"),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.BED_VIEW))
):
    """Beds of a department, as last committed."""
    department = DepartmentRepository(session).get_by_id(department_id)
    if department:
        ensure_hospital_access(current_user, department.hospital_id)

    service = OccupancyService(session)
    beds = service.available_beds(department_id, status)
    return [create_bed_response(b) for b in beds]


@router.get("/{bed_id}", response_model=BedResponse)
async def get_bed(
    bed_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.BED_VIEW))
):
    bed = OccupancyService(session).get_bed(bed_id)
    ensure_hospital_access(current_user, bed.department.hospital_id)
    return create_bed_response(bed)


@router.post("/{bed_id}/maintenance", response_model=BedResponse)
async def set_bed_maintenance(
    bed_id: str,
    request: BedMaintenanceRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permissions(PermissionEnum.BED_MAINTENANCE))
):
    """Puts a free bed into maintenance or back into service."""
    service = OccupancyService(session)
    bed = service.get_bed(bed_id)
    ensure_hospital_access(current_user, bed.department.hospital_id)

    bed = service.set_maintenance(bed_id, request.maintenance)
    return create_bed_response(bed)
