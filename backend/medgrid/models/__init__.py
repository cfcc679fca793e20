"""
Data models.
Re-exports every model for simpler imports.
"""
from medgrid.models.enums import (
    BedStatusEnum,
    GenderEnum,
    BillStatusEnum,
    OccupancyActionEnum,
    BILL_TRANSITIONS,
)

from medgrid.models.hospital import Hospital
from medgrid.models.department import Department
from medgrid.models.bed import Bed
from medgrid.models.patient import Patient
from medgrid.models.admission import Admission
from medgrid.models.bill import Bill
from medgrid.models.user import User, RoleEnum, PermissionEnum, PERMISSIONS_BY_ROLE

__all__ = [
    # Enums
    "BedStatusEnum",
    "GenderEnum",
    "BillStatusEnum",
    "OccupancyActionEnum",
    "BILL_TRANSITIONS",
    "RoleEnum",
    "PermissionEnum",
    "PERMISSIONS_BY_ROLE",
    # Models
    "Hospital",
    "Department",
    "Bed",
    "Patient",
    "Admission",
    "Bill",
    "User",
]
