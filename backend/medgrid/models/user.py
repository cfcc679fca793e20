"""
Staff user model for authentication.
"""
from typing import Optional, List
from datetime import datetime
from enum import Enum
from sqlmodel import SQLModel, Field
import uuid


# ============================================
# ENUMS
# ============================================

class RoleEnum(str, Enum):
    """Staff roles."""
    ADMIN = "admin"
    DOCTOR = "doctor"
    NURSE = "nurse"
    RECEPTIONIST = "receptionist"
    BILLING = "billing"


class PermissionEnum(str, Enum):
    """Granular permissions checked by the API layer."""

    # Patients
    PATIENT_VIEW = "patient:view"
    PATIENT_ADMIT = "patient:admit"
    PATIENT_DISCHARGE = "patient:discharge"
    PATIENT_TRANSFER = "patient:transfer"

    # Beds & departments
    BED_VIEW = "bed:view"
    BED_MAINTENANCE = "bed:maintenance"
    DEPARTMENT_VIEW = "department:view"

    # Billing
    BILLING_VIEW = "billing:view"
    BILLING_UPDATE = "billing:update"

    # Users
    USERS_CREATE = "users:create"


# ============================================
# PERMISSIONS PER ROLE
# ============================================

PERMISSIONS_BY_ROLE: dict[RoleEnum, set[PermissionEnum]] = {
    RoleEnum.ADMIN: set(PermissionEnum),  # All permissions

    RoleEnum.DOCTOR: {
        PermissionEnum.PATIENT_VIEW,
        PermissionEnum.PATIENT_ADMIT,
        PermissionEnum.PATIENT_DISCHARGE,
        PermissionEnum.PATIENT_TRANSFER,
        PermissionEnum.BED_VIEW,
        PermissionEnum.DEPARTMENT_VIEW,
    },

    # Nurses also take beds in and out of maintenance
    RoleEnum.NURSE: {
        PermissionEnum.PATIENT_VIEW,
        PermissionEnum.PATIENT_ADMIT,
        PermissionEnum.PATIENT_DISCHARGE,
        PermissionEnum.PATIENT_TRANSFER,
        PermissionEnum.BED_VIEW,
        PermissionEnum.BED_MAINTENANCE,
        PermissionEnum.DEPARTMENT_VIEW,
    },

    RoleEnum.RECEPTIONIST: {
        PermissionEnum.PATIENT_VIEW,
        PermissionEnum.PATIENT_ADMIT,
        PermissionEnum.BED_VIEW,
        PermissionEnum.DEPARTMENT_VIEW,
        PermissionEnum.BILLING_VIEW,
    },

    RoleEnum.BILLING: {
        PermissionEnum.PATIENT_VIEW,
        PermissionEnum.DEPARTMENT_VIEW,
        PermissionEnum.BILLING_VIEW,
        PermissionEnum.BILLING_UPDATE,
    },
}


# ============================================
# MODEL
# ============================================

class User(SQLModel, table=True):
    """Staff member. Authorizes operations, owns no occupancy state."""
    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    full_name: str
    hashed_password: str
    role: RoleEnum = Field(default=RoleEnum.RECEPTIONIST)

    # None = access to every hospital
    hospital_id: Optional[str] = Field(default=None, foreign_key="hospital.id")

    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = Field(default=None)

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role={self.role})"

    @property
    def permissions(self) -> set[PermissionEnum]:
        return PERMISSIONS_BY_ROLE.get(self.role, set())

    def has_all_permissions(self, permissions: List[PermissionEnum]) -> bool:
        return all(p in self.permissions for p in permissions)

    def can_access_hospital(self, hospital_id: str) -> bool:
        """Admins and users without a hospital see every hospital."""
        if self.role == RoleEnum.ADMIN or not self.hospital_id:
            return True
        return self.hospital_id == hospital_id
