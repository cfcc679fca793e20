"""
Authentication dependencies for FastAPI.
Provides dependencies to protect endpoints.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from medgrid.core.database import get_session
from medgrid.models.user import User, PermissionEnum
from medgrid.services.auth_service import auth_service


# Bearer security scheme
security = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication failure (401)."""
    def __init__(self, detail: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class PermissionError(HTTPException):
    """Insufficient permissions (403)."""
    def __init__(self, detail: str = "You do not have permission to perform this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


# ============================================
# BASIC DEPENDENCIES
# ============================================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: Session = Depends(get_session)
) -> User:
    """
    Returns the authenticated user.
    Raises 401 when there is no valid token.
    """
    if not credentials:
        raise AuthError("No authentication token provided")

    payload = auth_service.decode_token(credentials.credentials)

    if not payload:
        raise AuthError("Invalid or expired token")

    if payload.type != "access":
        raise AuthError("Invalid token type")

    user = auth_service.get_user_by_id(payload.sub, session)

    if not user:
        raise AuthError("User not found")

    if not user.is_active:
        raise AuthError("User is disabled")

    return user


# ============================================
# PERMISSION DEPENDENCY FACTORIES
# ============================================

def require_permissions(*permissions: PermissionEnum):
    """
    Factory for a dependency that requires every given permission.

    Usage:
        @router.post("/admit")
        async def admit(user: User = Depends(require_permissions(PermissionEnum.PATIENT_ADMIT))):
            ...
    """
    async def permission_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if not current_user.has_all_permissions(list(permissions)):
            raise PermissionError(
                f"Required permissions: {', '.join(p.value for p in permissions)}"
            )
        return current_user

    return permission_checker


def require_admin():
    """Dependency that only lets admins through."""
    return require_permissions(PermissionEnum.USERS_CREATE)


# ============================================
# HOSPITAL SCOPE
# ============================================

def ensure_hospital_access(user: User, hospital_id: str) -> None:
    """
    Checks that the user may operate on a hospital.

    Raises:
        PermissionError: If the user is bound to another hospital
    """
    if not user.can_access_hospital(hospital_id):
        raise PermissionError("You do not have access to this hospital")
