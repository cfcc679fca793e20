"""
Authentication router.
Login, current user and staff registration.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from medgrid.core.database import get_session
from medgrid.core.exceptions import ValidationError
from medgrid.models.user import User
from medgrid.services.auth_service import auth_service
from medgrid.core.auth_dependencies import get_current_user, require_admin
from medgrid.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from medgrid.utils.helpers import create_user_response


router = APIRouter(prefix="/auth", tags=["Authentication"])


# ============================================
# PUBLIC ENDPOINTS
# ============================================

@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    session: Session = Depends(get_session)
):
    """
    Logs in with username (or email) and password.
    Returns a bearer access token.
    """
    user = auth_service.authenticate_user(data.username, data.password, session)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return LoginResponse(
        user=create_user_response(user),
        tokens=TokenResponse(
            access_token=auth_service.create_access_token(user),
            expires_in=auth_service.access_token_expire_seconds,
        )
    )


# ============================================
# AUTHENTICATED ENDPOINTS
# ============================================

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Returns the authenticated user."""
    return create_user_response(current_user)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    data: RegisterRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_admin())
):
    """Creates a staff user. Admins only."""
    if auth_service.get_user_by_username(data.username, session):
        raise ValidationError(f"Username '{data.username}' is already taken")

    if auth_service.get_user_by_email(data.email, session):
        raise ValidationError(f"Email '{data.email}' is already registered")

    user = auth_service.create_user(
        username=data.username,
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        role=data.role,
        session=session,
        hospital_id=data.hospital_id,
    )
    return create_user_response(user)
