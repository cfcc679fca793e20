"""
Authentication schemas.
Validation for login, registration and tokens.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
import re

from medgrid.models.user import RoleEnum


# ============================================
# REQUEST SCHEMAS
# ============================================

class LoginRequest(BaseModel):
    """Login credentials."""
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Staff user registration (admins only)."""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    full_name: str = Field(..., min_length=2, max_length=100)
    role: RoleEnum = Field(default=RoleEnum.RECEPTIONIST)
    hospital_id: Optional[str] = None

    class Config:
        extra = "forbid"

    @field_validator('username')
    @classmethod
    def username_alphanumeric(cls, v: str) -> str:
        if not re.match(r'^[a-zA-Z0-9_]+$', v):
            raise ValueError('Username may only contain letters, digits and underscores')
        return v.lower()

    @field_validator('password')
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not re.search(r'[A-Z]', v):
            raise ValueError('Password must contain an uppercase letter')
        if not re.search(r'[a-z]', v):
            raise ValueError('Password must contain a lowercase letter')
        if not re.search(r'\d', v):
            raise ValueError('Password must contain a digit')
        return v


# ============================================
# RESPONSE SCHEMAS
# ============================================

class TokenResponse(BaseModel):
    """Issued access token."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until expiry


class UserResponse(BaseModel):
    """Staff user (without password)."""
    id: str
    username: str
    email: str
    full_name: str
    role: RoleEnum
    hospital_id: Optional[str] = None
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None
    permissions: List[str]

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Successful login."""
    user: UserResponse
    tokens: TokenResponse
    message: str = "Login successful"


# ============================================
# TOKEN PAYLOAD
# ============================================

class TokenPayload(BaseModel):
    """JWT payload."""
    sub: str  # user_id
    username: str
    role: str
    hospital_id: Optional[str] = None
    exp: datetime
    iat: datetime
    type: str = "access"
