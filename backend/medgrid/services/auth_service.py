"""
Authentication service.
JWT handling, password hashing and token validation.
"""
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from pydantic import ValidationError
from passlib.context import CryptContext
from sqlmodel import Session, select
import logging

from medgrid.config import settings
from medgrid.models.user import User, RoleEnum
from medgrid.schemas.auth_schemas import TokenPayload

logger = logging.getLogger("medgrid.auth")

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:
    """Authentication service."""

    def __init__(self):
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_token_expire = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    # ============================================
    # PASSWORD HASHING
    # ============================================

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    # ============================================
    # JWT TOKENS
    # ============================================

    def create_access_token(
        self,
        user: User,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Creates a JWT access token."""
        now = datetime.utcnow()
        expire = now + (expires_delta or self.access_token_expire)

        payload = {
            "sub": user.id,
            "username": user.username,
            "role": user.role.value,
            "hospital_id": user.hospital_id,
            "exp": expire,
            "iat": now,
            "type": "access"
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    @property
    def access_token_expire_seconds(self) -> int:
        return int(self.access_token_expire.total_seconds())

    def decode_token(self, token: str) -> Optional[TokenPayload]:
        """Decodes and validates a JWT. Returns None when invalid or expired."""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm]
            )
            return TokenPayload(**payload)
        except (JWTError, ValidationError):
            return None

    # ============================================
    # AUTHENTICATION
    # ============================================

    def authenticate_user(
        self,
        username: str,
        password: str,
        session: Session
    ) -> Optional[User]:
        """Authenticates a user by username (or email) and password."""
        statement = select(User).where(
            (User.username == username.lower()) |
            (User.email == username.lower())
        )
        user = session.exec(statement).first()

        if not user:
            return None

        if not user.is_active:
            return None

        if not self.verify_password(password, user.hashed_password):
            logger.info(f"Failed login for {username}")
            return None

        # Update last login
        user.last_login = datetime.utcnow()
        session.add(user)
        session.commit()
        session.refresh(user)

        return user

    def get_user_by_id(self, user_id: str, session: Session) -> Optional[User]:
        return session.get(User, user_id)

    def get_user_by_username(self, username: str, session: Session) -> Optional[User]:
        statement = select(User).where(User.username == username.lower())
        return session.exec(statement).first()

    def get_user_by_email(self, email: str, session: Session) -> Optional[User]:
        statement = select(User).where(User.email == email.lower())
        return session.exec(statement).first()

    # ============================================
    # REGISTRATION (admins only)
    # ============================================

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: RoleEnum,
        session: Session,
        hospital_id: Optional[str] = None
    ) -> User:
        """Creates a new staff user."""
        user = User(
            username=username.lower(),
            email=email.lower(),
            hashed_password=self.hash_password(password),
            full_name=full_name,
            role=role,
            hospital_id=hospital_id,
        )

        session.add(user)
        session.commit()
        session.refresh(user)

        logger.info(f"User created: {user.username} ({user.role.value})")
        return user


# Global service instance
auth_service = AuthService()
