"""
Centralized application settings.
Every tunable lives here so deployments only touch the environment / .env file.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Main system configuration."""

    # ============================================
    # APPLICATION
    # ============================================
    APP_TITLE: str = "MedGrid API"
    APP_DESCRIPTION: str = "Hospital operations: admissions, bed occupancy and billing status"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # ============================================
    # DATABASE
    # ============================================
    DATABASE_URL: str = "sqlite:///./medgrid.db"
    CREATE_TABLES_ON_STARTUP: bool = True
    SEED_DEMO_DATA: bool = False

    # ============================================
    # CORS
    # ============================================
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:5174",
    ]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # ============================================
    # AUTHENTICATION (JWT)
    # ============================================
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ============================================
    # WEBSOCKET
    # ============================================
    WS_REQUIRE_AUTH: bool = True
    WS_MAX_PENDING_EVENTS: int = 256  # per session outbox

    # ============================================
    # LOGGING
    # ============================================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
