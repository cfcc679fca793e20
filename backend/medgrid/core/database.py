"""
Database configuration.
SQLModel engine and session management.
"""
from sqlalchemy import text
from sqlmodel import SQLModel, create_engine, Session
from typing import Generator, Dict, Any
import logging

from medgrid.config import settings

logger = logging.getLogger("medgrid.database")


# Engine arguments depend on the database backend
connect_args = {}
if "sqlite" in settings.DATABASE_URL:
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    connect_args=connect_args
)


def create_db_and_tables() -> None:
    """
    Creates every table in the database.
    Called on application startup.
    """
    # Import models so they register on SQLModel.metadata
    import medgrid.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """
    Session generator for FastAPI dependency injection.

    Usage:
        @router.get("/endpoint")
        def endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


def get_session_direct() -> Session:
    """
    Returns a standalone session (not a generator).
    Useful for scripts and background jobs.

    IMPORTANT: the caller is responsible for closing the session.

    Usage:
        session = get_session_direct()
        try:
            # operations
        finally:
            session.close()
    """
    return Session(engine)


def check_database_health(session: Session) -> Dict[str, Any]:
    """
    Runs a trivial query to verify the store is reachable.

    Args:
        session: Database session

    Returns:
        Dictionary with "status" ("healthy"/"unhealthy") and optional "error"
    """
    try:
        session.exec(text("SELECT 1"))
        return {"status": "healthy"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
