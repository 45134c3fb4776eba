"""
API Dependencies
Dependency injection functions for FastAPI endpoints
"""
from typing import Generator
from sqlalchemy.orm import Session

from core.auth_client import AuthClient, get_auth_client
from core.database import SessionLocal
from core.mailer import Mailer, get_mailer

__all__ = ["get_db", "get_auth_client", "get_mailer", "AuthClient", "Mailer"]


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting a database session

    Yields:
        Session: SQLAlchemy session, closed (and rolled back if uncommitted)
        once the request finishes
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
