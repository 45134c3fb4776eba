"""
Database connection and session management module.

This module provides the SQLAlchemy engine and session factory for the
application database, along with the id and timestamp defaults shared by the models.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    # SQLite (local development and tests) does not take pool sizing options
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for created_at/updated_at defaults."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())
