"""
Unit tests for core/database.py module.

Tests engine configuration, the session dependency, and the model defaults.
"""

import uuid
from datetime import timezone

from sqlalchemy.orm import Session

from app.api.deps import get_db
from core.database import SessionLocal, _engine_options, engine, new_id, utcnow


class TestEngineOptions:
    def test_sqlite_allows_cross_thread_use(self):
        assert _engine_options("sqlite://") == {"connect_args": {"check_same_thread": False}}

    def test_postgres_uses_pool_settings(self):
        options = _engine_options("postgresql://u:p@db:5432/dupulse")

        assert options["pool_pre_ping"] is True
        assert options["pool_size"] == 10
        assert options["max_overflow"] == 20

    def test_engine_uses_configured_url(self):
        assert engine.url.get_backend_name() == "sqlite"


class TestSessionDependency:
    def test_get_db_yields_and_closes_session(self):
        generator = get_db()
        db = next(generator)

        assert isinstance(db, Session)
        generator.close()

    def test_session_factory_binds_engine(self):
        db = SessionLocal()
        try:
            assert db.get_bind() is engine
        finally:
            db.close()


class TestDefaults:
    def test_new_id_is_uuid4(self):
        assert uuid.UUID(new_id()).version == 4

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == timezone.utc
