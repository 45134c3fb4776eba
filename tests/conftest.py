"""
Shared fixtures.

The API runs against an in-memory SQLite database with the auth provider and
SMTP relay replaced by in-process fakes, so no external service is needed.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_EMAILS", "admin@dupulse.test")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_auth_client, get_db, get_mailer
from app.main import app
from app.middleware.rate_limit import limiter
from core.auth_client import AuthProviderError
from core.database import Base
from core.mailer import MailerError
from models.event import Event
from models.rsvp import RSVP
from models.society import Society
from models.user import User

ADMIN_TOKEN = "admin-token"
ROLE_ADMIN_TOKEN = "role-admin-token"
STUDENT_TOKEN = "student-token"

ADMIN_USER = {"id": "admin-1", "email": "admin@dupulse.test", "app_metadata": {}}
ROLE_ADMIN_USER = {"id": "admin-2", "email": "ops@dupulse.test", "app_metadata": {"role": "admin"}}
STUDENT_USER = {"id": "student-1", "email": "student@dupulse.test", "app_metadata": {}}


class FakeAuthClient:
    """Auth provider stand-in keyed by bearer token and by email/password."""

    def __init__(self):
        self.users = {
            ADMIN_TOKEN: ADMIN_USER,
            ROLE_ADMIN_TOKEN: ROLE_ADMIN_USER,
            STUDENT_TOKEN: STUDENT_USER,
        }
        self.passwords = {"student@dupulse.test": "correct-horse"}
        self.unavailable = False

    def get_user(self, token):
        if self.unavailable:
            raise AuthProviderError("connection refused")
        return self.users.get(token)

    def sign_in(self, email, password):
        if self.unavailable:
            raise AuthProviderError("connection refused")
        if self.passwords.get(email) != password:
            return None
        return {
            "user": {"id": "student-1", "email": email},
            "session": {"access_token": STUDENT_TOKEN, "token_type": "bearer"},
        }


class RecordingMailer:
    """Collects outgoing messages instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, text, html=None):
        if self.fail:
            raise MailerError("SMTP relay unavailable")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def client(session_factory, auth_client, mailer):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_mailer] = lambda: mailer
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def role_admin_headers():
    return {"Authorization": f"Bearer {ROLE_ADMIN_TOKEN}"}


@pytest.fixture
def student_headers():
    return {"Authorization": f"Bearer {STUDENT_TOKEN}"}


@pytest.fixture
def make_society(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Society {counter['n']}",
            "contact_email": f"society{counter['n']}@societies.test",
        }
        data.update(overrides)
        society = Society(**data)
        db_session.add(society)
        db_session.commit()
        db_session.refresh(society)
        return society

    return _make


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Student {counter['n']}",
            "email": f"student{counter['n']}@students.test",
            "user_type": "student",
        }
        data.update(overrides)
        user = User(**data)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_event(db_session, make_society):
    def _make(society=None, start=None, hours=2, **overrides):
        society = society or make_society()
        start = start or datetime(2030, 5, 1, 18, 0, tzinfo=timezone.utc)
        data = {
            "name": "Welcome Social",
            "location": "Student Union",
            "start_time": start,
            "end_time": start + timedelta(hours=hours),
            "society_id": society.id,
            "status": "approved",
        }
        data.update(overrides)
        event = Event(**data)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make


@pytest.fixture
def make_rsvp(db_session):
    def _make(user, event):
        rsvp = RSVP(user_id=user.id, event_id=event.id)
        db_session.add(rsvp)
        db_session.commit()
        db_session.refresh(rsvp)
        return rsvp

    return _make
