# backend/tests/conftest.py
"""
Pytest configuration for the scheduling core.

Every test gets a fresh in-memory SQLite database. Service clocks are pinned
through ``BaseService._now`` so time-dependent rules are deterministic.
"""

import os

# Settings are read at import time, so configure them BEFORE any tutorhub imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-tutorhub-tests"
os.environ["LIVEKIT_ENABLED"] = "false"

from datetime import datetime, timedelta

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tests.factories import DEFAULT_NOW, create_course, create_student, create_tutor, enroll
from tutorhub.api.dependencies.database import get_db
from tutorhub.api.dependencies.services import get_livekit_client
from tutorhub.database import Base
from tutorhub.integrations.livekit_client import FakeLiveKitClient
from tutorhub.main import app
from tutorhub.models import Course, CourseStatus, Student, Tutor
from tutorhub.services.base import BaseService


test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite defers BEGIN, which breaks SAVEPOINT; emit BEGIN ourselves
@event.listens_for(test_engine, "connect")
def _disable_pysqlite_begin(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestSessionLocal = sessionmaker(
    bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False
)


class Clock:
    """Mutable stand-in for the service clock."""

    def __init__(self, now: datetime):
        self.now = now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def clock(monkeypatch) -> Clock:
    """Pin BaseService._now for every test."""
    fixed = Clock(DEFAULT_NOW)
    monkeypatch.setattr(BaseService, "_now", staticmethod(lambda: fixed.now))
    return fixed


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def livekit_client() -> FakeLiveKitClient:
    return FakeLiveKitClient(ws_url="wss://livekit.test")


@pytest.fixture
def client(db: Session, livekit_client: FakeLiveKitClient):
    """Create a test client bound to the test database."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_livekit_client] = lambda: livekit_client

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# Common fixtures


@pytest.fixture
def tutor(db: Session) -> Tutor:
    return create_tutor(db)


@pytest.fixture
def other_tutor(db: Session) -> Tutor:
    return create_tutor(db, name="Otto Other")


@pytest.fixture
def student(db: Session) -> Student:
    return create_student(db)


@pytest.fixture
def other_student(db: Session) -> Student:
    return create_student(db, name="Olive Other")


@pytest.fixture
def draft_course(db: Session, tutor: Tutor) -> Course:
    return create_course(db, tutor)


@pytest.fixture
def published_course(db: Session, tutor: Tutor, student: Student) -> Course:
    """A published course with one actively enrolled student."""
    course = create_course(db, tutor, status=CourseStatus.PUBLISHED, title="Geometry Live")
    enroll(db, course, student)
    return course
