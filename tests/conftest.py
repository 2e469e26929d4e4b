import os

# Settings are read at import time; configure before importing punchclock
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ATLAS_APP_CODE", "PUNCHCLOCK_TEST")
os.environ["ENCRYPTION_ENABLED"] = "false"
os.environ["TIMEZONE"] = "UTC"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from atams.db import Base
from atams.exceptions import setup_exception_handlers

import punchclock.models  # noqa: F401
from punchclock.models import Worker
from punchclock.db.session import get_db
from punchclock.api.deps import require_auth
from punchclock.api.v1.api import api_router
from punchclock.services.admission_service import ClockAdmissionService
from punchclock.services.attachment_store import LocalAttachmentStore

# SQLite has no schemas
SCHEMA_MAP = {"timeclock": None}


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        execution_options={"schema_translate_map": SCHEMA_MAP},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed SQLite shared by several threads; each transaction takes the write lock up front"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'punchclock.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        execution_options={"schema_translate_map": SCHEMA_MAP},
    )

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_worker(db):
    def _make(worker_id: int, username: str = None, full_name: str = None) -> Worker:
        worker = Worker(
            w_id=worker_id,
            w_username=username or f"worker{worker_id}",
            w_full_name=full_name or f"Worker {worker_id}",
        )
        db.add(worker)
        db.commit()
        return worker

    return _make


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def attachment_store(tmp_path):
    return LocalAttachmentStore(str(tmp_path / "uploads"), "/uploads", max_bytes=1024 * 1024)


@pytest.fixture
def admission(clock, attachment_store):
    return ClockAdmissionService(attachment_store=attachment_store, clock=clock)


@pytest.fixture
def current_user():
    return {"user_id": 1, "username": "worker1", "role_level": 1}


@pytest.fixture
def client(session_factory, current_user):
    app = FastAPI()
    setup_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[require_auth] = lambda: current_user

    with TestClient(app) as test_client:
        yield test_client
