"""
Pytest configuration and shared fixtures.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hostel_allocator.api.deps import get_activity_dispatcher
from hostel_allocator.db.base import Base
from hostel_allocator.db.session import enable_sqlite_foreign_keys, get_db
from hostel_allocator.main import app
from hostel_allocator.models import Registration
from hostel_allocator.schemas.hostel import HostelCreate
from hostel_allocator.services.audit import ActivityDispatcher, ActivityEvent
from hostel_allocator.services.hostel import HostelService


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def file_engine(tmp_path):
    """File database where each session gets its own connection."""
    engine = create_engine(f"sqlite:///{tmp_path / 'hostels.db'}")
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    session = SessionLocal()
    yield session
    session.close()


class RecordingHandler:
    """Activity handler that keeps every event it receives."""

    def __init__(self):
        self.events: List[ActivityEvent] = []

    def __call__(self, event: ActivityEvent) -> None:
        self.events.append(event)

    def actions(self) -> List[str]:
        return [event.action.value for event in self.events]


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def dispatcher(recorder) -> ActivityDispatcher:
    return ActivityDispatcher(handlers=[recorder])


@pytest.fixture(scope="function")
def client(db_session, dispatcher):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_activity_dispatcher] = lambda: dispatcher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Data factories ==============

@pytest.fixture
def make_registration(db_session):
    """Create and commit a registration; eligible for housing unless told otherwise."""
    counter = {"n": 0}

    def _make(
        name: Optional[str] = None,
        application_id: Optional[str] = None,
        parent_application_id: Optional[str] = None,
        registration_status: str = "approved",
        stay_type: Optional[str] = "on-campus",
        hostel_name: Optional[str] = None,
    ) -> Registration:
        counter["n"] += 1
        registration = Registration(
            application_id=application_id or f"APP-{counter['n']:03d}",
            parent_application_id=parent_application_id,
            name=name or f"Registrant {counter['n']}",
            email=f"registrant{counter['n']}@example.org",
            registration_status=registration_status,
            stay_type=stay_type,
            hostel_name=hostel_name,
        )
        db_session.add(registration)
        db_session.commit()
        return registration

    return _make


@pytest.fixture
def make_hostel(db_session):
    """Create a hostel through the service and return its summary."""

    def _make(
        name: str = "North Block",
        room_count: int = 2,
        beds_per_room: int = 2,
        room_bed_counts: Optional[Dict[int, int]] = None,
        washrooms: int = 1,
    ):
        result = HostelService(db_session).create_hostel(
            HostelCreate(
                name=name,
                room_count=room_count,
                beds_per_room=beds_per_room,
                room_bed_counts=room_bed_counts or {},
                washrooms=washrooms,
            )
        )
        assert result.is_success, result.error
        return result.data

    return _make


@pytest.fixture
def layout(db_session):
    """Current layout of a hostel."""

    def _layout(hostel_id: str):
        return HostelService(db_session).get_layout(hostel_id).unwrap()

    return _layout


@pytest.fixture
def bed_ids(layout):
    """Bed ids of a hostel in room order then bed-number order."""

    def _bed_ids(hostel_id: str) -> List[str]:
        return [bed.id for room in layout(hostel_id).rooms for bed in room.beds]

    return _bed_ids
