import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from services.scheduling import deps
from services.scheduling.app import app
from services.scheduling.codes import AccessCodeGenerator
from services.scheduling.lifecycle import MeetingLifecycle
from services.scheduling.models import MeetingCreate, PrivilegedUser, Room
from services.scheduling.privileges import PrivilegeDirectory
from services.scheduling.repository import MeetingRepository, PrivilegedUserRepository, RoomRepository
from services.scheduling.rooms import RoomService
from services.scheduling.scheduling import SchedulingService

NOW = datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)


def at(hour, minute=0, day=1):
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event_type, payload):
        self.events.append((event_type, payload))

    def types(self):
        return [t for t, _ in self.events]

    def of(self, event_type):
        return [p for t, p in self.events if t == event_type]


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(eng)
    yield eng
    SQLModel.metadata.drop_all(eng)


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def code_generator():
    return AccessCodeGenerator(rng=random.Random(1234))


@pytest.fixture
def lifecycle(session, code_generator):
    return MeetingLifecycle(RoomRepository(session), MeetingRepository(session), code_generator, fixed_clock)


@pytest.fixture
def privileges(session):
    return PrivilegeDirectory(PrivilegedUserRepository(session))


@pytest.fixture
def room_service(session, code_generator):
    return RoomService(RoomRepository(session), MeetingRepository(session), code_generator)


@pytest.fixture
def scheduler(lifecycle, privileges, publisher):
    return SchedulingService(lifecycle, privileges, publisher)


@pytest.fixture
def room(session):
    r = Room(name="Everest", company="acme", access_code="123456")
    session.add(r)
    session.commit()
    session.refresh(r)
    return r


@pytest.fixture
def boss(session):
    u = PrivilegedUser(full_name="Big Boss", email="boss@acme.io", company="acme")
    session.add(u)
    session.commit()
    return u


@pytest.fixture
def make_meeting(room):
    def _make(start=at(10), end=at(11), organizer="ann@acme.io", name="Ann", attendees=None, room_id=None, **kw):
        return MeetingCreate(
            title=kw.pop("title", "Weekly sync"),
            start_date=start,
            end_date=end,
            attendees=attendees if attendees is not None else ["bob@acme.io"],
            organizer_full_name=name,
            organizer_email=organizer,
            room_id=room_id or room.id,
            **kw,
        )
    return _make


@pytest.fixture
def client(engine, publisher, code_generator):
    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[deps.get_session] = _session
    app.dependency_overrides[deps.get_publisher] = lambda: publisher
    app.dependency_overrides[deps.get_clock] = lambda: fixed_clock
    app.dependency_overrides[deps.get_code_generator] = lambda: code_generator
    # pas de "with" : les événements startup (create_all, thread RabbitMQ) ne tournent pas
    yield TestClient(app)
    app.dependency_overrides.clear()
