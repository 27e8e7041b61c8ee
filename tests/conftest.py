import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["CHECKIN_TIMEZONE"] = "UTC"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")

import datetime as dt
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.clock import get_now
from app.core.tokens import create_access_token
from app.crud.user import user_crud
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys, get_db
from app.main import api
from app.models.event import Event
from app.models.participant import Participant
from app.models.user import UserRole
from app.schemas.user import UserCreate


class Clock:
    def __init__(self):
        self.now = dt.datetime(2024, 11, 5, 10, 0, tzinfo=dt.timezone.utc)

    def set(self, *args):
        self.now = dt.datetime(*args, tzinfo=dt.timezone.utc)


@pytest.fixture()
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def clock():
    return Clock()


@pytest.fixture()
def client(session_factory, clock):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    api.dependency_overrides[get_db] = _get_db
    api.dependency_overrides[get_now] = lambda: clock.now
    yield TestClient(api)
    api.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make(role=UserRole.USER, admin=None, name=None, email=None, password="secret-pass-123"):
        suffix = uuid.uuid4().hex[:8]
        body = UserCreate(
            name=name or f"{role.value} {suffix}",
            email=email or f"{role.value}.{suffix}@events.org",
            password=password,
            role=role,
            admin_id=admin.id if admin else None,
        )
        return user_crud.create(db, body)
    return _make


@pytest.fixture()
def auth():
    def _headers(user):
        token = create_access_token(sub=user.id, email=user.email, role=user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture()
def make_event(db):
    def _make(owner, name="Town Hall", location="Nairobi", date=None):
        event = Event(event_name=name, location=location, date=date, created_by_id=owner.id)
        db.add(event); db.commit(); db.refresh(event)
        return event
    return _make


@pytest.fixture()
def make_participant(db):
    def _make(event, id_number, **fields):
        p = Participant(event_id=event.id, id_number=id_number, **fields)
        db.add(p); db.commit(); db.refresh(p)
        return p
    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Alice Admin")


@pytest.fixture()
def staff(make_user, admin):
    return make_user(UserRole.USER, admin=admin, name="Sam Staff")


@pytest.fixture()
def event(make_event, admin):
    return make_event(admin)
