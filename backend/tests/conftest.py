"""Shared fixtures: a fresh SQLite database per test and services bound to it."""

import sqlite3

import aiosqlite
import pytest
import pytest_asyncio

from chronify.database.db import init_db
from chronify.models import RegisterRequest, TimelineCreate
from chronify.services.auth import AuthService
from chronify.services.events import EventService
from chronify.services.timelines import TimelineService
from chronify.services.users import UserService


@pytest_asyncio.fixture
async def db_path(tmp_path):
    """Create an initialized database file."""
    path = str(tmp_path / "chronify.db")
    await init_db(path)
    return path


@pytest.fixture
def auth():
    return AuthService(secret_key="test-secret", algorithm="HS256", expire_minutes=5)


@pytest.fixture
def user_service(db_path, auth):
    return UserService(db_path=db_path, auth=auth)


@pytest.fixture
def timeline_service(db_path):
    return TimelineService(db_path=db_path)


@pytest.fixture
def event_service(db_path, timeline_service):
    return EventService(db_path=db_path, timeline_service=timeline_service)


@pytest_asyncio.fixture
async def owner(user_service):
    """A registered user owning the test timelines."""
    return await user_service.register(RegisterRequest(
        username="ada",
        email="ada@example.com",
        password="analytical-engine",
    ))


@pytest_asyncio.fixture
async def other_user(user_service):
    return await user_service.register(RegisterRequest(
        username="grace",
        email="grace@example.com",
        password="compiler-first",
    ))


@pytest_asyncio.fixture
async def timeline(owner, timeline_service):
    return await timeline_service.create_timeline(
        owner.id, TimelineCreate(title="Apollo Program", description="Moon missions"),
    )


@pytest.fixture
def locked_event_updates(monkeypatch):
    """Make every UPDATE of an event fail as if the database were locked."""
    original = aiosqlite.Connection.execute

    async def execute(self, sql, parameters=None):
        if sql.lstrip().startswith("UPDATE events"):
            raise sqlite3.OperationalError("database is locked")
        return await original(self, sql, parameters)

    monkeypatch.setattr(aiosqlite.Connection, "execute", execute)
