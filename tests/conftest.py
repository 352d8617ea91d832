# tests/conftest.py

from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from todo_app.db.config import build_engine
from todo_app.db.init import init_db
from todo_app.main import create_app
from todo_app.services.recurring_task_service import RecurringTaskService
from todo_app.services.task_service import TaskService

from .helpers import ALICE, BOB, make_token


@pytest.fixture()
def engine():
    """Fresh in-memory task store per test."""
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def alice_store(session: Session) -> TaskService:
    return TaskService(session, ALICE)


@pytest.fixture()
def bob_store(session: Session) -> TaskService:
    return TaskService(session, BOB)


@pytest.fixture()
def recurring(alice_store: TaskService) -> RecurringTaskService:
    return RecurringTaskService(alice_store)


@pytest.fixture()
def client():
    """
    TestClient over an app with its own in-memory store.

    Used as a context manager so the startup hook creates the tables.
    """
    app = create_app("sqlite://")
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def auth_headers() -> Callable[..., dict]:
    def _headers(email: str = ALICE) -> dict:
        return {"Authorization": f"Bearer {make_token(email=email, sub=email)}"}

    return _headers
