"""
Global pytest fixtures.

Nothing here touches Postgres: services run against the in-memory user
repository and session store, and the request-scoped DB session is replaced by
`FakeDbSession`, which only counts commits/rollbacks.
"""

from __future__ import annotations

import datetime as dt

import pytest  # type: ignore[import-not-found]
from fastapi import FastAPI
from fastapi.testclient import TestClient

from blogdesk.api.main import build_app
from blogdesk.auth.crypto import MIN_ITERATIONS
from blogdesk.auth.depends import get_auth_service, get_login_throttle
from blogdesk.auth.memory import InMemorySessionStore, InMemoryUserRepository
from blogdesk.auth.service import AuthService
from blogdesk.auth.throttle import LoginThrottle
from blogdesk.commons.clock import FrozenClock
from blogdesk.commons.depends import database_session


class FakeDbSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Default AnyIO backend for async tests."""
    return "asyncio"


@pytest.fixture()
def db() -> FakeDbSession:
    return FakeDbSession()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(dt.datetime(2026, 1, 1, 12, 0, tzinfo=dt.UTC))


@pytest.fixture()
def users(clock: FrozenClock) -> InMemoryUserRepository:
    return InMemoryUserRepository(clock=clock)


@pytest.fixture()
def sessions(clock: FrozenClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture()
def auth_service(
    users: InMemoryUserRepository,
    sessions: InMemorySessionStore,
    clock: FrozenClock,
) -> AuthService:
    # Lowest accepted work factor keeps the suite fast.
    return AuthService(
        users=users,
        sessions=sessions,
        clock=clock,
        password_iterations=MIN_ITERATIONS,
    )


@pytest.fixture()
def app(auth_service: AuthService, db: FakeDbSession) -> FastAPI:
    app = build_app()

    async def _fake_db_session():  # type: ignore[no-untyped-def]
        yield db

    app.dependency_overrides[database_session] = _fake_db_session
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    throttle = LoginThrottle(max_attempts=5, window_s=900)
    app.dependency_overrides[get_login_throttle] = lambda: throttle
    return app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # https so the Secure session cookie is sent back by the client.
    return TestClient(app, base_url="https://testserver")
