"""Test configuration and shared fixtures."""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path

# The app builds its engine from Settings at import time, so the environment
# has to point at a throwaway SQLite file before task_tracker is imported.
_TEST_DIR = Path(tempfile.mkdtemp(prefix="task-tracker-tests-"))
APP_DB_PATH = _TEST_DIR / "app.sqlite3"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{APP_DB_PATH}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "DEBUG"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from task_tracker.core.config import Settings, get_settings  # noqa: E402
from task_tracker.database import build_engine, build_session_factory, create_db_and_tables  # noqa: E402
from task_tracker.main import app  # noqa: E402
from task_tracker.models import User  # noqa: E402
from task_tracker.repositories.task_repository import TaskRepository  # noqa: E402
from task_tracker.repositories.user_repository import UserRepository  # noqa: E402
from task_tracker.services.task_service import TasksService  # noqa: E402

STRONG_PASSWORD = "Str0ngPass"


@pytest.fixture()
def settings() -> Settings:
    return get_settings()


@pytest.fixture()
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Fresh SQLite database per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'tasks.sqlite3'}")
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with build_session_factory(engine)() as session:
        yield session


@pytest.fixture()
async def owners(session: AsyncSession) -> tuple[User, User]:
    """Two persisted users; the hash is never checked in these tests."""
    users = UserRepository(session)
    alice = await users.create_user("alice", "not-a-real-hash")
    bob = await users.create_user("bob", "not-a-real-hash")
    return alice, bob


@pytest.fixture()
def task_repository(session: AsyncSession) -> TaskRepository:
    return TaskRepository(session)


@pytest.fixture()
def tasks_service(task_repository: TaskRepository) -> TasksService:
    return TasksService(task_repository)


@pytest.fixture()
def client() -> Iterator[TestClient]:
    """TestClient on an empty app database, with lifespan (table creation) applied."""
    APP_DB_PATH.unlink(missing_ok=True)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client: TestClient) -> Callable[[str], dict[str, str]]:
    """Sign up and sign in `username`, returning an Authorization header."""

    def make(username: str, password: str = STRONG_PASSWORD) -> dict[str, str]:
        response = client.post("/auth/signup", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        response = client.post("/auth/signin", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return make
