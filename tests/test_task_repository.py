"""Tests for TaskRepository against a temporary SQLite database."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker.core.exceptions import StorageError
from task_tracker.models import Task, TaskFilter, TaskStatus, User
from task_tracker.repositories.task_repository import TaskRepository


@pytest.mark.asyncio
async def test_create_task_defaults(task_repository: TaskRepository, owners: tuple[User, User]) -> None:
    alice, _ = owners

    task = await task_repository.create_task(alice.id, "Buy milk", "2%")

    assert task.id is not None
    assert task.status == TaskStatus.OPEN
    assert task.owner_id == alice.id
    assert task.created_at is not None


@pytest.mark.asyncio
async def test_find_by_id_is_scoped_to_owner(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, bob = owners
    task = await task_repository.create_task(alice.id, "Buy milk", "2%")

    assert (await task_repository.find_by_id(task.id, alice.id)).id == task.id
    assert await task_repository.find_by_id(task.id, bob.id) is None
    assert await task_repository.find_by_id(9999, alice.id) is None


@pytest.mark.asyncio
async def test_list_tasks_only_returns_own_tasks(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, bob = owners
    await task_repository.create_task(alice.id, "Alice task", "")
    await task_repository.create_task(bob.id, "Bob task", "")

    tasks = await task_repository.list_tasks(alice.id, TaskFilter())

    assert [t.title for t in tasks] == ["Alice task"]


@pytest.mark.asyncio
async def test_list_tasks_empty(task_repository: TaskRepository, owners: tuple[User, User]) -> None:
    alice, _ = owners
    assert await task_repository.list_tasks(alice.id, TaskFilter()) == []


@pytest.mark.asyncio
async def test_list_tasks_filters_by_status(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, _ = owners
    first = await task_repository.create_task(alice.id, "First", "")
    await task_repository.create_task(alice.id, "Second", "")
    await task_repository.update_status(first, TaskStatus.DONE)

    done = await task_repository.list_tasks(alice.id, TaskFilter(status=TaskStatus.DONE))
    open_ = await task_repository.list_tasks(alice.id, TaskFilter(status=TaskStatus.OPEN))

    assert [t.title for t in done] == ["First"]
    assert [t.title for t in open_] == ["Second"]


@pytest.mark.asyncio
async def test_list_tasks_search_matches_title_or_description(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, _ = owners
    await task_repository.create_task(alice.id, "abc in title", "")
    await task_repository.create_task(alice.id, "other", "has abc inside")
    await task_repository.create_task(alice.id, "nothing", "here")

    tasks = await task_repository.list_tasks(alice.id, TaskFilter(search="abc"))

    assert sorted(t.title for t in tasks) == ["abc in title", "other"]


@pytest.mark.asyncio
async def test_list_tasks_search_is_case_sensitive(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, _ = owners
    await task_repository.create_task(alice.id, "Buy milk", "")
    await task_repository.create_task(alice.id, "buy bread", "")

    tasks = await task_repository.list_tasks(alice.id, TaskFilter(search="Buy"))

    assert [t.title for t in tasks] == ["Buy milk"]


@pytest.mark.asyncio
async def test_list_tasks_search_treats_wildcards_literally(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, _ = owners
    await task_repository.create_task(alice.id, "50% off", "")
    await task_repository.create_task(alice.id, "500 off", "")

    tasks = await task_repository.list_tasks(alice.id, TaskFilter(search="50%"))

    assert [t.title for t in tasks] == ["50% off"]


@pytest.mark.asyncio
async def test_list_tasks_combines_status_and_search(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, _ = owners
    done_match = await task_repository.create_task(alice.id, "report draft", "")
    await task_repository.create_task(alice.id, "report final", "")
    done_other = await task_repository.create_task(alice.id, "groceries", "")
    await task_repository.update_status(done_match, TaskStatus.DONE)
    await task_repository.update_status(done_other, TaskStatus.DONE)

    tasks = await task_repository.list_tasks(
        alice.id, TaskFilter(status=TaskStatus.DONE, search="report")
    )

    assert [t.title for t in tasks] == ["report draft"]


@pytest.mark.asyncio
async def test_delete_by_id_returns_affected_rows(
    task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, bob = owners
    task = await task_repository.create_task(alice.id, "Buy milk", "")

    assert await task_repository.delete_by_id(task.id, bob.id) == 0
    assert await task_repository.delete_by_id(task.id, alice.id) == 1
    assert await task_repository.delete_by_id(task.id, alice.id) == 0
    assert await task_repository.find_by_id(task.id, alice.id) is None


@pytest.mark.asyncio
async def test_create_task_commit_failure_raises_storage_error() -> None:
    session = Mock(spec=AsyncSession)
    session.commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("db down")))
    session.rollback = AsyncMock()
    repo = TaskRepository(session)

    with pytest.raises(StorageError):
        await repo.create_task(5, "Buy milk", "2%")

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_status_commit_failure_raises_storage_error() -> None:
    session = Mock(spec=AsyncSession)
    session.commit = AsyncMock(side_effect=OperationalError("UPDATE", {}, Exception("db down")))
    session.rollback = AsyncMock()
    repo = TaskRepository(session)

    with pytest.raises(StorageError):
        await repo.update_status(Task(id=1, title="t", owner_id=5), TaskStatus.DONE)

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_created_at_reloads_as_utc(
    session: AsyncSession, task_repository: TaskRepository, owners: tuple[User, User]
) -> None:
    alice, _ = owners
    task = await task_repository.create_task(alice.id, "Buy milk", "")
    session.expunge_all()

    reloaded = await task_repository.find_by_id(task.id, alice.id)

    assert reloaded.created_at.tzinfo is not None
    assert reloaded.created_at.utcoffset() == timedelta(0)
