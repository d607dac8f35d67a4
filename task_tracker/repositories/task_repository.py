import logging

from sqlalchemy import delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker.core.exceptions import StorageError
from task_tracker.models import Task, TaskFilter, TaskStatus

logger = logging.getLogger(__name__)


class TaskRepository:
    """Persistence for tasks. Every query is scoped to the owning user."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_tasks(self, owner_id: int, filters: TaskFilter) -> list[Task]:
        query = select(Task).where(Task.owner_id == owner_id)
        if filters.status is not None:
            query = query.where(Task.status == filters.status)
        if filters.search:
            query = query.where(
                or_(
                    col(Task.title).contains(filters.search, autoescape=True),
                    col(Task.description).contains(filters.search, autoescape=True),
                )
            )
        query = query.order_by(col(Task.created_at).desc(), col(Task.id).desc())

        try:
            result = await self.session.exec(query)
            return list(result.all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list tasks for owner {owner_id}") from e

    async def create_task(self, owner_id: int, title: str, description: str) -> Task:
        task = Task(
            title=title,
            description=description,
            status=TaskStatus.OPEN,
            owner_id=owner_id,
        )
        self.session.add(task)
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Failed to create task for owner {owner_id}") from e

        logger.debug(f"Created task {task.id} for owner {owner_id}")
        return task

    async def find_by_id(self, task_id: int, owner_id: int) -> Task | None:
        query = select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
        try:
            result = await self.session.exec(query)
            return result.first()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load task {task_id}") from e

    async def delete_by_id(self, task_id: int, owner_id: int) -> int:
        """Delete one owned task; returns the number of rows removed (0 or 1)."""
        statement = delete(Task).where(
            col(Task.id) == task_id, col(Task.owner_id) == owner_id
        )
        try:
            result = await self.session.exec(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Failed to delete task {task_id}") from e
        return result.rowcount

    async def update_status(self, task: Task, new_status: TaskStatus) -> Task:
        task.status = new_status
        self.session.add(task)
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Failed to update status of task {task.id}") from e
        return task
