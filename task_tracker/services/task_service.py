import logging

from task_tracker.core.exceptions import InternalFailure, StorageError, TaskNotFound
from task_tracker.models import Task, TaskFilter, TaskStatus
from task_tracker.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class TasksService:
    """
    Business rules for tasks.

    Ownership is enforced here: a task owned by somebody else is reported
    exactly like a task that does not exist. Storage errors are logged with
    the owner and payload and re-raised as InternalFailure.
    """

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    async def get_tasks(self, owner_id: int, filters: TaskFilter) -> list[Task]:
        try:
            return await self.repository.list_tasks(owner_id, filters)
        except StorageError as e:
            logger.exception(
                f"Failed to get tasks for owner {owner_id}. Filters: {filters.model_dump_json()}"
            )
            raise InternalFailure() from e

    async def get_task_by_id(self, task_id: int, owner_id: int) -> Task:
        try:
            found = await self.repository.find_by_id(task_id, owner_id)
        except StorageError as e:
            logger.exception(f"Failed to get task {task_id} for owner {owner_id}")
            raise InternalFailure() from e

        if found is None:
            raise TaskNotFound(task_id)
        return found

    async def create_task(self, owner_id: int, title: str, description: str) -> Task:
        try:
            return await self.repository.create_task(owner_id, title, description)
        except StorageError as e:
            logger.exception(
                f"Failed to create a task for owner {owner_id}. "
                f"Data: title={title!r} description={description!r}"
            )
            raise InternalFailure() from e

    async def delete_task_by_id(self, task_id: int, owner_id: int) -> None:
        try:
            affected = await self.repository.delete_by_id(task_id, owner_id)
        except StorageError as e:
            logger.exception(f"Failed to delete task {task_id} for owner {owner_id}")
            raise InternalFailure() from e

        if affected == 0:
            raise TaskNotFound(task_id)

    async def update_task_status(
        self, task_id: int, owner_id: int, new_status: TaskStatus
    ) -> Task:
        # last writer wins, no locking
        task = await self.get_task_by_id(task_id, owner_id)
        try:
            return await self.repository.update_status(task, new_status)
        except StorageError as e:
            logger.exception(
                f"Failed to update task {task_id} for owner {owner_id}. New status: {new_status}"
            )
            raise InternalFailure() from e
