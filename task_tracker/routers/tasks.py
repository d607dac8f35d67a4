import logging

from fastapi import APIRouter, Query, status

from task_tracker.dependencies import CurrentUser, TasksServiceDep
from task_tracker.models import TaskCreate, TaskResponse, TaskStatusUpdate
from task_tracker.validation import (
    unwrap,
    validate_filter,
    validate_new_task,
    validate_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def get_tasks(
    user: CurrentUser,
    service: TasksServiceDep,
    task_status: str | None = Query(default=None, alias="status"),
    search: str | None = None,
):
    """List the caller's tasks, optionally filtered by status and/or text"""
    filters = unwrap(validate_filter(task_status, search))
    logger.info(
        f"User '{user.username}' retrieving all tasks. Filters: {filters.model_dump_json()}"
    )
    return await service.get_tasks(user.id, filters)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, user: CurrentUser, service: TasksServiceDep):
    """Create a new task"""
    task_data = unwrap(validate_new_task(task_data.title, task_data.description))
    logger.info(f"User '{user.username}' creating a task. Data: {task_data.model_dump_json()}")
    return await service.create_task(user.id, task_data.title, task_data.description)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, user: CurrentUser, service: TasksServiceDep):
    """Get a specific task by ID"""
    logger.info(f"User '{user.username}' looking for task {task_id}")
    return await service.get_task_by_id(task_id, user.id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, user: CurrentUser, service: TasksServiceDep):
    """Delete a task"""
    logger.info(f"User '{user.username}' deleting task {task_id}")
    await service.delete_task_by_id(task_id, user.id)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: int, body: TaskStatusUpdate, user: CurrentUser, service: TasksServiceDep
):
    new_status = unwrap(validate_status(body.status))
    logger.info(
        f"User '{user.username}' updating status of task {task_id} to {new_status.value}"
    )
    return await service.update_task_status(task_id, user.id, new_status)
