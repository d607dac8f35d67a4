"""
Per-request wiring: sessions, repositories, services and the current user.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession
from typing_extensions import Annotated

from task_tracker.core.config import SettingsDep
from task_tracker.database import get_db
from task_tracker.models import User
from task_tracker.repositories.task_repository import TaskRepository
from task_tracker.repositories.user_repository import UserRepository
from task_tracker.services.auth_service import AuthService
from task_tracker.services.task_service import TasksService

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_db)]


def get_auth_service(db: SessionDep, settings: SettingsDep) -> AuthService:
    return AuthService(UserRepository(db), settings)


def get_tasks_service(db: SessionDep) -> TasksService:
    return TasksService(TaskRepository(db))


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TasksServiceDep = Annotated[TasksService, Depends(get_tasks_service)]


async def get_current_user(
    auth_service: AuthServiceDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """Resolve the bearer token to a stored user, or fail with 401."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    user = await auth_service.resolve_token(credentials.credentials)
    if user is None:
        raise unauthorized
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
