from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field as PydanticField
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Column, Field, SQLModel


def get_utc_now():
    """Helper function to get current UTC time with timezone"""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware DateTime that always loads as UTC.

    SQLite drops tzinfo on the way in, so naive values read back are tagged UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TaskStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class User(SQLModel, table=True):
    """Database model, never returned by the API"""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=50, unique=True, index=True)
    hashed_password: str = Field(max_length=255)


class TaskBase(SQLModel):
    """Base model with shared fields"""

    title: str
    description: str = Field(default="")


class Task(TaskBase, table=True):
    """Database model"""

    __tablename__ = "tasks"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    status: TaskStatus = Field(default=TaskStatus.OPEN, index=True)
    owner_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(
        default_factory=get_utc_now,
        sa_column=Column(UTCDateTime(), nullable=False),
    )


class TaskCreate(TaskBase):
    """Schema for creating a task"""

    pass


class TaskStatusUpdate(SQLModel):
    """Body of PATCH /tasks/{id}/status; checked by validation.validate_status"""

    status: str


class TaskFilter(SQLModel):
    """Optional listing criteria, combined with AND"""

    status: TaskStatus | None = None
    search: str | None = None


class TaskResponse(TaskBase):
    """Schema for task responses"""

    id: int
    status: TaskStatus
    owner_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthCredentials(SQLModel):
    """Body of the signup and signin endpoints"""

    username: str
    password: str


class AccessToken(BaseModel):
    access_token: str = PydanticField(serialization_alias="accessToken")
