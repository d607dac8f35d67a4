"""
Input checks run by the routers before a service is called.

Each validator returns either `Valid(value)` with the normalized input or
`Invalid(errors)` listing every violation found. `unwrap` turns an `Invalid`
into an InputValidationError, which the app maps to 400 Bad Request.
"""

import re
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from task_tracker.core.exceptions import InputValidationError
from task_tracker.models import AuthCredentials, TaskCreate, TaskFilter, TaskStatus

T = TypeVar("T")

TITLE_MAX_LENGTH = 200
USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20

# upper and lower case letter, plus a digit or a symbol
_STRONG_PASSWORD = re.compile(r"((?=.*\d)|(?=.*\W+))(?![.\n])(?=.*[A-Z])(?=.*[a-z]).*$")


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    errors: list[str]


ValidationResult = Union[Valid[T], Invalid]


def unwrap(result: "ValidationResult[T]") -> T:
    if isinstance(result, Invalid):
        raise InputValidationError(result.errors)
    return result.value


def validate_status(raw: str) -> "ValidationResult[TaskStatus]":
    value = raw.strip().upper()
    try:
        return Valid(TaskStatus(value))
    except ValueError:
        return Invalid([f'"{value}" is an invalid status'])


def validate_new_task(title: str, description: str) -> "ValidationResult[TaskCreate]":
    errors = []
    if not title.strip():
        errors.append("title should not be empty")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"title must be at most {TITLE_MAX_LENGTH} characters")

    if errors:
        return Invalid(errors)
    return Valid(TaskCreate(title=title, description=description))


def validate_filter(status: str | None, search: str | None) -> "ValidationResult[TaskFilter]":
    errors = []
    parsed_status = None
    if status is not None:
        status_result = validate_status(status)
        if isinstance(status_result, Invalid):
            errors.extend(status_result.errors)
        else:
            parsed_status = status_result.value

    if search is not None and search == "":
        errors.append("search should not be empty")

    if errors:
        return Invalid(errors)
    return Valid(TaskFilter(status=parsed_status, search=search))


def validate_credentials(username: str, password: str) -> "ValidationResult[AuthCredentials]":
    errors = []
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        errors.append(
            f"username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )

    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        errors.append(
            f"password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )
    elif not _STRONG_PASSWORD.match(password):
        errors.append("password too weak")

    if errors:
        return Invalid(errors)
    return Valid(AuthCredentials(username=username, password=password))
