class StorageError(Exception):
    """Raised by repositories when the database rejects or loses a write/read."""


class InternalFailure(Exception):
    """Storage failure surfaced by a service; details stay in the logs."""


class TaskNotFound(Exception):
    """Task is missing or belongs to another user."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with ID '{task_id}' not found")


class InputValidationError(Exception):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class UsernameTaken(Exception):
    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class InvalidCredentials(Exception):
    def __init__(self):
        super().__init__("Invalid credentials")
