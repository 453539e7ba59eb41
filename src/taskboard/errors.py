"""Error taxonomy shared by the store, the service and both transports."""

from __future__ import annotations

from typing import Optional


class TaskBoardError(Exception):
    """Base class for every error raised by the task board."""

    code = "task_board_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskBoardError):
    """Missing required field, bad enumeration value or unparseable date."""

    code = "validation_error"


class NotFoundError(TaskBoardError):
    """The operation targets a task id that does not exist."""

    code = "not_found"

    def __init__(self, task_id: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Task {task_id} not found")
        self.task_id = task_id


class StorageError(TaskBoardError):
    """The underlying database is unavailable or the operation failed there."""

    code = "storage_error"
