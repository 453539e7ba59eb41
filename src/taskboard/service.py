"""Task service: the one CRUD surface behind every transport.

The JSON API and the server-side form actions both call :class:`TaskService`,
so validation and defaulting happen in exactly one place.  The service never
translates errors; it raises :class:`ValidationError`, :class:`NotFoundError`
or :class:`StorageError` and leaves presentation to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from loguru import logger

from .domain.models import (
    BOARD_COLUMNS,
    Task,
    TaskStatus,
    generate_id,
    now_utc,
    parse_due_date,
    parse_priority,
    parse_status,
)
from .errors import ValidationError

if TYPE_CHECKING:
    from .storage.interfaces import TaskRepository


class TaskService:
    """Validate caller input and forward it to a :class:`TaskRepository`."""

    def __init__(self, repository: "TaskRepository") -> None:
        self.repository = repository

    def list_tasks(self) -> list[Task]:
        return self.repository.list()

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.repository.get(task_id)

    def create_task(
        self,
        title: Any,
        description: Any = None,
        priority: Any = None,
        due_date: Any = None,
    ) -> Task:
        """Create a task.  Status is always PENDING, whatever the caller sends."""
        clean_title = title.strip() if isinstance(title, str) else ""
        if not clean_title:
            raise ValidationError("'title' is required and must be non-empty")
        if description is not None and not isinstance(description, str):
            raise ValidationError("'description' must be a string")

        task = Task(
            id=generate_id(),
            title=clean_title,
            description=(description or "").strip() or None,
            priority=parse_priority(priority),
            status=TaskStatus.PENDING,
            due_date=parse_due_date(due_date),
            created_at=now_utc(),
        )
        self.repository.create(task)
        logger.info("Created task {}: {} (priority={})", task.id, task.title, task.priority.value)
        return task

    def update_status(self, task_id: str, status: Any) -> Task:
        new_status = parse_status(status)
        task = self.repository.update_status(task_id, new_status)
        logger.info("Task {} moved to {}", task_id, new_status.value)
        return task

    def delete_task(self, task_id: str) -> Task:
        task = self.repository.delete(task_id)
        logger.info("Deleted task {}: {}", task.id, task.title)
        return task

    def board(self) -> dict[TaskStatus, list[Task]]:
        """Group the full list by column, keeping newest-first order."""
        columns: dict[TaskStatus, list[Task]] = {status: [] for status in BOARD_COLUMNS}
        for task in self.list_tasks():
            columns[task.status].append(task)
        return columns
