from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.models import Task, TaskStatus


class TaskRepository(ABC):
    @abstractmethod
    def list(self) -> list[Task]:
        """All tasks, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    def create(self, task: Task) -> Task:
        raise NotImplementedError

    @abstractmethod
    def update_status(self, task_id: str, status: TaskStatus) -> Task:
        """Raises ``NotFoundError`` for an unknown id."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: str) -> Task:
        """Remove and return the task.  Raises ``NotFoundError`` for an unknown id."""
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError
