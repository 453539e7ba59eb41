from .container import Container
from .interfaces import TaskRepository
from .sql_repos import SqlTaskRepository

__all__ = ["Container", "SqlTaskRepository", "TaskRepository"]
