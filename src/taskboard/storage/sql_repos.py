"""SQLAlchemy-backed task repository.

Tasks live in a single ``tasks`` table.  Every public method runs in its own
session and transaction, so each operation is atomic for the one row it
touches.  Database failures surface as :class:`StorageError`.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Iterator, Optional

from loguru import logger
from sqlalchemy import Date, DateTime, Enum, Index, Integer, String, Text, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from ..domain.models import Task, TaskPriority, TaskStatus
from ..errors import NotFoundError, StorageError
from .interfaces import TaskRepository


class Base(DeclarativeBase):
    pass


class TaskRow(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    # Unique insertion counter; breaks created_at ties so listing order follows creation order.
    seq: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, name="task_priority", native_enum=False, length=16),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status", native_enum=False, length=16),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_tasks_created_at_seq", "created_at", "seq"),)

    def __repr__(self) -> str:
        return f"<TaskRow(id={self.id!r}, title={self.title!r}, status={self.status.value})>"


def _row_to_task(row: TaskRow) -> Task:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # SQLite drops the offset; everything is stored as UTC.
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Task(
        id=row.id,
        title=row.title,
        description=row.description,
        priority=row.priority,
        status=row.status,
        due_date=row.due_date,
        created_at=created_at,
    )


class SqlTaskRepository(TaskRepository):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        try:
            with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Task store failed to {}", operation)
            raise StorageError(f"Failed to {operation}: {exc}") from exc

    def list(self) -> list[Task]:
        with self._transaction("list tasks") as session:
            rows = session.scalars(
                select(TaskRow).order_by(TaskRow.created_at.desc(), TaskRow.seq.desc())
            ).all()
            return [_row_to_task(row) for row in rows]

    def get(self, task_id: str) -> Optional[Task]:
        with self._transaction("load task") as session:
            row = session.get(TaskRow, task_id)
            return _row_to_task(row) if row is not None else None

    def create(self, task: Task) -> Task:
        with self._transaction("create task") as session:
            next_seq = session.scalar(select(func.coalesce(func.max(TaskRow.seq), 0))) + 1
            row = TaskRow(
                id=task.id,
                seq=next_seq,
                title=task.title,
                description=task.description,
                priority=task.priority,
                status=task.status,
                due_date=task.due_date,
                created_at=task.created_at,
            )
            session.add(row)
            session.flush()
            logger.debug("Inserted task row id={} seq={}", task.id, next_seq)
        return task

    def update_status(self, task_id: str, status: TaskStatus) -> Task:
        with self._transaction("update task") as session:
            row = session.get(TaskRow, task_id)
            if row is None:
                raise NotFoundError(task_id)
            row.status = status
            session.flush()
            return _row_to_task(row)

    def delete(self, task_id: str) -> Task:
        with self._transaction("delete task") as session:
            row = session.get(TaskRow, task_id)
            if row is None:
                raise NotFoundError(task_id)
            task = _row_to_task(row)
            session.delete(row)
            return task

    def count(self) -> int:
        with self._transaction("count tasks") as session:
            return int(session.scalar(select(func.count()).select_from(TaskRow)) or 0)
