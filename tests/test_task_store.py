"""Tests for the SQLAlchemy task repository."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy.exc import IntegrityError

from taskboard.domain.models import Task, TaskPriority, TaskStatus
from taskboard.errors import NotFoundError, StorageError
from taskboard.storage.container import Container
from taskboard.storage.sql_repos import Base, SqlTaskRepository, TaskRow


@pytest.fixture
def container() -> Container:
    c = Container("sqlite://")
    yield c
    c.close()


@pytest.fixture
def repo(container: Container) -> SqlTaskRepository:
    return container.tasks


class TestSqlTaskRepository:
    def test_empty_list(self, repo: SqlTaskRepository) -> None:
        assert repo.list() == []
        assert repo.count() == 0

    def test_create_and_get_round_trip(self, repo: SqlTaskRepository) -> None:
        task = Task(title="Write report", description="Q3", priority=TaskPriority.HIGH, due_date=date(2026, 11, 1))
        repo.create(task)

        loaded = repo.get(task.id)
        assert loaded is not None
        assert loaded.title == "Write report"
        assert loaded.description == "Q3"
        assert loaded.priority is TaskPriority.HIGH
        assert loaded.status is TaskStatus.PENDING
        assert loaded.due_date == date(2026, 11, 1)
        assert loaded.created_at.tzinfo is not None

    def test_get_missing_returns_none(self, repo: SqlTaskRepository) -> None:
        assert repo.get("task-missing") is None

    def test_list_is_newest_first(self, repo: SqlTaskRepository) -> None:
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i, title in enumerate(["A", "B", "C"]):
            repo.create(Task(title=title, created_at=base + timedelta(minutes=i)))

        assert [t.title for t in repo.list()] == ["C", "B", "A"]

    def test_same_timestamp_falls_back_to_insertion_order(self, repo: SqlTaskRepository) -> None:
        stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for title in ["A", "B", "C"]:
            repo.create(Task(title=title, created_at=stamp))

        assert [t.title for t in repo.list()] == ["C", "B", "A"]

    def test_update_status(self, repo: SqlTaskRepository) -> None:
        task = repo.create(Task(title="Move me"))
        updated = repo.update_status(task.id, TaskStatus.COMPLETED)
        assert updated.status is TaskStatus.COMPLETED
        assert repo.get(task.id).status is TaskStatus.COMPLETED

    def test_update_status_missing_leaves_store_unchanged(self, repo: SqlTaskRepository) -> None:
        task = repo.create(Task(title="Keep"))
        with pytest.raises(NotFoundError) as info:
            repo.update_status("task-missing", TaskStatus.COMPLETED)
        assert info.value.task_id == "task-missing"
        assert [(t.id, t.status) for t in repo.list()] == [(task.id, TaskStatus.PENDING)]

    def test_delete_returns_record(self, repo: SqlTaskRepository) -> None:
        task = repo.create(Task(title="Remove me"))
        deleted = repo.delete(task.id)
        assert deleted.id == task.id
        assert deleted.title == "Remove me"
        assert repo.list() == []

    def test_delete_missing(self, repo: SqlTaskRepository) -> None:
        with pytest.raises(NotFoundError):
            repo.delete("task-missing")

    def test_seq_is_unique(self, container: Container, repo: SqlTaskRepository) -> None:
        task = repo.create(Task(title="First"))
        with container.session_factory() as session:
            seq = session.get(TaskRow, task.id).seq
        with pytest.raises(IntegrityError):
            with container.session_factory.begin() as session:
                session.add(TaskRow(
                    id="task-duplicate",
                    seq=seq,
                    title="Racing writer",
                    priority=TaskPriority.MEDIUM,
                    status=TaskStatus.PENDING,
                    created_at=task.created_at,
                ))
        assert [t.id for t in repo.list()] == [task.id]

    def test_database_failure_becomes_storage_error(self, container: Container, repo: SqlTaskRepository) -> None:
        Base.metadata.drop_all(container.engine)
        with pytest.raises(StorageError, match="list tasks"):
            repo.list()


def test_file_database_persists_across_containers(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'nested' / 'tasks.db'}"
    first = Container(url)
    task = first.service.create_task("Persist me")
    first.close()

    second = Container(url)
    try:
        assert [t.id for t in second.service.list_tasks()] == [task.id]
    finally:
        second.close()
