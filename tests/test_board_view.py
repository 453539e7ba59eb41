"""Tests for board view state parsing and column derivation."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from taskboard.domain.models import Task, TaskPriority, TaskStatus
from taskboard.web.board import ALL, BoardViewState, derive_board, filter_tasks

BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _task(title: str, minutes: int, **kwargs) -> Task:
    return Task(id=f"task-{title.lower()}", title=title, created_at=BASE + timedelta(minutes=minutes), **kwargs)


@pytest.fixture
def tasks() -> list[Task]:
    # Newest first, as the store returns them.
    return [
        _task("Deploy", 4, priority=TaskPriority.LOW, status=TaskStatus.COMPLETED, due_date=date(2026, 2, 1)),
        _task("Review", 3, priority=TaskPriority.HIGH, status=TaskStatus.IN_PROGRESS),
        _task("Report", 2, priority=TaskPriority.MEDIUM, description="Quarterly numbers", due_date=date(2026, 3, 1)),
        _task("Budget", 1, priority=TaskPriority.HIGH, due_date=date(2026, 1, 15)),
        _task("Inbox", 0, priority=TaskPriority.LOW),
    ]


class TestBoardViewState:
    def test_defaults(self) -> None:
        state = BoardViewState()
        assert state.status == ALL
        assert state.priority == ALL
        assert state.sort == "dueDate"
        assert state.dark is False
        assert state.query() == ""

    def test_from_query_normalizes(self) -> None:
        state = BoardViewState.from_query({
            "search": "  report ",
            "status": "in_progress",
            "priority": "high",
            "sort": "priority",
            "dark": "1",
            "ignored": "x",
        })
        assert state.search == "report"
        assert state.status == "IN_PROGRESS"
        assert state.priority == "HIGH"
        assert state.sort == "priority"
        assert state.dark is True

    def test_unknown_values_fall_back(self) -> None:
        state = BoardViewState.from_query({"status": "DONE", "priority": "URGENT", "sort": "title", "dark": "nope"})
        assert state.status == ALL
        assert state.priority == ALL
        assert state.sort == "dueDate"
        assert state.dark is False

    def test_query_round_trip_keeps_view_but_not_notice(self) -> None:
        state = BoardViewState(search="a b", status="PENDING", sort="status", dark=True, notice="Saved")
        again = BoardViewState.from_query(dict(pair.split("=") for pair in state.query().split("&")))
        assert again.status == "PENDING"
        assert again.sort == "status"
        assert again.dark is True
        assert again.notice is None
        assert "notice=Saved" in state.query(with_notice=True)


class TestFiltering:
    def test_search_matches_title_or_description(self, tasks: list[Task]) -> None:
        assert [t.title for t in filter_tasks(tasks, BoardViewState(search="QUARTERLY"))] == ["Report"]
        assert [t.title for t in filter_tasks(tasks, BoardViewState(search="re"))] == ["Review", "Report"]

    def test_filters_combine(self, tasks: list[Task]) -> None:
        state = BoardViewState(status="PENDING", priority="HIGH")
        assert [t.title for t in filter_tasks(tasks, state)] == ["Budget"]

    def test_all_passes_everything(self, tasks: list[Task]) -> None:
        assert len(filter_tasks(tasks, BoardViewState())) == len(tasks)


class TestDeriveBoard:
    def test_partitions_into_fixed_columns(self, tasks: list[Task]) -> None:
        board = derive_board(tasks, BoardViewState())
        assert [status for status, _ in board.columns] == [
            TaskStatus.PENDING,
            TaskStatus.IN_PROGRESS,
            TaskStatus.COMPLETED,
        ]
        assert board.total == 5
        assert board.shown == 5
        assert [t.title for t in board.column(TaskStatus.IN_PROGRESS)] == ["Review"]
        assert [t.title for t in board.column(TaskStatus.COMPLETED)] == ["Deploy"]

    def test_sort_by_due_date_puts_undated_last(self, tasks: list[Task]) -> None:
        board = derive_board(tasks, BoardViewState(sort="dueDate"))
        assert [t.title for t in board.column(TaskStatus.PENDING)] == ["Budget", "Report", "Inbox"]

    def test_sort_by_priority_high_first_then_newest(self, tasks: list[Task]) -> None:
        board = derive_board(tasks, BoardViewState(sort="priority"))
        assert [t.title for t in board.column(TaskStatus.PENDING)] == ["Budget", "Report", "Inbox"]
        extra = _task("Urgent", 10, priority=TaskPriority.HIGH)
        board = derive_board(tasks + [extra], BoardViewState(sort="priority"))
        assert [t.title for t in board.column(TaskStatus.PENDING)] == ["Urgent", "Budget", "Report", "Inbox"]

    def test_sort_by_status_keeps_newest_first_within_column(self, tasks: list[Task]) -> None:
        board = derive_board(tasks, BoardViewState(sort="status"))
        assert [t.title for t in board.column(TaskStatus.PENDING)] == ["Report", "Budget", "Inbox"]

    def test_shown_counts_filtered_tasks(self, tasks: list[Task]) -> None:
        board = derive_board(tasks, BoardViewState(priority="LOW"))
        assert board.total == 5
        assert board.shown == 2
