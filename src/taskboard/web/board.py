"""Board view state and the derivation from the full task list to columns.

The page always works from the complete, freshly loaded task list.  The view
state (search text, filters, sort key, dark mode) only travels in the query
string, so a redirect after a mutation reloads everything and keeps the
user's view.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Literal, Mapping, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, field_validator

from ..domain.models import BOARD_COLUMNS, Task, TaskPriority, TaskStatus

SortKey = Literal["dueDate", "priority", "status"]
NoticeKind = Literal["success", "error"]

ALL = "ALL"
SORT_KEYS: tuple[str, ...] = ("dueDate", "priority", "status")
SORT_LABELS = {"dueDate": "Sort by Due Date", "priority": "Sort by Priority", "status": "Sort by Status"}


class BoardViewState(BaseModel):
    """Everything the board page needs besides the tasks themselves."""

    search: str = ""
    status: str = ALL
    priority: str = ALL
    sort: SortKey = "dueDate"
    dark: bool = False
    notice: Optional[str] = None
    notice_kind: NoticeKind = "success"

    @field_validator("search", mode="before")
    @classmethod
    def _strip_search(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value: Any) -> str:
        raw = str(value or ALL).strip().upper()
        return raw if raw in {s.value for s in TaskStatus} else ALL

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, value: Any) -> str:
        raw = str(value or ALL).strip().upper()
        return raw if raw in {p.value for p in TaskPriority} else ALL

    @field_validator("sort", mode="before")
    @classmethod
    def _known_sort(cls, value: Any) -> str:
        return value if value in SORT_KEYS else "dueDate"

    @field_validator("dark", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value or "").strip().lower() in {"1", "true", "yes", "on"}

    @field_validator("notice_kind", mode="before")
    @classmethod
    def _known_kind(cls, value: Any) -> str:
        return "error" if value == "error" else "success"

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "BoardViewState":
        return cls(**{key: params[key] for key in cls.model_fields if key in params})

    def query(self, *, with_notice: bool = False, **changes: Any) -> str:
        """Encode the persistent view state (optionally the notice) as a query string."""
        state = self.model_copy(update=changes)
        params: dict[str, str] = {}
        if state.search:
            params["search"] = state.search
        if state.status != ALL:
            params["status"] = state.status
        if state.priority != ALL:
            params["priority"] = state.priority
        if state.sort != "dueDate":
            params["sort"] = state.sort
        if state.dark:
            params["dark"] = "1"
        if with_notice and state.notice:
            params["notice"] = state.notice
            params["notice_kind"] = state.notice_kind
        return urlencode(params)


@dataclass
class Board:
    columns: list[tuple[TaskStatus, list[Task]]]
    total: int
    shown: int

    def column(self, status: TaskStatus) -> list[Task]:
        for column_status, tasks in self.columns:
            if column_status == status:
                return tasks
        return []


def _newest_first(task: Task) -> float:
    return -task.created_at.timestamp()


def _due_date_key(task: Task) -> tuple[int, date, float]:
    # Tasks without a due date go after every dated task.
    if task.due_date is None:
        return (1, date.max, _newest_first(task))
    return (0, task.due_date, _newest_first(task))


def _priority_key(task: Task) -> tuple[int, float]:
    return (-task.priority.rank, _newest_first(task))


def _status_key(task: Task) -> tuple[int, float]:
    return (task.status.sort_key, _newest_first(task))


SORTERS: dict[str, Callable[[Task], Any]] = {
    "dueDate": _due_date_key,
    "priority": _priority_key,
    "status": _status_key,
}


def filter_tasks(tasks: list[Task], state: BoardViewState) -> list[Task]:
    out: list[Task] = []
    for task in tasks:
        if not task.matches(state.search):
            continue
        if state.status != ALL and task.status.value != state.status:
            continue
        if state.priority != ALL and task.priority.value != state.priority:
            continue
        out.append(task)
    return out


def derive_board(tasks: list[Task], state: BoardViewState) -> Board:
    """Filter, sort and partition *tasks* into the three fixed columns."""
    shown = sorted(filter_tasks(tasks, state), key=SORTERS[state.sort])
    columns = [(status, [t for t in shown if t.status == status]) for status in BOARD_COLUMNS]
    return Board(columns=columns, total=len(tasks), shown=len(shown))
