"""Server-side form actions invoked by the board page.

These are thin calls into :class:`TaskService`.  They do not translate
errors: a :class:`TaskBoardError` raised by the service reaches the caller
unchanged, and the page route decides what to show.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import Task
from ..service import TaskService


def _field(form: Mapping[str, Any], name: str) -> Any:
    value = form.get(name)
    return value if value not in ("", None) else None


def add_task(service: TaskService, form: Mapping[str, Any]) -> Task:
    return service.create_task(
        title=form.get("title") or "",
        description=_field(form, "description"),
        priority=_field(form, "priority"),
        due_date=_field(form, "dueDate"),
    )


def update_task_status(service: TaskService, task_id: str, status: Any) -> Task:
    return service.update_status(task_id, status)


def delete_task(service: TaskService, task_id: str) -> Task:
    return service.delete_task(task_id)
