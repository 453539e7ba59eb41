"""Task model for the board.

A task carries a title, an optional description, a priority, an optional due
date and a board status.  Only the status changes after creation.  The helpers
at the bottom coerce raw caller input (JSON bodies, form fields, CLI args)
into the enums and dates used here, raising :class:`ValidationError` when the
input cannot be understood.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..errors import ValidationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    """Board column a task lives in."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    @property
    def label(self) -> str:
        return {"PENDING": "Pending", "IN_PROGRESS": "In Progress", "COMPLETED": "Completed"}[self.value]

    @property
    def sort_key(self) -> int:
        return {"PENDING": 0, "IN_PROGRESS": 1, "COMPLETED": 2}[self.value]


class TaskPriority(str, Enum):
    """Urgency tag.  MEDIUM is the default."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return {"LOW": 0, "MEDIUM": 1, "HIGH": 2}[self.value]


BOARD_COLUMNS: tuple[TaskStatus, ...] = (
    TaskStatus.PENDING,
    TaskStatus.IN_PROGRESS,
    TaskStatus.COMPLETED,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Short task id: ``task-<10hex>``."""
    return f"task-{uuid.uuid4().hex[:10]}"


def _normalize_enum_name(raw: str) -> str:
    return raw.strip().upper().replace("-", "_").replace(" ", "_")


def parse_status(raw: Any) -> TaskStatus:
    """Coerce *raw* to a :class:`TaskStatus` or raise ``ValidationError``.

    Accepts enum members and names in any case, with ``-`` or spaces in
    place of the underscore (``"in progress"``, ``"in-progress"``).
    """
    if isinstance(raw, TaskStatus):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            return TaskStatus(_normalize_enum_name(raw))
        except ValueError:
            pass
    valid = [s.value for s in TaskStatus]
    raise ValidationError(f"'status' must be one of {valid}, got {raw!r}")


def parse_priority(raw: Any, default: TaskPriority = TaskPriority.MEDIUM) -> TaskPriority:
    """Coerce *raw* to a :class:`TaskPriority`; ``None``/blank gives *default*."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    if isinstance(raw, TaskPriority):
        return raw
    if isinstance(raw, str):
        try:
            return TaskPriority(_normalize_enum_name(raw))
        except ValueError:
            pass
    valid = [p.value for p in TaskPriority]
    raise ValidationError(f"'priority' must be one of {valid}, got {raw!r}")


def parse_due_date(raw: Any) -> Optional[date]:
    """Coerce *raw* to a date.

    ``None`` and blank strings mean "no due date".  ISO datetimes keep only
    their date part.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValidationError(f"'dueDate' must be an ISO date (YYYY-MM-DD), got {raw!r}")


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    else:
        return now_utc()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Task dataclass
# ---------------------------------------------------------------------------

@dataclass
class Task:
    """A single card on the board."""

    id: str = field(default_factory=generate_id)
    title: str = ""
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[date] = None
    created_at: datetime = field(default_factory=now_utc)

    def matches(self, search: str) -> bool:
        """True if title or description contains *search*, ignoring case."""
        if not search:
            return True
        needle = search.lower()
        if needle in self.title.lower():
            return True
        return bool(self.description) and needle in self.description.lower()

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used on the wire."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize from either camelCase or snake_case keys."""
        d = dict(data)
        due_raw = d.get("dueDate", d.get("due_date"))
        created_raw = d.get("createdAt", d.get("created_at"))
        return cls(
            id=str(d.get("id") or generate_id()),
            title=str(d.get("title") or ""),
            description=d.get("description") or None,
            priority=parse_priority(d.get("priority")),
            status=parse_status(d.get("status") or TaskStatus.PENDING),
            due_date=parse_due_date(due_raw),
            created_at=_parse_timestamp(created_raw),
        )
