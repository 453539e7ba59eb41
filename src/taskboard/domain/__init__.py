from .models import (
    BOARD_COLUMNS,
    Task,
    TaskPriority,
    TaskStatus,
    parse_due_date,
    parse_priority,
    parse_status,
)

__all__ = [
    "BOARD_COLUMNS",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "parse_due_date",
    "parse_priority",
    "parse_status",
]
