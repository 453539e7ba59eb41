"""Provide the public `taskboard` package exports."""

from __future__ import annotations

from .server import create_app
from .service import TaskService

__all__ = ["create_app", "TaskService"]
