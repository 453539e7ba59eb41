"""JSON task API.

This module provides a FastAPI router with list, create, status update and
delete endpoints, plus a grouped board view, all under ``/api/tasks``.  It is
included by :func:`taskboard.server.app.create_app`.  Handlers call :class:`TaskService`
and let :class:`TaskBoardError` propagate to the exception handlers
registered by the app, which map each kind to its own status code.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import APIRouter, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from ..domain.models import Task
from ..errors import NotFoundError, StorageError, TaskBoardError, ValidationError
from ..service import TaskService
from ..web.board import BoardViewState, derive_board


# ---------------------------------------------------------------------------
# Pydantic request / response models
# ---------------------------------------------------------------------------

class CreateTaskRequest(BaseModel):
    title: str = ""
    description: Optional[str] = None
    priority: Optional[str] = None
    dueDate: Optional[str] = None


class UpdateStatusRequest(BaseModel):
    status: Optional[str] = None


class TaskPayload(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    priority: str
    status: str
    dueDate: Optional[str] = None
    createdAt: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskPayload":
        return cls(**task.to_dict())


class ErrorPayload(BaseModel):
    error: str
    code: str


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

ERROR_STATUS_CODES: dict[type[TaskBoardError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    StorageError: 500,
}


def status_code_for(exc: TaskBoardError) -> int:
    for error_cls, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_cls):
            return status_code
    return 500


async def task_error_handler(request: Request, exc: TaskBoardError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
    else:
        logger.info("{} {} rejected: {}", request.method, request.url.path, exc.message)
    payload = ErrorPayload(error=exc.message, code=exc.code)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    payload = ErrorPayload(error=f"Invalid request: {details}", code=ValidationError.code)
    return JSONResponse(status_code=400, content=payload.model_dump())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    payload = ErrorPayload(error="Internal server error", code="internal_error")
    return JSONResponse(status_code=500, content=payload.model_dump())


# ---------------------------------------------------------------------------
# Router factory
# ---------------------------------------------------------------------------

def create_api_router(get_service: Callable[[], TaskService]) -> APIRouter:
    """Create the JSON task router.

    Parameters
    ----------
    get_service:
        Zero-argument callable returning the :class:`TaskService` to use.
    """
    router = APIRouter(prefix="/api/tasks", tags=["tasks"])

    @router.get("", response_model=list[TaskPayload])
    async def list_tasks() -> list[TaskPayload]:
        return [TaskPayload.from_task(t) for t in get_service().list_tasks()]

    @router.post("", response_model=TaskPayload)
    async def create_task(body: CreateTaskRequest) -> TaskPayload:
        task = get_service().create_task(
            title=body.title,
            description=body.description,
            priority=body.priority,
            due_date=body.dueDate,
        )
        return TaskPayload.from_task(task)

    @router.get("/board")
    async def get_board(
        search: str = Query(""),
        status: str = Query("ALL"),
        priority: str = Query("ALL"),
        sort: str = Query("dueDate"),
    ) -> dict[str, list[dict[str, Any]]]:
        state = BoardViewState(search=search, status=status, priority=priority, sort=sort)
        board = derive_board(get_service().list_tasks(), state)
        return {column.value: [t.to_dict() for t in tasks] for column, tasks in board.columns}

    @router.get("/{task_id}", response_model=TaskPayload)
    async def get_task(task_id: str) -> TaskPayload:
        task = get_service().get_task(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return TaskPayload.from_task(task)

    @router.patch("/{task_id}", response_model=TaskPayload)
    async def update_task_status(task_id: str, body: UpdateStatusRequest) -> TaskPayload:
        task = get_service().update_status(task_id, body.status)
        return TaskPayload.from_task(task)

    @router.delete("/{task_id}", response_model=TaskPayload)
    async def delete_task(task_id: str) -> TaskPayload:
        task = get_service().delete_task(task_id)
        return TaskPayload.from_task(task)

    return router
