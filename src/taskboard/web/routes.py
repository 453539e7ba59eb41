"""Board page and the form-action endpoints behind it.

Every action answers with a 303 redirect back to the board, so the browser
reloads the whole task list after each mutation.  The current view state is
carried along in the query string, plus a one-shot notice for the toast.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from loguru import logger

from ..domain.models import TaskPriority, TaskStatus
from ..errors import TaskBoardError
from ..service import TaskService
from . import actions
from .board import ALL, SORT_LABELS, BoardViewState, derive_board

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _back_to_board(state: BoardViewState, notice: str, kind: str) -> RedirectResponse:
    query = state.query(with_notice=True, notice=notice, notice_kind=kind)
    return RedirectResponse(url=f"/?{query}" if query else "/", status_code=303)


def _run_action(
    state: BoardViewState,
    action: Callable[[], Any],
    *,
    success: str,
    failure: str,
) -> RedirectResponse:
    try:
        action()
    except TaskBoardError as exc:
        logger.warning("{}: {}", failure, exc.message)
        return _back_to_board(state, f"{failure}: {exc.message}", "error")
    return _back_to_board(state, success, "success")


def create_web_router(get_service: Callable[[], TaskService]) -> APIRouter:
    """Create the router serving the HTML board and its form actions.

    Parameters
    ----------
    get_service:
        Zero-argument callable returning the :class:`TaskService` to use.
    """
    router = APIRouter(tags=["board"])

    @router.get("/", response_class=HTMLResponse)
    async def board_page(request: Request) -> HTMLResponse:
        state = BoardViewState.from_query(request.query_params)
        status_code = 200
        try:
            tasks = get_service().list_tasks()
        except TaskBoardError as exc:
            logger.error("Failed to load tasks: {}", exc.message)
            tasks = []
            status_code = 500
            state = state.model_copy(update={"notice": f"Failed to load tasks: {exc.message}", "notice_kind": "error"})
        board = derive_board(tasks, state)
        return templates.TemplateResponse(
            request,
            "board.html",
            {
                "board": board,
                "state": state,
                "view_query": state.query(),
                "dark_toggle_query": state.query(dark=not state.dark),
                "statuses": list(TaskStatus),
                "priorities": list(TaskPriority),
                "sort_labels": SORT_LABELS,
                "all_value": ALL,
                "load_failed": status_code != 200,
            },
            status_code=status_code,
        )

    @router.post("/actions/tasks")
    async def add_task_action(request: Request) -> RedirectResponse:
        state = BoardViewState.from_query(request.query_params)
        form = await request.form()
        return _run_action(
            state,
            lambda: actions.add_task(get_service(), form),
            success="Task created successfully!",
            failure="Failed to create task",
        )

    @router.post("/actions/tasks/{task_id}/status")
    async def update_status_action(task_id: str, request: Request) -> RedirectResponse:
        state = BoardViewState.from_query(request.query_params)
        form = await request.form()
        return _run_action(
            state,
            lambda: actions.update_task_status(get_service(), task_id, form.get("status")),
            success="Task status updated successfully!",
            failure="Failed to update task",
        )

    @router.post("/actions/tasks/{task_id}/delete")
    async def delete_task_action(task_id: str, request: Request) -> RedirectResponse:
        state = BoardViewState.from_query(request.query_params)
        return _run_action(
            state,
            lambda: actions.delete_task(get_service(), task_id),
            success="Task deleted successfully!",
            failure="Failed to delete task",
        )

    return router
