"""FastAPI application factory for the task board."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..config import Settings, load_settings
from ..errors import TaskBoardError
from ..service import TaskService
from ..storage.container import Container
from ..web.routes import create_web_router
from .api_router import (
    create_api_router,
    request_validation_handler,
    task_error_handler,
    unexpected_error_handler,
)


def create_app(
    container: Optional[Container] = None,
    settings: Optional[Settings] = None,
    enable_cors: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Pre-built storage container, closed by the caller. When omitted one
            is built from *settings* and closed on app shutdown.
        settings: Runtime settings; loaded from the current directory when omitted.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app.
    """
    owns_container = container is None
    if container is None:
        settings = settings or load_settings()
        container = Container(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        # A caller-supplied container is closed by the caller.
        if owns_container:
            container.close()
            logger.info("Task store closed")

    app = FastAPI(
        lifespan=lifespan,
        title="Task Board",
        description="Single-user task board with a JSON API and a server-rendered page",
        version="1.0.0",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.container = container

    def _get_service() -> TaskService:
        return app.state.container.service

    app.add_exception_handler(TaskBoardError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(create_api_router(_get_service))
    app.include_router(create_web_router(_get_service))

    logger.info("Task board app created")
    return app
