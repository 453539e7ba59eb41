from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import sessionmaker

from ..service import TaskService
from .bootstrap import create_db_engine, ensure_schema
from .sql_repos import SqlTaskRepository


class Container:
    """Holds the database engine and everything built on top of it.

    The app factory, the CLI and the tests each build one and pass it down;
    nothing reaches for a module-level database handle.
    """

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine = create_db_engine(database_url)
        ensure_schema(self.engine)
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

        self.tasks = SqlTaskRepository(self.session_factory)
        self.service = TaskService(self.tasks)
        logger.info("Task store ready url={} total={}", self.engine.url.render_as_string(hide_password=True), self.tasks.count())

    def close(self) -> None:
        self.engine.dispose()
