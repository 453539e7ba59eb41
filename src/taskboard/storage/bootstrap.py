from __future__ import annotations

from pathlib import Path

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from .sql_repos import Base


def _is_memory_sqlite(database: str | None) -> bool:
    return database in (None, "", ":memory:")


def create_db_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Build the engine for *database_url*.

    SQLite files get their parent directory created.  An in-memory SQLite URL
    is pinned to one connection so every session sees the same database.
    """
    url = make_url(database_url)
    kwargs: dict[str, object] = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url.database):
            kwargs["poolclass"] = StaticPool
        else:
            Path(str(url.database)).expanduser().parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, **kwargs)
    logger.debug("Created database engine for {}", url.render_as_string(hide_password=True))
    return engine


def ensure_schema(engine: Engine) -> None:
    """Create the ``tasks`` table and its index when missing."""
    Base.metadata.create_all(engine)
