"""Resolve runtime settings from defaults, `.taskboard/config.yaml` and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from loguru import logger

from .constants import (
    CONFIG_FILE,
    DATABASE_FILE,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    ENV_DATABASE_URL,
    ENV_LOG_LEVEL,
    STATE_DIR_NAME,
    VALID_LOG_LEVELS,
)


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def default_database_url(project_dir: Path) -> str:
    return f"sqlite:///{(project_dir / STATE_DIR_NAME / DATABASE_FILE).resolve()}"


def load_config_file(project_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        project_dir: Directory holding the `.taskboard/` folder.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = project_dir.resolve() / STATE_DIR_NAME / CONFIG_FILE
    if not path.exists():
        return {}, None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        return {}, f"Unable to read {path}: {exc}"
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return {}, f"{path} must contain a mapping at the top level"
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _coerce_port(raw: Any) -> Optional[int]:
    try:
        port = int(raw)
    except (TypeError, ValueError):
        return None
    return port if 0 < port < 65536 else None


def _coerce_log_level(raw: Any) -> Optional[str]:
    if isinstance(raw, str) and raw.strip().upper() in VALID_LOG_LEVELS:
        return raw.strip().upper()
    return None


def load_settings(
    project_dir: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """Build :class:`Settings`.

    Precedence, lowest first: built-in defaults, the YAML config file,
    environment variables, then *overrides* (CLI flags).  ``None`` values in
    *overrides* are ignored.
    """
    project_dir = (project_dir or Path.cwd()).resolve()
    env = os.environ if environ is None else environ
    settings = Settings(database_url=default_database_url(project_dir))

    config, err = load_config_file(project_dir)
    if err:
        logger.warning("Ignoring config file: {}", err)
    if isinstance(config.get("database_url"), str) and config["database_url"]:
        settings = replace(settings, database_url=config["database_url"])
    host = _get_nested(config, "server", "host")
    if isinstance(host, str) and host:
        settings = replace(settings, host=host)
    port = _coerce_port(_get_nested(config, "server", "port"))
    if port is not None:
        settings = replace(settings, port=port)
    level = _coerce_log_level(config.get("log_level"))
    if level:
        settings = replace(settings, log_level=level)

    if env.get(ENV_DATABASE_URL):
        settings = replace(settings, database_url=env[ENV_DATABASE_URL])
    level = _coerce_log_level(env.get(ENV_LOG_LEVEL))
    if level:
        settings = replace(settings, log_level=level)

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key == "port":
            value = int(value)
        elif key == "log_level":
            value = _coerce_log_level(value) or settings.log_level
        settings = replace(settings, **{key: value})
    return settings
