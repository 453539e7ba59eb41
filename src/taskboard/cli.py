from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Settings, load_settings
from .domain.models import BOARD_COLUMNS, TaskPriority, TaskStatus
from .errors import TaskBoardError
from .logging_utils import configure_logging, pretty
from .server import create_app
from .storage.container import Container


def _settings(args: argparse.Namespace) -> Settings:
    project_dir = Path(args.project_dir).expanduser().resolve() if args.project_dir else None
    overrides = {
        "database_url": args.database_url,
        "log_level": args.log_level,
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
    }
    return load_settings(project_dir, overrides=overrides)


def _ctx(args: argparse.Namespace) -> Container:
    settings = _settings(args)
    configure_logging(settings.log_level)
    return Container(settings.database_url)


def _emit(payload: object) -> int:
    sys.stdout.write(pretty(payload) + '\n')
    return 0


def _fail(exc: TaskBoardError) -> int:
    sys.stderr.write(exc.message + '\n')
    return 1


def _task_create(args: argparse.Namespace) -> int:
    container = _ctx(args)
    try:
        task = container.service.create_task(
            title=args.title,
            description=args.description,
            priority=args.priority,
            due_date=args.due_date,
        )
    except TaskBoardError as exc:
        return _fail(exc)
    finally:
        container.close()
    return _emit({'task': task.to_dict()})


def _render_board(columns: dict[TaskStatus, list]) -> None:
    table = Table(title='Task Board')
    for status in BOARD_COLUMNS:
        table.add_column(f'{status.label} ({len(columns[status])})')
    depth = max((len(tasks) for tasks in columns.values()), default=0)
    for i in range(depth):
        row = []
        for status in BOARD_COLUMNS:
            tasks = columns[status]
            if i < len(tasks):
                task = tasks[i]
                due = f' due {task.due_date.isoformat()}' if task.due_date else ''
                row.append(f'{escape(task.title)} ({task.priority.value}){due}\n{task.id}')
            else:
                row.append('')
        table.add_row(*row)
    Console().print(table)


def _task_list(args: argparse.Namespace) -> int:
    container = _ctx(args)
    try:
        if args.board:
            columns = container.service.board()
            if args.status:
                columns = {status: (tasks if status.value == args.status else []) for status, tasks in columns.items()}
            _render_board(columns)
            return 0
        tasks = container.service.list_tasks()
    except TaskBoardError as exc:
        return _fail(exc)
    finally:
        container.close()
    if args.status:
        tasks = [task for task in tasks if task.status.value == args.status]
    return _emit({'tasks': [task.to_dict() for task in tasks]})


def _task_status(args: argparse.Namespace) -> int:
    container = _ctx(args)
    try:
        task = container.service.update_status(args.task_id, args.status)
    except TaskBoardError as exc:
        return _fail(exc)
    finally:
        container.close()
    return _emit({'task': task.to_dict()})


def _task_delete(args: argparse.Namespace) -> int:
    container = _ctx(args)
    try:
        task = container.service.delete_task(args.task_id)
    except TaskBoardError as exc:
        return _fail(exc)
    finally:
        container.close()
    return _emit({'deleted': task.to_dict()})


def _server(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        sys.stderr.write("Install server extras: pip install 'taskboard[server]'\n")
        return 1

    settings = _settings(args)
    configure_logging(settings.log_level)
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Task Board: a single-user Kanban task tracker')
    parser.add_argument('--project-dir', default=None, help='Directory holding .taskboard/ (default: current working directory)')
    parser.add_argument('--database-url', default=None, help='SQLAlchemy database URL (overrides config and environment)')
    parser.add_argument('--log-level', default=None, help='Log level (DEBUG, INFO, WARNING, ...)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    server = subparsers.add_parser('server', help='Start the web server')
    server.add_argument('--host', default=None)
    server.add_argument('--port', default=None, type=int)
    server.set_defaults(func=_server)

    statuses = [s.value for s in TaskStatus]
    priorities = [p.value for p in TaskPriority]

    task = subparsers.add_parser('task', help='Manage tasks')
    task_sub = task.add_subparsers(dest='task_cmd', required=True)
    tcreate = task_sub.add_parser('create', help='Create a task')
    tcreate.add_argument('title')
    tcreate.add_argument('--description', default=None)
    tcreate.add_argument('--priority', default='MEDIUM', choices=priorities)
    tcreate.add_argument('--due-date', default=None, help='YYYY-MM-DD')
    tcreate.set_defaults(func=_task_create)
    tlist = task_sub.add_parser('list', help='List tasks, newest first')
    tlist.add_argument('--status', default=None, choices=statuses)
    tlist.add_argument('--board', action='store_true', help='Render the three board columns')
    tlist.set_defaults(func=_task_list)
    tstatus = task_sub.add_parser('status', help='Change a task status')
    tstatus.add_argument('task_id')
    tstatus.add_argument('status')
    tstatus.set_defaults(func=_task_status)
    tdelete = task_sub.add_parser('delete', help='Delete a task')
    tdelete.add_argument('task_id')
    tdelete.set_defaults(func=_task_delete)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == '__main__':
    raise SystemExit(main())
