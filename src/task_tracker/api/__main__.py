"""
task_tracker.api.__main__

Command-line entrypoint (`task-tracker` or `python -m task_tracker.api`).

Usage:
    task-tracker                      # same as `serve`
    task-tracker serve
    task-tracker init-db [--drop]
    task-tracker create-admin --email ops@example.com --password ...

Settings come from `TASKS_*` environment variables for every command.
"""

from __future__ import annotations

import argparse
import asyncio

import uvicorn

from task_tracker.api.app import create_app
from task_tracker.db.init_db import init_db
from task_tracker.db.session import create_engine, create_sessionmaker
from task_tracker.observability.logging import configure_logging, get_logger
from task_tracker.services.auth_service import AuthService, bootstrap_admin
from task_tracker.settings import Settings, get_settings

log = get_logger(__name__)


def _serve(settings: Settings, _args: argparse.Namespace) -> None:
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


async def _init_db(settings: Settings, args: argparse.Namespace) -> None:
    engine = create_engine(settings)
    try:
        await init_db(engine, drop=args.drop)
        await bootstrap_admin(create_sessionmaker(engine), settings)
    finally:
        await engine.dispose()
    log.info("db.initialized", dropped=args.drop)


async def _create_admin(settings: Settings, args: argparse.Namespace) -> None:
    engine = create_engine(settings)
    try:
        async with create_sessionmaker(engine)() as session:
            user = await AuthService(session=session, settings=settings).ensure_admin(
                email=args.email, password=args.password
            )
    finally:
        await engine.dispose()
    print(f"{user.email} is now an ADMIN")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="task-tracker", description="Task Tracker service")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="run the HTTP API")

    p_init = sub.add_parser("init-db", help="create tables and seed the bootstrap admin")
    p_init.add_argument("--drop", action="store_true", help="drop existing tables first")

    p_admin = sub.add_parser("create-admin", help="create or promote an ADMIN account")
    p_admin.add_argument("--email", required=True)
    p_admin.add_argument("--password", required=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(
        service_name=settings.service_name, level=settings.log_level, json=settings.log_json
    )

    if args.command == "init-db":
        asyncio.run(_init_db(settings, args))
    elif args.command == "create-admin":
        asyncio.run(_create_admin(settings, args))
    else:
        _serve(settings, args)


if __name__ == "__main__":
    main()
