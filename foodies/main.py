from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
import uuid

import uvicorn

from foodies.api.http_app import SERVICE_NAME, build_app
from foodies.logging_setup import configure_logging
from foodies.services.bootstrap import build_runtime_container
from foodies.settings import settings_from_env


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Foodies meal sharing service")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument(
        "--dry-run-startup",
        action="store_true",
        help="Validate startup and exit",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable code reload (dev mode)",
    )
    return parser.parse_args(argv)


def create_runtime_app() -> object:
    settings = settings_from_env()
    run_id = str(uuid.uuid4())
    configure_logging()
    container = build_runtime_container(settings)
    return build_app(
        run_id=run_id,
        api_deps=container.api_deps,
        on_startup=container.on_startup,
        on_shutdown=container.on_shutdown,
    )


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = settings_from_env()
    if args.port is not None and args.port <= 0:
        sys.stderr.write(f"ERROR: invalid port {args.port}\n")
        return 2
    settings = dataclasses.replace(
        settings,
        host=args.host or settings.host,
        port=args.port or settings.port,
    )

    configure_logging()
    run_id = str(uuid.uuid4())
    logger = logging.getLogger("runtime")

    logger.info("runtime initialized", extra={"service": SERVICE_NAME, "run_id": run_id})

    if args.dry_run_startup:
        logger.info("dry-run startup complete", extra={"service": SERVICE_NAME, "run_id": run_id})
        return 0

    if args.reload:
        os.environ["APP_HOST"] = settings.host
        os.environ["APP_PORT"] = str(settings.port)
        uvicorn.run(
            "foodies.main:create_runtime_app",
            host=settings.host,
            port=settings.port,
            log_level="warning",
            reload=True,
            factory=True,
        )
    else:
        container = build_runtime_container(settings)
        app = build_app(
            run_id=run_id,
            api_deps=container.api_deps,
            on_startup=container.on_startup,
            on_shutdown=container.on_shutdown,
        )
        uvicorn.run(app, host=settings.host, port=settings.port, log_level="warning")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
