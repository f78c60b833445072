"""
Entrypoint for the Repetition Finder service.
Imports the core package, which builds the FastAPI application and registers
all routes, then starts the server.
"""

from __future__ import annotations

import argparse
import os
import platform
import sys

import core  # noqa: F401  # Ensure route modules are imported for side effects
from core.app_state import FILE_LOGGING_ENV_VAR, app, logger  # noqa: F401
from config import config


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Repetition Finder")
    parser.add_argument(
        "--file-logging",
        action="store_true",
        help="Enable file logging (logs all output to <LOG_DIR>/yyyy-mm-dd/HH_00_00.log)",
    )
    parser.add_argument("--host", default=config.APP_HOST, help="Bind address")
    parser.add_argument("--port", type=int, default=config.APP_PORT, help="Bind port")
    return parser


if __name__ == "__main__":
    from file_logger import activate_file_logging

    args = build_arg_parser().parse_args()

    if args.file_logging:
        # Worker processes re-import core.app_state and pick this up from the environment
        os.environ[FILE_LOGGING_ENV_VAR] = "true"
        activate_file_logging(config.LOG_DIR)

    if platform.system() == "Linux":
        import subprocess

        cmd = [
            sys.executable,
            "-m",
            "gunicorn",
            "main:app",
            "--workers",
            str(config.APP_WORKERS),
            "--worker-class",
            "uvicorn.workers.UvicornWorker",
            "--bind",
            f"{args.host}:{args.port}",
        ]

        if config.APP_RELOAD:
            cmd.append("--reload")

        logger.info("Starting with gunicorn - %d workers", config.APP_WORKERS)
        logger.info("Command: %s", " ".join(cmd))
        subprocess.run(cmd, check=False)
    else:
        import uvicorn

        logger.info("Starting with uvicorn")
        uvicorn.run(
            "main:app",
            host=args.host,
            port=args.port,
            http="httptools",
            reload=config.APP_RELOAD,
        )
