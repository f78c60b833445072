"""
Repetition Finder - Application State
=====================================

Builds the FastAPI application: logging setup, middleware, routers and the
static upload page.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.gzip import GZipMiddleware
from pathlib import Path
import logging
import os
import sys

from config import TRUTHY_ENV_VALUES, config

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)

# Silence noisy third-party loggers to avoid cluttering output
_noisy_loggers = [
    'multipart',
    'multipart.multipart',
    'python_multipart',
    'uvicorn.access',
]
for _logger_name in _noisy_loggers:
    logging.getLogger(_logger_name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

FILE_LOGGING_ENV_VAR = "REPETITION_FILE_LOGGING"

if os.getenv(FILE_LOGGING_ENV_VAR, "").lower() in TRUTHY_ENV_VALUES:
    try:
        from file_logger import activate_file_logging, TeeOutput
        if not isinstance(sys.stdout, TeeOutput):
            activate_file_logging(config.LOG_DIR)
    except OSError as exc:
        logger.error(f"Failed to activate file logging in worker process: {exc}")

from analysis_router import router as analysis_router

app = FastAPI(
    title="Repetition Finder",
    description="Finds sentences and phrases repeated across the lines of uploaded documents",
    version="1.2.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Compress responses larger than 1000 bytes
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(analysis_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Static upload page is mounted last so API routes take precedence over "/"
_static_dir = Path(config.STATIC_DIR)
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(_static_dir), html=True), name="static")
else:
    logger.warning("Static directory %s not found; upload page disabled", _static_dir)
