"""
Configuration for the Repetition Finder service
===============================================

Central configuration for the analyzer limits, upload handling and the HTTP
server. Values come from defaults, then from a .env file, then from environment
variables. Malformed numeric overrides are ignored and the previous value stays.
"""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent
TRUTHY_ENV_VALUES = {"1", "true", "yes", "on"}


class AnalyzerSettings(BaseModel):
    """Limits applied before running the repetition analyzer."""

    max_input_chars: int = Field(
        default=2_000_000,
        ge=0,
        description="Maximum characters accepted per analyzed input (0 disables the limit)",
    )


class UploadSettings(BaseModel):
    """Upload ingestion configuration and limits."""

    max_size_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Maximum allowed size of a single uploaded file in bytes",
    )
    max_files_per_request: int = Field(
        default=20,
        ge=1,
        description="Maximum files accepted in a single analyze request",
    )
    allowed_extensions: List[str] = Field(
        default_factory=lambda: [".txt", ".docx", ".rtf", ".html", ".htm"],
        description="File extensions the text extraction layer can read",
    )


def _int_from_env(name: str, minimum: int = 0) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        parsed = int(raw)
    except ValueError:
        return None
    if parsed < minimum:
        return None
    return parsed


class Config(BaseModel):
    """Configuration settings for the Repetition Finder service."""

    ANALYZER: AnalyzerSettings = Field(default_factory=AnalyzerSettings, description="Analyzer limits")
    UPLOADS: UploadSettings = Field(default_factory=UploadSettings, description="Upload ingestion settings")

    APP_HOST: str = Field(default="0.0.0.0", description="FastAPI host")
    APP_PORT: int = Field(default=8000, description="FastAPI port")
    APP_RELOAD: bool = Field(default=False, description="FastAPI reload mode")
    APP_WORKERS: int = Field(default=1, ge=1, description="Gunicorn worker processes")
    STATIC_DIR: str = Field(default=str(PROJECT_ROOT / "static"), description="Directory served at /")
    LOG_DIR: str = Field(default="logs", description="Base directory for hourly file logs")
    VERBOSE_PHASE_LOGS: bool = Field(default=False, description="Log phase headers and timing summaries per batch")

    def __init__(self, **data):
        super().__init__(**data)
        self.load_from_environment()

    def load_from_environment(self):
        """Load configuration overrides from environment variables."""
        max_chars = _int_from_env("ANALYZER_MAX_INPUT_CHARS", minimum=0)
        if max_chars is not None:
            self.ANALYZER.max_input_chars = max_chars

        max_size = _int_from_env("UPLOADS_MAX_SIZE_BYTES", minimum=1)
        if max_size is not None:
            self.UPLOADS.max_size_bytes = max_size

        max_files = _int_from_env("UPLOADS_MAX_FILES_PER_REQUEST", minimum=1)
        if max_files is not None:
            self.UPLOADS.max_files_per_request = max_files

        self.APP_HOST = os.getenv("APP_HOST", self.APP_HOST)

        port = _int_from_env("APP_PORT", minimum=1)
        if port is not None:
            self.APP_PORT = port

        reload_flag = os.getenv("APP_RELOAD")
        if reload_flag:
            self.APP_RELOAD = reload_flag.lower() in TRUTHY_ENV_VALUES

        workers = _int_from_env("APP_WORKERS", minimum=1)
        if workers is not None:
            self.APP_WORKERS = workers

        self.STATIC_DIR = os.getenv("STATIC_DIR", self.STATIC_DIR)
        self.LOG_DIR = os.getenv("LOG_DIR", self.LOG_DIR)

        verbose_flag = os.getenv("VERBOSE_PHASE_LOGS")
        if verbose_flag:
            self.VERBOSE_PHASE_LOGS = verbose_flag.lower() in TRUTHY_ENV_VALUES


# Global configuration instance
config = Config()
