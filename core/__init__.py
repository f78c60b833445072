"""
Core package for the Repetition Finder service.
Importing this package builds the shared FastAPI application and registers
its routes.
"""

from . import app_state  # noqa: F401
