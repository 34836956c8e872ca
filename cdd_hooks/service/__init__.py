"""HTTP status service for a CDD project."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
