"""HTTP service mode for codecity."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
