"""HTTP service exposing parsing, preview and a builder session."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
