"""Command line interface for the supervisor listener."""

from .main import app, main


__all__ = ["app", "main"]
