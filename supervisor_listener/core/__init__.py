"""Core runtime support for the supervisor listener."""

from .logging import get_logger, setup_logging


__all__ = ["get_logger", "setup_logging"]
