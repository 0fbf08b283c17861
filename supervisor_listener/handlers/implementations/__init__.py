"""Built-in handler implementations.

- LoggingHandler: structured logging of every notification
"""

from .logging import LoggingHandler


__all__ = ["LoggingHandler"]
