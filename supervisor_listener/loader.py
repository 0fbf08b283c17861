"""Resolve handler import paths such as ``mypackage.handlers:on_exit``."""

import importlib
from collections.abc import Iterable

import structlog

from supervisor_listener.exceptions import HandlerLoadError
from supervisor_listener.handlers import EventHandler, as_handler


logger = structlog.get_logger(__name__)


def load_handler(path: str) -> EventHandler:
    """Import ``module:attribute`` and turn the attribute into a handler.

    The attribute may be an EventHandler instance, an EventHandler subclass
    (instantiated without arguments) or a ``(listener, notification)``
    callable.

    Raises:
        HandlerLoadError: If the module or attribute cannot be resolved
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise HandlerLoadError(path, "expected 'package.module:attribute'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerLoadError(path, str(e)) from e

    target: object = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise HandlerLoadError(
                path, f"module {module_name!r} has no attribute {attribute!r}"
            ) from e

    try:
        handler = as_handler(target)
    except TypeError as e:
        raise HandlerLoadError(path, str(e)) from e

    logger.debug("handler_loaded", path=path, handler=handler.name)
    return handler


def load_handlers(paths: Iterable[str]) -> list[EventHandler]:
    return [load_handler(path) for path in paths]
