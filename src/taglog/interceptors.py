"""
Interceptors for capturing standard library logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .levels import Level

if TYPE_CHECKING:
    from .logger import Logger


def level_for(levelno: int) -> Level:
    """Map a stdlib level number onto the closest taglog level."""
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    if levelno >= logging.DEBUG:
        return Level.DEBUG
    return Level.SILLY


class TaglogHandler(logging.Handler):
    """
    Redirect standard library logging records to a taglog Logger.

    The stdlib logger name travels as a ``logger`` field; an attached
    exception is passed on so its traceback lands in the record's stack.
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET):
        super().__init__(level)
        self.logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            args: list[object] = [{"logger": record.name}]
            if record.exc_info and record.exc_info[1] is not None:
                args.append(record.exc_info[1])
            method = getattr(self.logger, level_for(record.levelno).value)
            method(record.getMessage(), *args)
        except Exception:
            self.handleError(record)


def intercept_loggers(logger: Logger, *names: str, level: int = logging.NOTSET) -> TaglogHandler:
    """Replace the handlers of the named stdlib loggers (root by default) with a TaglogHandler."""
    handler = TaglogHandler(logger)
    for name in names or ("",):
        lg = logging.getLogger(name or None)
        lg.handlers = [handler]
        if level:
            lg.setLevel(level)
        if name:
            lg.propagate = False
    return handler
