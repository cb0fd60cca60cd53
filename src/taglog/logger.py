"""
Logger facade.

A ``Logger`` holds a tag, a default level, extra fields and the sinks it was
bound to at construction. Each call becomes one ``LogCall`` handed to every
sink; a failing sink is reported on the diagnostics channel and never breaks
the caller.
"""

from __future__ import annotations

import copy
import sys
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .core import get_logger
from .levels import Level
from .registry import SinkRegistry, default_registry
from .sinks import BaseSink
from .types import CallMetadata, LogCall

diagnostics = get_logger("taglog.diagnostics")


class Logger:
    """Tagged logger broadcasting to a fixed set of sinks.

    Args:
        tag: Label of the subsystem issuing the calls. Must be non-empty.
        default_level: Level used by ``log``.
        sinks: One sink or an iterable of sinks. Defaults to a snapshot of
            ``registry`` taken now.
        extra_fields: Fields added to every record unless the call supplies
            the same key.
        registry: Registry used when ``sinks`` is None.
    """

    def __init__(
        self,
        tag: str,
        default_level: str | Level = "info",
        sinks: BaseSink | Iterable[BaseSink] | None = None,
        extra_fields: Optional[Mapping[str, Any]] = None,
        *,
        registry: SinkRegistry = default_registry,
    ):
        if not tag:
            raise ValueError("tag must be a non-empty string")
        self.tag = tag
        self.default_level = Level.parse(default_level)
        if sinks is None:
            self.sinks: tuple[BaseSink, ...] = registry.snapshot()
        elif isinstance(sinks, BaseSink):
            self.sinks = (sinks,)
        else:
            self.sinks = tuple(sinks)
        self.extra_fields: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(extra_fields or {})))
        self._metadata = CallMetadata(tag=tag, extra_fields=self.extra_fields)

    def __repr__(self) -> str:
        return f"Logger(tag={self.tag!r}, default_level={self.default_level.value!r}, sinks={len(self.sinks)})"

    def child(self, tag_suffix: Optional[str] = None, **extra_fields: Any) -> Logger:
        """Derive a logger sharing these sinks, with a suffixed tag and more fields."""
        tag = f"{self.tag}:{tag_suffix}" if tag_suffix else self.tag
        return Logger(tag, self.default_level, self.sinks, {**self.extra_fields, **extra_fields})

    def _log(self, level: Level, message: Any, args: tuple[Any, ...]) -> None:
        call = LogCall(level=level, message=message, args=args, metadata=self._metadata)
        for sink in self.sinks:
            try:
                sink.emit(call)
            except Exception:
                diagnostics.exception(
                    "sink_emit_failed",
                    sink=type(sink).__name__,
                    tag=self.tag,
                    level=level.value,
                )

    def log(self, message: Any, *args: Any) -> None:
        self._log(self.default_level, message, args)

    def error(self, message: Any, *args: Any) -> None:
        self._log(Level.ERROR, message, args)

    def warn(self, message: Any, *args: Any) -> None:
        self._log(Level.WARN, message, args)

    warning = warn

    def info(self, message: Any, *args: Any) -> None:
        self._log(Level.INFO, message, args)

    def verbose(self, message: Any, *args: Any) -> None:
        self._log(Level.VERBOSE, message, args)

    def debug(self, message: Any, *args: Any) -> None:
        self._log(Level.DEBUG, message, args)

    def silly(self, message: Any, *args: Any) -> None:
        self._log(Level.SILLY, message, args)

    def exception(self, message: Any, *args: Any) -> None:
        """Log at error level, appending the exception currently being handled."""
        exc = sys.exc_info()[1]
        if exc is not None and not any(arg is exc for arg in args):
            args = (*args, exc)
        self._log(Level.ERROR, message, args)
