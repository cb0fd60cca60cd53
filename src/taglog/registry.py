"""
Default sink collection.

Loggers created without explicit sinks take a snapshot of a registry at
construction time. Sinks registered afterwards are not seen by loggers that
already exist.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from .sinks import BaseSink


class SinkRegistry:
    """Append-only collection of sinks shared by loggers."""

    def __init__(self, sinks: Iterable[BaseSink] = ()):
        self._lock = threading.Lock()
        self._sinks: list[BaseSink] = list(sinks)

    def register(self, sink: BaseSink) -> BaseSink:
        with self._lock:
            self._sinks.append(sink)
        return sink

    def snapshot(self) -> tuple[BaseSink, ...]:
        with self._lock:
            return tuple(self._sinks)

    def close(self) -> None:
        """Close every registered sink and empty the registry."""
        with self._lock:
            sinks, self._sinks = self._sinks, []
        for sink in sinks:
            sink.close()

    def __iter__(self) -> Iterator[BaseSink]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sinks)


# Process-wide default, used when a Logger is given neither sinks nor a registry.
default_registry = SinkRegistry()
