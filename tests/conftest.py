import typing as t

import pytest

from taglog import Logger, SinkRegistry, create_sink


class Collector:
    """Writable stand-in for a stream; keeps every chunk it receives."""

    def __init__(self) -> None:
        self.data: list[t.Any] = []

    def write(self, chunk: t.Any) -> None:
        self.data.append(chunk)

    def flush(self) -> None:
        pass

    def text(self) -> str:
        return "".join(self.data)


TAG = "test-tag"


@pytest.fixture
def collector() -> Collector:
    return Collector()


@pytest.fixture
def registry() -> SinkRegistry:
    """Isolated default sink collection, so tests never touch process-wide state."""
    return SinkRegistry()


@pytest.fixture
def make_logger(collector: Collector) -> t.Callable[..., Logger]:
    """
    Build a debug-level logger writing to ``collector``.

    ``object_mode=True`` gives a structured sink handing dicts to the stream;
    otherwise a human-readable, uncolored sink.
    """

    def _make(object_mode: bool = False, extra_fields: t.Optional[dict] = None, **config: t.Any) -> Logger:
        sink = create_sink(
            {"stream": collector, "json": object_mode, "object_mode": object_mode, **config},
            "stream",
        )
        return Logger(TAG, "debug", sink, extra_fields)

    return _make
