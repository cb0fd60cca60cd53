"""
Log sink abstractions and concrete implementations.

Every sink runs the same pipeline for a call it accepts:
level check -> field extraction -> record building -> its own formatter -> write.
Only ``write`` differs between sinks.
"""

from __future__ import annotations

import gzip
import shutil
import sys
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .builder import build_record
from .extractor import extract
from .formatters import Formatter, HumanFormatter, StructuredFormatter, orjson_dumps
from .levels import Level, is_enabled
from .types import LogCall, LogRecord

# =============================================================================
# Configuration
# =============================================================================


class SinkConfig(BaseModel):
    """Options recognised by every sink. Unknown keys are kept in ``model_extra``
    and handed to the sink transport untouched."""

    model_config = ConfigDict(extra="allow")

    level: Level = Level.DEBUG
    colorize: bool = False
    json_mode: bool = Field(default=False, validation_alias=AliasChoices("json", "json_mode"))
    dirname: Optional[str] = None
    filename: Optional[str] = None
    maxsize: Optional[int] = Field(default=None, gt=0)
    zipped_archive: bool = Field(
        default=False,
        validation_alias=AliasChoices("zipped_archive", "zippedArchive"),
    )
    date_pattern: str = Field(
        default="%Y-%m-%d",
        validation_alias=AliasChoices("date_pattern", "datePattern"),
    )

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


_KEY_ALIASES = {"json_mode": "json", "zippedArchive": "zipped_archive", "datePattern": "date_pattern"}


def _normalize(config: Mapping[str, Any]) -> dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in config.items()}


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    Args:
        config: A ``SinkConfig`` or a mapping validated into one.
        **format_options: Passed to the formatter selected by ``config.json``.
    """

    DEFAULTS: Mapping[str, Any] = {"level": "debug", "json": False, "colorize": False}

    def __init__(self, config: SinkConfig | Mapping[str, Any] | None = None, **format_options: Any):
        if not isinstance(config, SinkConfig):
            config = SinkConfig.model_validate({**self.DEFAULTS, **_normalize(config or {})})
        self.config = config
        self.options = config.options
        self.formatter = self._make_formatter(**format_options)

    def _make_formatter(self, **format_options: Any) -> Formatter:
        if self.config.json_mode:
            return StructuredFormatter(**format_options)
        return HumanFormatter(colorize=self.config.colorize, **format_options)

    def enabled(self, level: str | Level) -> bool:
        return is_enabled(level, self.config.level)

    def emit(self, call: LogCall) -> None:
        """Run the formatting pipeline for ``call`` and write the result."""
        if not self.enabled(call.level):
            return
        extraction = extract(call.args, call.metadata)
        record = build_record(call.level, None, call.message, extraction)
        self.write(self.formatter.render(record, extraction), record)

    @abstractmethod
    def write(self, payload: str | dict[str, Any], record: LogRecord) -> None:
        """Persist or display one rendered record."""
        ...

    def close(self) -> None:
        """Close the sink and release resources."""


class StreamSink(BaseSink):
    """Writes to any object with a ``write`` method.

    Args:
        stream: Output stream; may also be given as the ``stream`` config key.
        object_mode: Hand structured dicts to ``stream.write`` as-is instead of
            serializing them to JSON lines.
    """

    def __init__(
        self,
        config: SinkConfig | Mapping[str, Any] | None = None,
        *,
        stream: Any = None,
        object_mode: Optional[bool] = None,
        **format_options: Any,
    ):
        super().__init__(config, **format_options)
        if stream is None:
            stream = self.options.get("stream")
        self._stream = stream if stream is not None else self._default_stream()
        if object_mode is None:
            object_mode = bool(self.options.get("object_mode", self.options.get("objectMode", False)))
        self._object_mode = object_mode

    def _default_stream(self) -> IO[str]:
        return sys.stderr

    @property
    def stream(self) -> Any:
        return self._stream

    def write(self, payload: str | dict[str, Any], record: LogRecord) -> None:
        if isinstance(payload, dict):
            if self._object_mode:
                self._stream.write(payload)
            else:
                self._stream.write(orjson_dumps(payload) + "\n")
        else:
            self._stream.write(payload + "\n")
        flush = getattr(self._stream, "flush", None)
        if callable(flush):
            flush()


class ConsoleSink(StreamSink):
    """Human-readable, colored output on stdout by default."""

    DEFAULTS = {"level": "debug", "json": False, "colorize": True}

    def _default_stream(self) -> IO[str]:
        return sys.stdout


class FileSink(BaseSink):
    """Local file sink with a dated filename and size rotation (JSON lines by default).

    ``filename`` may contain ``%DATE%``, replaced with today's date in
    ``date_pattern``; a new file is started when the date changes. Once the
    active file grows past ``maxsize`` it is renamed to ``<name>.1`` (older
    generations shift up) and gzip-compressed when ``zipped_archive`` is set.
    """

    DEFAULTS = {
        "level": "debug",
        "dirname": "logs",
        "filename": "log-%DATE%.log",
        "json": True,
        "zipped_archive": True,
        "maxsize": 10 * 1024 * 1024,  # 10MB
        "colorize": False,
    }

    def __init__(self, config: SinkConfig | Mapping[str, Any] | None = None, **format_options: Any):
        super().__init__(config, **format_options)
        self._dirname = Path(self.config.dirname or self.DEFAULTS["dirname"])
        self._template = self.config.filename or self.DEFAULTS["filename"]
        self._encoding = self.options.get("encoding", "utf-8")
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._file: Optional[IO[str]] = None

    def path_for(self, moment: Optional[datetime] = None) -> Path:
        date = (moment or datetime.now()).strftime(self.config.date_pattern)
        return self._dirname / self._template.replace("%DATE%", date)

    def write(self, payload: str | dict[str, Any], record: LogRecord) -> None:
        line = payload if isinstance(payload, str) else orjson_dumps(payload)
        with self._lock:
            path = self.path_for()
            handle = self._file
            if handle is None or path != self._path:
                handle = self._open(path)
            handle.write(line + "\n")
            handle.flush()
            self._maybe_rotate(path)

    def _open(self, path: Path) -> IO[str]:
        if self._file is not None:
            self._file.close()
        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._file = open(path, "a", encoding=self._encoding)
        return self._file

    def _generation(self, path: Path, index: int) -> Path:
        suffix = ".gz" if self.config.zipped_archive else ""
        return path.with_name(f"{path.name}.{index}{suffix}")

    def _maybe_rotate(self, path: Path) -> None:
        maxsize = self.config.maxsize
        if not maxsize or path.stat().st_size <= maxsize:
            return
        if self._file is not None:
            self._file.close()
            self._file = None

        try:
            last = 1
            while self._generation(path, last).exists():
                last += 1
            for index in range(last - 1, 0, -1):
                self._generation(path, index).rename(self._generation(path, index + 1))

            rotated = path.with_name(f"{path.name}.1")
            path.rename(rotated)
            if self.config.zipped_archive:
                with open(rotated, "rb") as src, gzip.open(self._generation(path, 1), "wb") as dst:
                    shutil.copyfileobj(src, dst)
                rotated.unlink()
        finally:
            # A failed rotation keeps appending to the active file.
            self._open(path)

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


# =============================================================================
# Factories
# =============================================================================

SINK_KINDS: dict[str, type[BaseSink]] = {
    "console": ConsoleSink,
    "stream": StreamSink,
    "file": FileSink,
}


def create_sink(
    config: Mapping[str, Any] | SinkConfig | None = None,
    kind: str | type[BaseSink] = "console",
    **format_options: Any,
) -> BaseSink:
    """Create a sink of ``kind`` with ``config`` laid over the kind's defaults.

    Args:
        config: Recognised options (level, colorize, json, dirname, filename,
            maxsize, zipped_archive); anything else reaches the sink as-is.
        kind: ``"console"``, ``"stream"``, ``"file"`` or a ``BaseSink`` subclass.
        **format_options: Formatter options (``level_width``/``tag_width`` for
            human output, ``fields`` for structured output).
    """
    if isinstance(kind, str):
        try:
            sink_cls = SINK_KINDS[kind.strip().lower()]
        except KeyError:
            raise ValueError(f"unknown sink kind: {kind!r}") from None
    elif isinstance(kind, type) and issubclass(kind, BaseSink):
        sink_cls = kind
    else:
        raise ValueError(f"unknown sink kind: {kind!r}")
    return sink_cls(config, **format_options)


def console_sink(config: Mapping[str, Any] | None = None, **format_options: Any) -> BaseSink:
    return create_sink(config, "console", **format_options)


def file_sink(config: Mapping[str, Any] | None = None, **format_options: Any) -> BaseSink:
    return create_sink(config, "file", **format_options)
