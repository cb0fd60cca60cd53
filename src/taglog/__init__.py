"""
taglog: tagged, structured logging facade.

A single log call is fanned out to every sink bound to a Logger:
- console: human-readable aligned lines, colored by level
- stream: any writable object (text lines, JSON lines or raw dicts)
- file: dated JSON-lines files with size rotation and gzip archives

Design Pattern: Strategy Pattern for sinks and formatters.
Library: structlog for internal diagnostics, orjson for JSON serialization,
pydantic / pydantic-settings for configuration.
"""

from .builder import build_record, format_timestamp
from .core import configure_logging, get_logger
from .extractor import classify, extract
from .formatters import HumanFormatter, StructuredFormatter
from .levels import LEVELS, Level
from .logger import Logger
from .merge import deep_merge, merge_defaults
from .registry import SinkRegistry, default_registry
from .sinks import (
    BaseSink,
    ConsoleSink,
    FileSink,
    SinkConfig,
    StreamSink,
    console_sink,
    create_sink,
    file_sink,
)
from .types import ArgumentKind, CallMetadata, Extraction, LogCall, LogRecord

__all__ = [
    "ArgumentKind",
    "BaseSink",
    "CallMetadata",
    "ConsoleSink",
    "Extraction",
    "FileSink",
    "HumanFormatter",
    "LEVELS",
    "Level",
    "LogCall",
    "LogRecord",
    "Logger",
    "SinkConfig",
    "SinkRegistry",
    "StreamSink",
    "StructuredFormatter",
    "build_record",
    "classify",
    "configure_logging",
    "console_sink",
    "create_sink",
    "deep_merge",
    "default_registry",
    "extract",
    "file_sink",
    "format_timestamp",
    "get_logger",
    "merge_defaults",
]
