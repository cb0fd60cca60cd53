"""
Log formatters and color utilities.

Two rendering strategies over the same ``LogRecord``:

- ``HumanFormatter``: one aligned text line per record, optionally colored.
- ``StructuredFormatter``: a flat dict ready for JSON serialization.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Optional

import orjson

from .types import Extraction, LogRecord

# =============================================================================
# JSON Serialization
# =============================================================================

# orjson only encodes integers in this range
_INT_MIN, _INT_MAX = -(2**63), 2**64 - 1


def _widen(v: Any) -> Any:
    """Replace integers orjson cannot encode with their decimal string."""
    if isinstance(v, int) and not isinstance(v, bool):
        return v if _INT_MIN <= v <= _INT_MAX else str(v)
    if isinstance(v, Mapping):
        return {_widen(key): _widen(value) for key, value in v.items()}
    if isinstance(v, (list, tuple)):
        return [_widen(item) for item in v]
    return v


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Compact JSON serialization using orjson.

    Non-native values fall back to ``str``, non-string dict keys are
    stringified and integers wider than 64 bits are written as strings.
    """
    try:
        return orjson.dumps(v, default=default, option=orjson.OPT_NON_STR_KEYS).decode()
    except orjson.JSONEncodeError:
        return orjson.dumps(_widen(v), default=default, option=orjson.OPT_NON_STR_KEYS).decode()


# =============================================================================
# ANSI Color Codes
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    # Levels
    "error": "\033[31m",  # Red
    "warn": "\033[33m",  # Yellow
    "info": "\033[32m",  # Green
    "verbose": "\033[36m",  # Cyan
    "debug": "\033[2m",  # Dim
    "silly": "\033[2m",  # Dim
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


# =============================================================================
# Human Formatter (Aligned Columns)
# =============================================================================


class HumanFormatter:
    """Renders ``<timestamp> - <level:> <tag> <message>`` lines.

    Args:
        colorize: Wrap the whole line in the level's ANSI color.
        level_width: Minimum width of the ``level:`` column.
        tag_width: Minimum width of the tag column.
    """

    LEVEL_WIDTH = 8
    TAG_WIDTH = 20

    def __init__(
        self,
        *,
        colorize: bool = False,
        level_width: Optional[int] = None,
        tag_width: Optional[int] = None,
    ) -> None:
        self.use_color = colorize
        self.level_width = self.LEVEL_WIDTH if level_width is None else level_width
        self.tag_width = self.TAG_WIDTH if tag_width is None else tag_width

    def _header(self, record: LogRecord) -> str:
        level_label = f"{record.level.value}:".ljust(self.level_width)
        tag = (record.tag or "").ljust(self.tag_width)
        return f"{record.timestamp} - {level_label} {tag} {record.message}"

    def render(self, record: LogRecord, extraction: Optional[Extraction] = None) -> str:
        if extraction is not None and not extraction.supplied:
            # Plain single-string call: no decoration.
            line = record.message
        else:
            line = " ".join([self._header(record), *record.text_fragments])
        if record.stack:
            line += f"\n{record.stack}"
        if record.extras:
            line += f" {orjson_dumps(record.extras)}"
        if self.use_color:
            return colorize(line, record.level.value)
        return line


# =============================================================================
# Structured Formatter
# =============================================================================


class StructuredFormatter:
    """Renders a record as a flat dict with extras spread at the top level.

    Args:
        fields: Optional projection; only these keys are kept, in this order.
    """

    RECORD_KEYS = ("timestamp", "level", "tag", "message")

    def __init__(self, *, fields: Optional[Iterable[str]] = None) -> None:
        self.fields = tuple(fields) if fields is not None else None

    def render(self, record: LogRecord, extraction: Optional[Extraction] = None) -> dict[str, Any]:
        output: dict[str, Any] = {
            "timestamp": record.timestamp,
            "level": record.level.value,
            "tag": record.tag,
            "message": record.message,
        }
        for key, value in record.extras.items():
            if key not in self.RECORD_KEYS:
                output[key] = value
        if record.stack is not None:
            output["stack"] = record.stack
        if self.fields is not None:
            return {key: output[key] for key in self.fields if key in output}
        return output


Formatter = HumanFormatter | StructuredFormatter
