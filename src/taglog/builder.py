"""
Record building.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from .levels import Level
from .types import Extraction, LogRecord

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Promoted to top-level record fields, never left inside extras.
PROMOTED_KEYS = ("message", "stack")


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now) in local time as ``YYYY-MM-DD HH:MM:SS.mmm +HHMM``.

    Hours use the 24-hour clock (``%H``), not a 12-hour ``hh`` without AM/PM.
    """
    local = (moment or datetime.now()).astimezone()
    return f"{local.strftime(TIMESTAMP_FORMAT)}.{local.microsecond // 1000:03d} {local.strftime('%z')}"


def build_record(
    level: str | Level,
    tag: Optional[str],
    message: Any,
    extraction: Extraction,
    *,
    now: Optional[datetime] = None,
) -> LogRecord:
    """Build the canonical record for one call.

    The raw message is kept untouched; text fragments stay on the record so
    the human renderer can append them. A missing tag becomes an empty string.
    """
    if tag is None:
        tag = extraction.tag
    extras = {key: value for key, value in extraction.extras.items() if key not in PROMOTED_KEYS}
    return LogRecord(
        timestamp=format_timestamp(now),
        level=Level.parse(level),
        tag=tag or "",
        message="" if message is None else str(message),
        extras=extras,
        stack=extraction.stack,
        text_fragments=extraction.text_fragments,
    )
