"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from .config import LoggingSettings
    from .registry import SinkRegistry
    from .sinks import BaseSink


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance (used for taglog's own diagnostics)."""
    return structlog.get_logger(_name=name or "root")


# =============================================================================
# Configuration Logic
# =============================================================================


def _initialize_sinks(settings: LoggingSettings) -> list[BaseSink]:
    """Create the sinks named in ``settings.sinks``."""
    from .sinks import create_sink

    human_options = {"level_width": settings.level_width, "tag_width": settings.tag_width}
    sinks: list[BaseSink] = []
    for name in (s.strip().lower() for s in settings.sinks.split(",")):
        if not name:
            continue
        if name == "console":
            json_mode = settings.format == "json"
            sinks.append(
                create_sink(
                    {"level": settings.level, "colorize": settings.colorize, "json": json_mode},
                    "console",
                    **({} if json_mode else human_options),
                )
            )
        elif name == "file":
            sinks.append(
                create_sink(
                    {
                        "level": settings.level,
                        "dirname": settings.dirname,
                        "filename": settings.filename,
                        "maxsize": settings.maxsize,
                        "zipped_archive": settings.zipped_archive,
                    },
                    "file",
                )
            )
        else:
            get_logger("taglog.diagnostics").warning("unknown_sink_name", sink=name)
    return sinks


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    *,
    registry: Optional[SinkRegistry] = None,
) -> list[BaseSink]:
    """
    Configure the default sink collection from settings.

    Existing sinks in the registry are closed and replaced. When
    ``settings.intercept_stdlib`` is set, the stdlib root logger is redirected
    into a taglog ``Logger`` tagged ``settings.stdlib_tag``.

    Args:
        settings: Logging settings; defaults to ``taglog.config.settings.logging``.
        registry: Registry to populate; defaults to the process-wide one.

    Returns:
        The sinks that were registered.
    """
    from .config import settings as app_settings
    from .registry import default_registry

    settings = settings or app_settings.logging
    registry = registry if registry is not None else default_registry

    # 1. Replace sinks
    registry.close()
    sinks = _initialize_sinks(settings)
    for sink in sinks:
        registry.register(sink)

    # 2. Redirect stdlib logging
    if settings.intercept_stdlib:
        from .interceptors import intercept_loggers
        from .logger import Logger

        intercept_loggers(Logger(settings.stdlib_tag, sinks=sinks), level=logging.DEBUG)

    return sinks
