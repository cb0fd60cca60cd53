"""
Severity levels.

Six fixed levels, ordered from most to least severe. A sink configured with a
threshold emits every call whose level is at least as severe as the threshold.
"""

from __future__ import annotations

from enum import Enum


class Level(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    VERBOSE = "verbose"
    DEBUG = "debug"
    SILLY = "silly"

    @property
    def priority(self) -> int:
        return _PRIORITIES[self]

    @classmethod
    def parse(cls, value: str | Level) -> Level:
        """Resolve a level name (case-insensitive, ``warning`` is accepted for ``warn``)."""
        if isinstance(value, Level):
            return value
        name = str(value).strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown log level: {value!r}") from None

    def __str__(self) -> str:
        return self.value


_PRIORITIES = {level: index for index, level in enumerate(Level)}

_ALIASES = {"warning": "warn"}

LEVELS: tuple[Level, ...] = tuple(Level)


def is_enabled(level: str | Level, threshold: str | Level) -> bool:
    """Return True when ``level`` passes a sink configured at ``threshold``."""
    return Level.parse(level).priority <= Level.parse(threshold).priority
