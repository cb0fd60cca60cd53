from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from .levels import Level


class ArgumentKind(Enum):
    """Shape of a single positional argument passed to a log call."""

    TEXT = "text"  # printed literally after the message
    STRUCTURED = "structured"  # merged into the record's extras
    ERROR = "error"  # contributes message + stack


@dataclass(frozen=True)
class ClassifiedArgument:
    kind: ArgumentKind
    text: Optional[str] = None
    data: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class CallMetadata:
    """Tag and default fields attached by a Logger to each call it issues."""

    tag: str
    extra_fields: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class LogCall:
    """One invocation of a logging method, as handed to every sink."""

    level: Level
    message: Any
    args: Optional[Tuple[Any, ...]] = None
    metadata: Optional[CallMetadata] = None


@dataclass(frozen=True)
class Extraction:
    """Result of splitting call arguments into text, data and stack."""

    text_fragments: Tuple[str, ...] = ()
    extras: dict[str, Any] = field(default_factory=dict)
    tag: Optional[str] = None
    supplied: bool = False

    @property
    def stack(self) -> Optional[str]:
        stack = self.extras.get("stack")
        return stack if isinstance(stack, str) else None


@dataclass(frozen=True)
class LogRecord:
    """Canonical record built once per call and sink, discarded after rendering."""

    timestamp: str
    level: Level
    tag: str
    message: str
    extras: dict[str, Any] = field(default_factory=dict)
    stack: Optional[str] = None
    text_fragments: Tuple[str, ...] = ()
