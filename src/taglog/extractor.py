"""
Field extraction.

Splits the positional arguments of one log call into:

- text fragments, printed after the message by the human renderer,
- structured extras, merged into a single mapping,
- error information (``message`` + ``stack``) taken from exceptions.

Each argument is classified first (see ``classify``) and only then merged, so
the shape checks live in a single place.
"""

from __future__ import annotations

import dataclasses
import traceback
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel

from .core import get_logger
from .formatters import orjson_dumps
from .merge import deep_merge, merge_defaults
from .types import ArgumentKind, CallMetadata, ClassifiedArgument, Extraction

logger = get_logger("taglog.diagnostics")


def format_exception_stack(exc: BaseException) -> str:
    """Render an exception the way the interpreter prints it, without the trailing newline."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip("\n")


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return orjson_dumps(value)
    except TypeError:
        return str(value)


def classify(arg: Any) -> ClassifiedArgument:
    """Decide whether ``arg`` is text, structured data or an error."""
    if isinstance(arg, BaseException):
        return ClassifiedArgument(
            ArgumentKind.ERROR,
            data={"message": str(arg), "stack": format_exception_stack(arg)},
        )
    if isinstance(arg, Mapping):
        if "stack" in arg:
            return ClassifiedArgument(
                ArgumentKind.ERROR,
                data={"message": arg.get("message"), "stack": arg["stack"]},
            )
        return ClassifiedArgument(ArgumentKind.STRUCTURED, data=dict(arg))
    if isinstance(arg, BaseModel):
        return ClassifiedArgument(ArgumentKind.STRUCTURED, data=arg.model_dump(mode="json"))
    if dataclasses.is_dataclass(arg) and not isinstance(arg, type):
        return ClassifiedArgument(ArgumentKind.STRUCTURED, data=dataclasses.asdict(arg))
    return ClassifiedArgument(ArgumentKind.TEXT, text=_text(arg))


def extract(
    call_args: Optional[Sequence[Any]],
    metadata: Optional[CallMetadata] = None,
) -> Extraction:
    """Extract text fragments, extras and stack from the arguments after the message.

    Args:
        call_args: Positional arguments that followed the message, or None.
        metadata: Tag and extra fields attached by the issuing Logger.

    Returns:
        An Extraction. ``supplied`` is False only when neither arguments nor
        metadata were given.
    """
    fragments: list[str] = []
    extras: dict[str, Any] = {}

    if call_args is not None and not isinstance(call_args, (list, tuple)):
        logger.warning(
            "call_args_not_a_sequence",
            args_type=type(call_args).__name__,
            args=repr(call_args)[:200],
        )
        call_args = ()

    for arg in call_args or ():
        classified = classify(arg)
        if classified.kind is ArgumentKind.TEXT:
            fragments.append(classified.text or "")
        else:
            extras = deep_merge(extras, classified.data or {})

    tag = None
    if metadata is not None:
        tag = metadata.tag
        if metadata.extra_fields:
            extras = merge_defaults(extras, metadata.extra_fields)

    return Extraction(
        text_fragments=tuple(fragments),
        extras=extras,
        tag=tag,
        supplied=call_args is not None or metadata is not None,
    )
