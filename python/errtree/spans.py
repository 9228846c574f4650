"""
Context frames for errors: a lightweight span stack.

Wrap operations in span() and any TreeError created inside picks up the
active frames, oldest-outer first:

    with span("billing", "charge_card", customer=7, amount="12.50"):
        with span("billing::gateway", "post"):
            raise TreeError("gateway timed out")

The stack lives in a ContextVar, so threads and asyncio tasks each see their
own frames.
"""

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional, Tuple

from errtree.tree_types import ContextFrame

_ACTIVE_FRAMES: ContextVar[Tuple[ContextFrame, ...]] = ContextVar(
    "errtree_active_frames",
    default=(),
)


def format_fields(fields: dict) -> str:
    """
    Render keyword fields as space-separated key=value text.

    Strings are written double-quoted with embedded quotes and backslashes
    escaped, so the renderer's reflow keeps each one on a single line.

    Example:
        >>> format_fields({"user": "John Smith", "retry": 2})
        'user="John Smith" retry=2'
    """
    parts = []
    for key, value in fields.items():
        text = json.dumps(value, ensure_ascii=False) if isinstance(value, str) else str(value)
        parts.append(f"{key}={text}")
    return " ".join(parts)


@contextmanager
def span(target: str, name: str, _location: Optional[Tuple[str, int]] = None, **fields: Any) -> Iterator[ContextFrame]:
    """
    Push a context frame for the duration of the block.

    Args:
        target: Subsystem name (e.g. module path)
        name: Operation name
        _location: Explicit (file, line); defaults to the caller's position
        **fields: Structured fields recorded with the frame

    Yields:
        The pushed ContextFrame
    """
    if _location is None:
        caller = sys._getframe(2)
        _location = (caller.f_code.co_filename, caller.f_lineno)

    frame = ContextFrame(
        target=target,
        name=name,
        fields=format_fields(fields),
        location=_location,
    )
    token = _ACTIVE_FRAMES.set(_ACTIVE_FRAMES.get() + (frame,))
    try:
        yield frame
    finally:
        _ACTIVE_FRAMES.reset(token)


def current_frames() -> Tuple[ContextFrame, ...]:
    """Active frames, oldest-outer to newest-inner."""
    return _ACTIVE_FRAMES.get()
