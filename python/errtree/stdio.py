"""
Stdio hardening for printing trees.

Two things go wrong when trees are printed from a CLI:
1. The console encoding cannot represent box-drawing glyphs (cp1252, latin-1)
2. The reader closes the pipe early (`errtree render log.txt | head`)

ensure_utf8_encoding() fixes the first, handle_broken_pipe the second.
"""

import functools
import io
import os
import sys
from typing import Callable, TextIO, TypeVar

from errtree.sink import SinkWriteError

F = TypeVar("F", bound=Callable)


def _as_utf8(stream: TextIO) -> TextIO:
    """Rewrap a byte-backed text stream as UTF-8, leaving other streams alone."""
    if not hasattr(stream, "buffer"):
        return stream
    if (stream.encoding or "").lower() in ("utf-8", "utf8"):
        return stream
    return io.TextIOWrapper(
        stream.buffer,
        encoding="utf-8",
        errors="backslashreplace",
        line_buffering=stream.line_buffering,
    )


def ensure_utf8_encoding() -> None:
    """
    Make stdout and stderr write UTF-8.

    Call early in main(), before anything is printed.
    """
    sys.stdout = _as_utf8(sys.stdout)
    sys.stderr = _as_utf8(sys.stderr)


def _caused_by_broken_pipe(error: BaseException) -> bool:
    if isinstance(error, BrokenPipeError):
        return True
    return isinstance(error, SinkWriteError) and isinstance(error.__cause__, BrokenPipeError)


def _silence_stdout() -> None:
    # Interpreter shutdown flushes stdout again; point it at devnull first
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError, io.UnsupportedOperation):
        pass


def handle_broken_pipe(func: F) -> F:
    """
    Decorator that exits with status 0 when the reader goes away.

    Covers a BrokenPipeError raised directly by print()/write() and one
    wrapped in SinkWriteError by the renderer or encoder. Any other
    SinkWriteError propagates.

    Usage:
        @handle_broken_pipe
        def main():
            ...

    Args:
        func: Entry point to wrap

    Returns:
        Wrapped entry point
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (BrokenPipeError, SinkWriteError) as e:
            if not _caused_by_broken_pipe(e):
                raise
            _silence_stdout()
            sys.exit(0)

    return wrapper  # type: ignore
