"""
Output sinks for the renderer and encoder.

A sink is anything with a write(str) method (files, io.StringIO, sys.stderr)
or a plain callable taking a string. A sink that raises aborts the whole
render or encode call; there is no partial retry.
"""

import logging
from typing import Any, Callable

logger = logging.getLogger("errtree.sink")

Writer = Callable[[str], Any]


class SinkWriteError(Exception):
    """The output sink rejected a write. The original error is the __cause__."""


def as_writer(sink: Any) -> Writer:
    """
    Normalize a sink into a write function that raises SinkWriteError.

    Args:
        sink: Object with a write(str) method, or a callable taking str

    Returns:
        Function writing one piece of text to the sink

    Raises:
        TypeError: If sink is neither writable nor callable
    """
    write = getattr(sink, "write", None)
    if write is None:
        if not callable(sink):
            raise TypeError(f"sink must have write() or be callable, got {type(sink).__name__}")
        write = sink

    def guarded_write(text: str) -> None:
        try:
            write(text)
        except SinkWriteError:
            raise
        except Exception as e:
            logger.debug(f"Sink write failed: {e}")
            raise SinkWriteError(f"output sink rejected write: {e}") from e

    return guarded_write
