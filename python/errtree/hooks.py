"""
Render uncaught exceptions as error trees.

    from errtree.hooks import install_excepthook
    install_excepthook()

After installation an uncaught exception prints its cause tree to stderr
instead of the default traceback. KeyboardInterrupt is left to the previous
hook so Ctrl-C keeps its usual behavior.
"""

import io
import logging
import sys
from typing import Any, Callable, Optional

from errtree.config import load_render_config
from errtree.live import ExceptionNode
from errtree.renderer import write_tree
from errtree.sink import SinkWriteError

logger = logging.getLogger("errtree.hooks")

_previous_hook: Optional[Callable] = None


def format_exception_tree(
    exc: BaseException,
    max_depth: Optional[int] = None,
    max_frames: Optional[int] = None,
    color: Optional[bool] = None,
    with_type: bool = True,
) -> str:
    """Render exc and its causes, prefixed with "Error: " like a report header."""
    out = io.StringIO()
    out.write("Error: ")
    write_tree(
        ExceptionNode(exc, with_type=with_type),
        out,
        max_depth=max_depth,
        max_frames=max_frames,
        color=color,
    )
    out.write("\n")
    return out.getvalue()


def install_excepthook(
    max_depth: Optional[int] = None,
    max_frames: Optional[int] = None,
    color: Optional[bool] = None,
    with_type: bool = True,
    stream: Any = None,
) -> None:
    """
    Replace sys.excepthook with an error tree renderer.

    Args:
        max_depth: Depth cap for rendered trees (default from config)
        max_frames: Frame table size (default from config)
        color: Italicize locations (default from config)
        with_type: Prefix each message with its exception type
        stream: Where trees are written (default: sys.stderr at raise time)

    Raises:
        ValueError: If max_depth or max_frames is out of range
    """
    global _previous_hook

    # Fail at install time, not at crash time
    load_render_config(max_depth=max_depth, max_frames=max_frames, color=color)

    if _previous_hook is None:
        _previous_hook = sys.excepthook

    def hook(exc_type, exc, tb):
        if issubclass(exc_type, KeyboardInterrupt):
            (_previous_hook or sys.__excepthook__)(exc_type, exc, tb)
            return
        if exc.__traceback__ is None:
            exc = exc.with_traceback(tb)
        target = stream if stream is not None else sys.stderr
        try:
            target.write(
                format_exception_tree(
                    exc,
                    max_depth=max_depth,
                    max_frames=max_frames,
                    color=color,
                    with_type=with_type,
                )
            )
            target.flush()
        except (OSError, SinkWriteError) as e:
            logger.error(f"Failed to render uncaught {exc_type.__name__}: {e}")
            (_previous_hook or sys.__excepthook__)(exc_type, exc, tb)

    sys.excepthook = hook
    logger.debug("Installed error tree excepthook")


def uninstall_excepthook() -> None:
    """Restore the excepthook that was active before install_excepthook()."""
    global _previous_hook

    if _previous_hook is not None:
        sys.excepthook = _previous_hook
        _previous_hook = None
        logger.debug("Restored previous excepthook")
