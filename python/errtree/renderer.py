"""
Recursive box-drawn rendering of error trees.

Example output:
    missed class
    ├─ at app/school.py:51
    │
    ├─ tracing frame 0 => school::attend
    │        at app/school.py:38
    │
    ╰─▶ stayed in bed too long
        │
        ├─▶ bed is comfortable
        │
        ╰─▶ went to sleep at 2 A.M.

The renderer only talks to TreeNode, so the same code renders live
exceptions and trees reconstructed from an encoded blob.
"""

import io
import logging
from typing import Any, Iterable, List, Optional, Tuple

from errtree.config import load_render_config
from errtree.dedup import Duplicate, FrameDeduplicator
from errtree.lookahead import LookaheadIterator
from errtree.nesting import reflow_fields
from errtree.prefix import PrefixBuffer
from errtree.sink import as_writer
from errtree.tree_types import (
    ANNOTATION,
    ANNOTATION_LAST,
    ARROW,
    BLANK,
    CONTINUATION,
    CONTINUING,
    ContextFrame,
    LAST_ARROW,
    RAIL,
    TRUNCATION_MARKER,
    TreeNode,
)

logger = logging.getLogger("errtree.render")

ITALIC = "\x1b[3m"
RESET = "\x1b[0m"

FIELDS_INDENT = "    "
FRAME_LOCATION_INDENT = "        "


class Renderer:
    """
    Writes one error tree to a sink.

    The prefix buffer and frame deduplicator are scratch state for exactly
    one top-level render. Build a new Renderer (or use write_tree /
    render_tree) for every tree; never share one between threads.

    Attributes:
        prefix: Left-margin connector buffer; its capacity caps the depth
        dedup: Frame identities already printed in this render
        color: Italicize locations with ANSI escapes
    """

    def __init__(
        self,
        sink: Any,
        prefix: PrefixBuffer,
        dedup: FrameDeduplicator,
        color: bool = False,
    ):
        self._write = as_writer(sink)
        self.prefix = prefix
        self.dedup = dedup
        self.color = color
        self.truncated = 0

    def render(self, node: TreeNode, depth: int = 0) -> None:
        """
        Write node and, recursively, its children.

        Annotation glyphs look ahead: a location or frame line only gets the
        terminal glyph when nothing else follows it for this node.

        Args:
            node: Error view to render
            depth: Recursion depth of node (0 for the root)

        Raises:
            SinkWriteError: If the sink rejects a write
        """
        self._write_message(node.message)

        fresh, duplicates = self._classify_frames(node.frames())
        has_frames = bool(fresh or duplicates)
        children = LookaheadIterator(node.children())
        has_children = not children.is_empty()

        location = node.location
        if location is not None:
            last = not has_frames and not has_children
            self._write_line(ANNOTATION_LAST if last else ANNOTATION)
            self._write(f"at {self._style_location(location)}")

        if has_frames:
            if location is not None:
                self._write_line(RAIL)
            self._write_frames(fresh, duplicates, has_children)

        if has_children:
            self._write_children(children, depth)

    def _write_line(self, text: str) -> None:
        self._write(f"\n{self.prefix.text}{text}")

    def _write_message(self, message: str) -> None:
        # Continuation goes after each newline, not before each line
        if "\n" in message:
            message = message.replace("\n", f"\n{self.prefix.text}{CONTINUATION}")
        self._write(message)

    def _style_location(self, location: str) -> str:
        if self.color:
            return f"{ITALIC}{location}{RESET}"
        return location

    def _classify_frames(
        self, frames: Optional[Iterable[ContextFrame]]
    ) -> Tuple[List[Tuple[int, ContextFrame]], List[int]]:
        """Split frames into (number, frame) pairs to print and back-reference indices."""
        fresh: List[Tuple[int, ContextFrame]] = []
        duplicates: List[int] = []
        for frame in frames or ():
            seen = self.dedup.observe(frame.identity)
            if isinstance(seen, Duplicate):
                duplicates.append(seen.index)
            else:
                fresh.append((seen.number, frame))
        return fresh, duplicates

    def _write_frames(
        self,
        fresh: List[Tuple[int, ContextFrame]],
        duplicates: List[int],
        has_children: bool,
    ) -> None:
        for position, (number, frame) in enumerate(fresh):
            last = position == len(fresh) - 1 and not duplicates and not has_children
            glyph, rail = (ANNOTATION_LAST, " ") if last else (ANNOTATION, RAIL)

            self._write_line(f"{glyph}tracing frame {number} => {frame.target}::{frame.name}")
            if frame.fields:
                self._write(" with")
                for line in reflow_fields(frame.fields):
                    self._write_line(f"{rail}{FIELDS_INDENT}{line}")
            if frame.location is not None:
                file, line_no = frame.location
                styled = self._style_location(f"{file}:{line_no}")
                self._write_line(f"{rail}{FRAME_LOCATION_INDENT}at {styled}")

        if duplicates:
            glyph = ANNOTATION if has_children else ANNOTATION_LAST
            indices = ", ".join(str(index) for index in duplicates)
            self._write_line(f"{glyph}{len(duplicates)} duplicate tracing frame(s): [{indices}]")

    def _write_children(self, children: LookaheadIterator, depth: int) -> None:
        # CONTINUING and BLANK are the same width, so one check covers both
        if not self.prefix.can_push(CONTINUING):
            self.truncated += 1
            logger.debug(f"Depth cap reached at depth {depth}, eliding children")
            self._write_line(TRUNCATION_MARKER)
            return

        for child, is_last in children:
            self._write_line(RAIL)
            self._write_line(LAST_ARROW if is_last else ARROW)
            mark = self.prefix.push(BLANK if is_last else CONTINUING)
            try:
                self.render(child, depth + 1)
            finally:
                self.prefix.truncate(mark)


def write_tree(
    node: TreeNode,
    sink: Any,
    max_depth: Optional[int] = None,
    max_frames: Optional[int] = None,
    color: Optional[bool] = None,
) -> None:
    """
    Render an error tree into a sink with fresh per-call scratch state.

    Args:
        node: Root of the tree
        sink: Object with write(str), or a callable taking str
        max_depth: Nested levels before branches are cut (default from config)
        max_frames: Frame identities remembered (default from config)
        color: Italicize locations (default from config)

    Raises:
        SinkWriteError: If the sink rejects a write
        ValueError: If max_depth or max_frames is out of range
    """
    config = load_render_config(max_depth=max_depth, max_frames=max_frames, color=color)
    renderer = Renderer(
        sink,
        PrefixBuffer.for_depth(config["max_depth"]),
        FrameDeduplicator(config["max_frames"]),
        color=config["color"],
    )
    renderer.render(node)
    if renderer.truncated:
        logger.debug(f"Rendered tree with {renderer.truncated} truncated branch(es)")


def render_tree(
    node: TreeNode,
    max_depth: Optional[int] = None,
    max_frames: Optional[int] = None,
    color: Optional[bool] = None,
) -> str:
    """
    Render an error tree to a string.

    Example:
        >>> from errtree.live import ErrTreeNode
        >>> tree = ErrTreeNode("missed class", sources=[ErrTreeNode("overslept")])
        >>> print(render_tree(tree))
        missed class
        │
        ╰─▶ overslept
    """
    out = io.StringIO()
    write_tree(node, out, max_depth=max_depth, max_frames=max_frames, color=color)
    return out.getvalue()
