"""
Streaming encoder for error trees.

Output shape (keys always in this order, optional keys omitted):

    {"msg":"missed class","location":"app/school.py:51",
     "trace":[{"target":"school","name":"attend","fields":"","location":["app/school.py",38]}],
     "sources":[{"msg":"stayed in bed too long"}]}

(shown wrapped; the encoder writes a single line)

A frame recorded with a callsite carries it as a trailing "callsite" string,
so decoded frames deduplicate exactly like the live ones.

Only free text is escaped. Braces, brackets, commas and quotes that belong
to the format itself come from the encoder, never from user text.
"""

import io
import logging
from typing import Any, Iterable, Optional

from errtree.codec.escape import escape
from errtree.config import load_render_config
from errtree.lookahead import LookaheadIterator
from errtree.sink import as_writer
from errtree.tree_types import MAX_ALLOWED_DEPTH, ContextFrame, TreeNode

logger = logging.getLogger("errtree.codec")


def default_encode_depth() -> int:
    """One level past the render cap, so truncation markers survive a round trip."""
    return load_render_config()["max_depth"] + 1


class Encoder:
    """
    Writes the encoded form of a tree to a sink.

    Attributes:
        max_depth: Deepest level whose children are still written; nodes at
                   this depth are encoded without "sources"
        elided: Number of nodes whose children were dropped by max_depth
    """

    def __init__(self, sink: Any, max_depth: Optional[int] = None):
        if max_depth is None:
            max_depth = default_encode_depth()
        if max_depth < 0 or max_depth > MAX_ALLOWED_DEPTH + 1:
            raise ValueError(f"max_depth must be between 0 and {MAX_ALLOWED_DEPTH + 1}, got {max_depth}")
        self._write = as_writer(sink)
        self.max_depth = max_depth
        self.elided = 0

    def encode(self, node: TreeNode, depth: int = 0) -> None:
        """
        Encode node and its children.

        Raises:
            SinkWriteError: If the sink rejects a write
        """
        self._write('{"msg":')
        self._write_string(node.message)

        location = node.location
        if location is not None:
            self._write(',"location":')
            self._write_string(location)

        frames = list(node.frames() or ())
        if frames:
            self._write(',"trace":')
            self._write_frames(frames)

        children = LookaheadIterator(node.children())
        if not children.is_empty():
            if depth < self.max_depth:
                self._write(',"sources":[')
                for child, is_last in children:
                    self.encode(child, depth + 1)
                    if not is_last:
                        self._write(",")
                self._write("]")
            else:
                self.elided += 1

        self._write("}")

    def _write_string(self, text: str) -> None:
        self._write(f'"{escape(text)}"')

    def _write_frames(self, frames: Iterable[ContextFrame]) -> None:
        self._write("[")
        for index, frame in enumerate(frames):
            if index:
                self._write(",")
            self._write('{"target":')
            self._write_string(frame.target)
            self._write(',"name":')
            self._write_string(frame.name)
            self._write(',"fields":')
            self._write_string(frame.fields)
            if frame.location is not None:
                file, line = frame.location
                self._write(',"location":[')
                self._write_string(file)
                self._write(f",{int(line)}]")
            if frame.callsite is not None:
                self._write(',"callsite":')
                self._write_string(frame.callsite)
            self._write("}")
        self._write("]")


def encode_to(node: TreeNode, sink: Any, max_depth: Optional[int] = None) -> None:
    """Stream the encoded form of node into sink."""
    encoder = Encoder(sink, max_depth=max_depth)
    encoder.encode(node)
    if encoder.elided:
        logger.debug(f"Encoded tree with {encoder.elided} node(s) past depth {encoder.max_depth} cut")


def encode(node: TreeNode, max_depth: Optional[int] = None) -> str:
    """
    Encode a tree to its compact text form.

    Args:
        node: Root of the tree
        max_depth: Deepest level whose children are written
                   (default: render cap + 1)

    Returns:
        Encoded blob
    """
    out = io.StringIO()
    encode_to(node, out, max_depth=max_depth)
    return out.getvalue()
