"""
Compact text codec for error trees.

encode() turns any TreeNode into a single-line blob suitable for logs,
databases or transport. decode() gives back a TreeNode that scans the blob
in place, so the renderer can rebuild the same tree later:

    blob = encode(ExceptionNode(exc))
    ...
    print(reconstruct_output(blob))
"""

from typing import Optional

from errtree.codec.encoder import Encoder, encode, encode_to
from errtree.codec.escape import escape, unescape
from errtree.codec.scanner import ScannedNode, decode, read_string
from errtree.renderer import render_tree


def reconstruct_output(
    blob: str,
    max_depth: Optional[int] = None,
    max_frames: Optional[int] = None,
    color: Optional[bool] = None,
) -> str:
    """Decode a blob and render it as a tree."""
    return render_tree(decode(blob), max_depth=max_depth, max_frames=max_frames, color=color)


__all__ = [
    "Encoder",
    "ScannedNode",
    "decode",
    "encode",
    "encode_to",
    "escape",
    "read_string",
    "reconstruct_output",
    "unescape",
]
