"""
errtree - box-drawn error trees for Python

Renders an error and everything that caused it as a tree, with context
frames, deduplicated back-references and a depth cap, and carries the same
tree through a compact single-line encoding for logs and transport.
"""

__version__ = "0.1.0"

from errtree.codec import decode, encode, reconstruct_output
from errtree.live import ErrTreeNode, ExceptionNode, TreeError, as_tree_node
from errtree.prefix import PrefixOverflowError
from errtree.renderer import render_tree, write_tree
from errtree.sink import SinkWriteError
from errtree.spans import current_frames, span
from errtree.tree_types import ContextFrame, TreeNode

__all__ = [
    "ContextFrame",
    "ErrTreeNode",
    "ExceptionNode",
    "PrefixOverflowError",
    "SinkWriteError",
    "TreeError",
    "TreeNode",
    "as_tree_node",
    "current_frames",
    "decode",
    "encode",
    "reconstruct_output",
    "render_tree",
    "span",
    "write_tree",
]
