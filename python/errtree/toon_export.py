"""
Flat-table TOON export of error trees.

A rendered tree is for humans; agents and log pipelines prefer a uniform
table. flatten_tree() walks a tree depth-first and gives every node an id and
a parent_id reference, so the tree can be rebuilt from the flat rows:

    nodes[3]{id,parent_id,group,level,frames,location,message}:
      0,null,0,0,"",app/school.py:51,missed class
      1,0,0,1,"",null,stayed in bed too long
      2,1,0,2,"",null,bed is comfortable

encode_tree_toon() encodes the rows with toon_format and falls back to the
plain row list when TOON encoding fails.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from errtree.tree_types import MAX_ALLOWED_DEPTH, TreeNode

logger = logging.getLogger("errtree.toon")


@dataclass
class FlatNode:
    """
    One tree node flattened into a table row.

    Attributes:
        id: Unique identifier within this export (depth-first order)
        parent_id: Reference to the parent row (None for the root)
        group: Which tree this row belongs to when several are exported
        level: Depth in the tree (0 = root)
        data: Node fields, written at the top level of the row
    """

    id: int
    parent_id: Optional[int]
    group: int
    level: int
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a flat row with data fields at the top level.

        Every row has the same keys in the same order so TOON recognizes
        the rows as one uniform table: parent_id is always present and data
        keys are sorted.
        """
        result = {
            "id": self.id,
            "parent_id": self.parent_id,
            "group": self.group,
            "level": self.level,
        }
        for key in sorted(self.data.keys()):
            result[key] = self.data[key]
        return result


def _node_data(node: TreeNode) -> dict[str, Any]:
    frames = [f"{frame.target}::{frame.name}" for frame in node.frames() or ()]
    return {
        "message": node.message,
        "location": node.location,
        "frames": "; ".join(frames),
    }


def _flatten(
    node: TreeNode,
    result: list[FlatNode],
    parent_id: Optional[int],
    group: int,
    level: int,
    max_depth: int,
) -> None:
    node_id = len(result)
    result.append(
        FlatNode(
            id=node_id,
            parent_id=parent_id,
            group=group,
            level=level,
            data=_node_data(node),
        )
    )
    if level >= max_depth:
        return
    for child in node.children():
        _flatten(child, result, node_id, group, level + 1, max_depth)


def flatten_tree(
    node: TreeNode,
    group: int = 0,
    max_depth: int = MAX_ALLOWED_DEPTH,
) -> list[FlatNode]:
    """
    Flatten an error tree into rows with parent_id references.

    Args:
        node: Root of the tree
        group: Group id stamped on every row
        max_depth: Deepest level exported; deeper children are dropped

    Returns:
        Rows in depth-first order; the root has id 0
    """
    result: list[FlatNode] = []
    _flatten(node, result, None, group, 0, max_depth)
    return result


def flatten_trees(nodes: list[TreeNode], max_depth: int = MAX_ALLOWED_DEPTH) -> list[FlatNode]:
    """
    Flatten several trees into one table, one group per tree.

    Ids stay unique across the whole table.
    """
    result: list[FlatNode] = []
    for group, node in enumerate(nodes):
        offset = len(result)
        for row in flatten_tree(node, group=group, max_depth=max_depth):
            row.id += offset
            if row.parent_id is not None:
                row.parent_id += offset
            result.append(row)
    return result


def encode_tree_toon(
    node: Union[TreeNode, list[TreeNode]],
    max_depth: int = MAX_ALLOWED_DEPTH,
) -> Union[str, list[dict[str, Any]]]:
    """
    Encode one tree (or a list of trees) as a TOON table.

    Args:
        node: Root of the tree, or a list of roots
        max_depth: Deepest level exported

    Returns:
        TOON-encoded string, or the list of row dicts if TOON encoding fails
    """
    from toon_format import encode as toon_encode

    if isinstance(node, list):
        rows = flatten_trees(node, max_depth=max_depth)
    else:
        rows = flatten_tree(node, max_depth=max_depth)

    data = [row.to_dict() for row in rows]
    try:
        return toon_encode({"nodes": data})
    except Exception as e:
        logger.warning(f"TOON encoding failed, falling back to rows: {e}")
        return data
