"""
Text rendering of a quadtree for debugging.

Each node is shown as [node_id]; leaves list their points beneath it and
internal nodes list their four children, one indentation level deeper.
"""

import sys
from typing import List, Optional, TextIO

from .quadtree import Point, QuadTree, QuadTreeNode

INDENT = "  "


def format_point(point: Point) -> str:
    text = f"#{point.point_id} ({point.x}, {point.y})"
    if point.payload is not None:
        text += f" payload={point.payload!r}"
    return text


def _render_node(node: QuadTreeNode, level: int, lines: List[str]) -> None:
    prefix = INDENT * level
    lines.append(f"{prefix}[{node.node_id}]")

    if node.is_leaf:
        for point in node.points:
            lines.append(f"{prefix}{INDENT}{format_point(point)}")
    else:
        for child in node.children:
            _render_node(child, level + 1, lines)


def format_tree(tree: QuadTree) -> str:
    """Render the whole tree, starting at its root node."""
    lines: List[str] = []
    _render_node(tree.root, 0, lines)
    return "\n".join(lines) + "\n"


def print_tree(tree: QuadTree, stream: Optional[TextIO] = None) -> None:
    (stream or sys.stdout).write(format_tree(tree))
