"""
Region quadtree data structures.

This module defines the rectangle representation, the stored point record,
the tree nodes and the tree itself. Leaves hold up to a configured number
of points and split into four quadrants when that capacity is exceeded.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Tuple
import itertools
import logging
import math

from .config import QuadTreeConfig
from .errors import OutOfBoundsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rectangle:
    """
    An axis-aligned rectangle with half-open extents.

    Covers [xmin, xmax) x [ymin, ymax), so that the four quadrants produced
    by subdivide() partition their parent without gaps or overlap.
    """
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self):
        if not (self.xmin < self.xmax and self.ymin < self.ymax):
            raise ValueError(
                f"Invalid rectangle: xmin={self.xmin}, xmax={self.xmax}, "
                f"ymin={self.ymin}, ymax={self.ymax}"
            )

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    def contains(self, x: float, y: float) -> bool:
        """Check if point (x, y) is within this rectangle."""
        return self.xmin <= x < self.xmax and self.ymin <= y < self.ymax

    def intersects(self, other: Rectangle) -> bool:
        """Check if the two rectangles share any area."""
        return (
            self.xmin < other.xmax and other.xmin < self.xmax
            and self.ymin < other.ymax and other.ymin < self.ymax
        )

    def midpoints(self) -> Tuple[float, float]:
        """
        Calculate the split coordinates for subdivision.

        Returns:
            Tuple of (xm, ym) where:
            - xm = xmax - width / 2
            - ym = ymax - height / 2
        """
        return self.xmax - self.width / 2, self.ymax - self.height / 2

    def is_divisible(self) -> bool:
        """Check if both axes can still be halved in floating point."""
        xm, ym = self.midpoints()
        return self.xmin < xm < self.xmax and self.ymin < ym < self.ymax

    def subdivide(self) -> List[Rectangle]:
        """
        Subdivide rectangle into 4 children (quadrants).

        Child order (fixed for consistency):
        - 0: low x, low y
        - 1: high x, low y
        - 2: low x, high y
        - 3: high x, high y

        Returns:
            List of 4 Rectangle objects.
        """
        xm, ym = self.midpoints()
        return [
            Rectangle(self.xmin, xm, self.ymin, ym),
            Rectangle(xm, self.xmax, self.ymin, ym),
            Rectangle(self.xmin, xm, ym, self.ymax),
            Rectangle(xm, self.xmax, ym, self.ymax),
        ]

    def child_index_for_point(self, x: float, y: float) -> int:
        """
        Determine which child quadrant contains point (x, y).

        Returns:
            Child index in subdivide() order
        """
        if not self.contains(x, y):
            raise ValueError(f"Point ({x}, {y}) not in rectangle {self}")

        xm, ym = self.midpoints()
        index = 0
        if x >= xm:
            index += 1
        if y >= ym:
            index += 2
        return index

    def corners(self) -> List[Tuple[float, float]]:
        """Corners in probe order: (min, min), (min, max), (max, max), (max, min)."""
        return [
            (self.xmin, self.ymin),
            (self.xmin, self.ymax),
            (self.xmax, self.ymax),
            (self.xmax, self.ymin),
        ]


@dataclass(eq=False)
class Point:
    """
    A point stored in the tree.

    leaf_id names the leaf that held the point when it was last placed.
    It is an identifier, not a reference; use QuadTree.locate() when the
    current leaf is needed.
    """
    x: float
    y: float
    payload: Any = None
    point_id: int = -1
    leaf_id: Optional[int] = None


@dataclass(eq=False)
class QuadTreeNode:
    """
    A node in the quadtree.

    Leaves keep their points in insertion order. Internal nodes own exactly
    four children, ordered as in Rectangle.subdivide().
    """
    node_id: int
    rect: Rectangle
    depth: int
    is_leaf: bool = True
    points: List[Point] = field(default_factory=list)
    children: List[QuadTreeNode] = field(default_factory=list)

    def contains(self, x: float, y: float) -> bool:
        return self.rect.contains(x, y)

    def child_for_point(self, x: float, y: float) -> Optional[QuadTreeNode]:
        """Return the child whose rectangle holds (x, y), or None if outside."""
        if self.is_leaf or not self.contains(x, y):
            return None
        return self.children[self.rect.child_index_for_point(x, y)]

    def iter_nodes(self) -> Iterator[QuadTreeNode]:
        """Iterate over this subtree in preorder."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def node_count(self) -> int:
        """Return total number of nodes in this subtree."""
        return 1 + sum(child.node_count() for child in self.children)

    def leaf_count(self) -> int:
        """Return number of leaf nodes in this subtree."""
        if self.is_leaf:
            return 1
        return sum(child.leaf_count() for child in self.children)

    def max_depth(self) -> int:
        """Return the depth of the deepest node in this subtree."""
        if self.is_leaf:
            return self.depth
        return max(child.max_depth() for child in self.children)


class QuadTree:
    """
    A point region quadtree over a fixed rectangular domain.

    Usage:
        tree = QuadTree(QuadTreeConfig(max_points_per_leaf=4))
        tree.insert(12.5, 40.0, payload="a")
        leaf = tree.locate(12.5, 40.0)
        hits = tree.query((0, 0), (50, 50))

    The root is split at construction and never holds points itself; its
    four children sit at depth 1.
    """

    def __init__(self, config: Optional[QuadTreeConfig] = None):
        """
        Initialize an empty quadtree.

        Args:
            config: Tree configuration (defaults to QuadTreeConfig())
        """
        self.config = config if config is not None else QuadTreeConfig()
        self.bounds = Rectangle(
            self.config.xmin, self.config.xmax, self.config.ymin, self.config.ymax
        )
        self._node_ids = itertools.count(1)
        self._point_ids = itertools.count(1)
        self._size = 0

        self.root = self._new_node(self.bounds, depth=0)
        self._split(self.root)

    def _new_node(self, rect: Rectangle, depth: int) -> QuadTreeNode:
        return QuadTreeNode(node_id=next(self._node_ids), rect=rect, depth=depth)

    def _split(self, node: QuadTreeNode) -> List[Point]:
        """Turn a leaf into an internal node and return the points it held."""
        displaced = node.points
        node.children = [
            self._new_node(rect, node.depth + 1) for rect in node.rect.subdivide()
        ]
        node.points = []
        node.is_leaf = False
        return displaced

    def _check_bounds(self, x: float, y: float) -> None:
        if not self.bounds.contains(x, y):
            raise OutOfBoundsError(x, y, self.bounds)

    def _descend(self, node: QuadTreeNode, x: float, y: float) -> QuadTreeNode:
        """Walk from node down to the leaf whose rectangle holds (x, y)."""
        while not node.is_leaf:
            child = node.child_for_point(x, y)
            if child is None:
                raise OutOfBoundsError(x, y, self.bounds)
            node = child
        return node

    def _has_room(self, leaf: QuadTreeNode) -> bool:
        if len(leaf.points) + 1 <= self.config.max_points_per_leaf:
            return True
        if leaf.depth + 1 > self.config.max_depth or not leaf.rect.is_divisible():
            logger.debug(
                "Leaf %d at depth %d over capacity with %d points",
                leaf.node_id, leaf.depth, len(leaf.points) + 1,
            )
            return True
        return False

    def _insert_from(self, start: QuadTreeNode, point: Point) -> None:
        """
        Place a point below start, splitting full leaves on the way.

        A split reinserts the displaced points followed by the incoming one.
        The stack replays them depth-first, in the same order a recursive
        reinsertion would, without growing the call stack.
        """
        stack = [(start, point)]
        while stack:
            node, current = stack.pop()
            leaf = self._descend(node, current.x, current.y)

            if self._has_room(leaf):
                leaf.points.append(current)
                current.leaf_id = leaf.node_id
                continue

            displaced = self._split(leaf)
            displaced.append(current)
            logger.debug(
                "Split leaf %d at depth %d, redistributing %d points",
                leaf.node_id, leaf.depth, len(displaced),
            )
            stack.extend((leaf, p) for p in reversed(displaced))

    def insert(self, x: float, y: float, payload: Any = None) -> Point:
        """
        Insert a point into the tree.

        Args:
            x: X coordinate
            y: Y coordinate
            payload: Arbitrary object carried with the point

        Returns:
            The stored Point record

        Raises:
            OutOfBoundsError: If (x, y) lies outside the tree's domain
        """
        self._check_bounds(x, y)
        point = Point(x, y, payload, point_id=next(self._point_ids))
        self._insert_from(self.root, point)
        self._size += 1
        return point

    def insert_many(self, items: Iterable[Tuple[Any, ...]]) -> List[Point]:
        """
        Insert (x, y) or (x, y, payload) tuples in order.

        Points inserted before an out-of-bounds item stay in the tree.
        """
        inserted = []
        for item in items:
            x, y, *rest = item
            inserted.append(self.insert(x, y, rest[0] if rest else None))
        return inserted

    def locate(self, x: float, y: float) -> QuadTreeNode:
        """
        Find the leaf whose rectangle contains (x, y).

        Raises:
            OutOfBoundsError: If (x, y) lies outside the tree's domain
        """
        self._check_bounds(x, y)
        return self._descend(self.root, x, y)

    def _probe(self, x: float, y: float) -> QuadTreeNode:
        """Locate the leaf nearest to (x, y), clamping it into the domain."""
        b = self.bounds
        x = min(max(x, b.xmin), math.nextafter(b.xmax, -math.inf))
        y = min(max(y, b.ymin), math.nextafter(b.ymax, -math.inf))
        return self._descend(self.root, x, y)

    def query(self, corner1: Any, corner2: Any) -> List[Point]:
        """
        Return stored points inside the box spanned by two corners.

        Corners may be given in either orientation, as (x, y) pairs or as
        objects with x and y attributes. The box is half-open like every
        node rectangle.

        Only the leaves under the four box corners are searched, in the
        order (min, min), (min, max), (max, max), (max, min). Points in
        leaves lying strictly inside the box are therefore not returned,
        and a point is repeated once per corner whose leaf holds it.
        Corners outside the domain are clamped onto its edge.

        Returns:
            Matching points in leaf concatenation order
        """
        box = box_from_corners(corner1, corner2)
        if box is None or not box.intersects(self.bounds):
            return []

        candidates: List[Point] = []
        for x, y in box.corners():
            candidates.extend(self._probe(x, y).points)

        return [p for p in candidates if box.contains(p.x, p.y)]

    def iter_nodes(self) -> Iterator[QuadTreeNode]:
        """Iterate over every node, root included, in preorder."""
        return self.root.iter_nodes()

    def iter_leaves(self) -> Iterator[QuadTreeNode]:
        return (node for node in self.iter_nodes() if node.is_leaf)

    def iter_points(self) -> Iterator[Point]:
        for leaf in self.iter_leaves():
            yield from leaf.points

    def pformat(self) -> str:
        """Render the tree as indented text."""
        from .render import format_tree
        return format_tree(self)

    def pprint(self, stream=None) -> None:
        """Write the rendered tree to stream (stdout by default)."""
        from .render import print_tree
        print_tree(self, stream)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return (
            f"QuadTree(bounds={self.bounds}, points={self._size}, "
            f"nodes={self.node_count})"
        )

    @property
    def node_count(self) -> int:
        """Total number of nodes in the tree, root included."""
        return self.root.node_count()

    @property
    def leaf_count(self) -> int:
        """Number of leaf nodes in the tree."""
        return self.root.leaf_count()

    @property
    def depth(self) -> int:
        """Depth of the deepest leaf."""
        return self.root.max_depth()


def corner_coords(corner: Any) -> Tuple[float, float]:
    if hasattr(corner, "x") and hasattr(corner, "y"):
        return corner.x, corner.y
    x, y = corner
    return x, y


def box_from_corners(corner1: Any, corner2: Any) -> Optional[Rectangle]:
    """
    Build the query box spanned by two corners in either orientation.

    Returns:
        Rectangle, or None if the box has zero width or height
    """
    x1, y1 = corner_coords(corner1)
    x2, y2 = corner_coords(corner2)
    xmin, xmax = min(x1, x2), max(x1, x2)
    ymin, ymax = min(y1, y2), max(y1, y2)
    if not (xmin < xmax and ymin < ymax):
        return None
    return Rectangle(xmin, xmax, ymin, ymax)


def create_quadtree(
    xmin: float = 0.0,
    xmax: float = 100.0,
    ymin: float = 0.0,
    ymax: float = 100.0,
    max_points_per_leaf: int = 20,
    max_depth: int = 10,
    points: Optional[Iterable[Tuple[Any, ...]]] = None,
) -> QuadTree:
    """
    Convenience function to build a quadtree.

    Args:
        xmin, xmax, ymin, ymax: Domain of the tree
        max_points_per_leaf: Leaf capacity below max_depth
        max_depth: Maximum leaf depth
        points: Optional (x, y) or (x, y, payload) tuples to insert

    Returns:
        QuadTree with the points inserted
    """
    config = QuadTreeConfig(
        xmin=xmin,
        xmax=xmax,
        ymin=ymin,
        ymax=ymax,
        max_points_per_leaf=max_points_per_leaf,
        max_depth=max_depth,
    )
    tree = QuadTree(config)
    if points is not None:
        tree.insert_many(points)
    return tree
