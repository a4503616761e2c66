"""
Reference oracles for range queries.

An oracle answers a range query exactly, by brute force, and serves as
ground truth when checking what the quadtree's corner-probe query returns.
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, List

from .quadtree import Point, QuadTree, Rectangle, box_from_corners


class RangeOracle(ABC):
    """
    Abstract base class for exact range query oracles.

    Points are returned in the order they were added.
    """

    @abstractmethod
    def add(self, point: Point) -> None:
        """Record a point."""
        pass

    def add_batch(self, points: Iterable[Point]) -> None:
        """
        Record several points.

        Default implementation calls add() for each point.
        Subclasses may override for better performance.
        """
        for point in points:
            self.add(point)

    @abstractmethod
    def query(self, rect: Rectangle) -> List[Point]:
        """
        Return every recorded point inside rect.

        Args:
            rect: Half-open query rectangle

        Returns:
            Matching points in insertion order
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class ScanOracle(RangeOracle):
    """Oracle that scans a plain list."""

    def __init__(self, points: Iterable[Point] = ()):
        self._points: List[Point] = list(points)

    def add(self, point: Point) -> None:
        self._points.append(point)

    def query(self, rect: Rectangle) -> List[Point]:
        return [p for p in self._points if rect.contains(p.x, p.y)]

    def __len__(self) -> int:
        return len(self._points)


@dataclass
class QueryAudit:
    """Comparison of a corner-probe query against an oracle."""

    returned: List[Point] = field(default_factory=list)
    expected: List[Point] = field(default_factory=list)
    missed: List[Point] = field(default_factory=list)
    duplicates: int = 0

    @property
    def is_complete(self) -> bool:
        """True if every expected point was returned at least once."""
        return not self.missed


def audit_query(
    tree: QuadTree,
    oracle: RangeOracle,
    corner1: Any,
    corner2: Any,
) -> QueryAudit:
    """
    Run tree.query() and compare the result with the oracle.

    Args:
        tree: Tree to query
        oracle: Oracle holding the same points as the tree
        corner1, corner2: Query box corners, in either orientation

    Returns:
        QueryAudit listing missed points and the number of extra copies
    """
    returned = tree.query(corner1, corner2)

    box = box_from_corners(corner1, corner2)
    expected = oracle.query(box) if box is not None else []

    # Points compare by identity
    seen = Counter(id(p) for p in returned)
    missed = [p for p in expected if id(p) not in seen]
    duplicates = sum(count - 1 for count in seen.values())

    return QueryAudit(
        returned=returned,
        expected=expected,
        missed=missed,
        duplicates=duplicates,
    )
