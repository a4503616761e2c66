"""
DuckDB-based oracle for range queries.

Coordinates are kept in an in-memory DuckDB table and range queries are
answered with a plain SQL filter, independently of the quadtree code.
"""

from typing import Dict, Iterable, List, Optional

import duckdb

from .oracle import RangeOracle
from .quadtree import Point, QuadTree, Rectangle


class DuckDBOracle(RangeOracle):
    """
    Oracle implementation backed by an in-memory DuckDB table.

    Only coordinates go to the database, keyed by an insertion sequence
    number; the Point records themselves stay in a Python dict.
    """

    def __init__(self, database: str = ":memory:"):
        """
        Initialize the DuckDB oracle.

        Args:
            database: DuckDB database path (in-memory by default)
        """
        self._points: Dict[int, Point] = {}
        self._next_key = 0

        self._con: Optional[duckdb.DuckDBPyConnection] = duckdb.connect(database)
        self._con.execute("""
            CREATE TABLE points (
                seq BIGINT PRIMARY KEY,
                x DOUBLE NOT NULL,
                y DOUBLE NOT NULL
            )
        """)

    def _connection(self) -> duckdb.DuckDBPyConnection:
        if self._con is None:
            raise RuntimeError("DuckDBOracle is closed")
        return self._con

    def add(self, point: Point) -> None:
        self.add_batch([point])

    def add_batch(self, points: Iterable[Point]) -> None:
        """
        Record several points with a single INSERT.

        Rows are keyed by an insertion sequence number rather than the
        point id, since points from different trees may share ids.
        """
        con = self._connection()
        points = list(points)
        first = self._next_key
        rows = [
            (first + i, float(point.x), float(point.y))
            for i, point in enumerate(points)
        ]
        if not rows:
            return

        con.executemany("INSERT INTO points VALUES (?, ?, ?)", rows)
        for seq, point in enumerate(points, start=first):
            self._points[seq] = point
        self._next_key += len(points)

    def query(self, rect: Rectangle) -> List[Point]:
        """
        Return every recorded point inside rect.

        Args:
            rect: Half-open query rectangle

        Returns:
            Matching points in insertion order
        """
        result = self._connection().execute("""
            SELECT seq
            FROM points
            WHERE x >= ? AND x < ? AND y >= ? AND y < ?
            ORDER BY seq
        """, [rect.xmin, rect.xmax, rect.ymin, rect.ymax]).fetchall()

        return [self._points[seq] for (seq,) in result]

    def count(self, rect: Rectangle) -> int:
        """Count recorded points inside rect without fetching them."""
        (total,) = self._connection().execute("""
            SELECT COUNT(*)
            FROM points
            WHERE x >= ? AND x < ? AND y >= ? AND y < ?
        """, [rect.xmin, rect.xmax, rect.ymin, rect.ymax]).fetchone()
        return total

    def __len__(self) -> int:
        return len(self._points)

    def close(self) -> None:
        """Close the database connection."""
        if getattr(self, "_con", None) is not None:
            self._con.close()
            self._con = None

    def __del__(self):
        """Cleanup on garbage collection."""
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_oracle_from_tree(tree: QuadTree) -> DuckDBOracle:
    """
    Convenience function to load every point of a tree into a DuckDB oracle.

    Points are added in point id order, i.e. the order they were inserted.

    Args:
        tree: Tree whose points to load

    Returns:
        DuckDBOracle holding the tree's points
    """
    oracle = DuckDBOracle()
    oracle.add_batch(sorted(tree.iter_points(), key=lambda p: p.point_id))
    return oracle
