"""
region-quadtree: a 2-D point region quadtree.

This package provides a quadtree that partitions a rectangular domain into
quadrants as points are inserted, with point-to-leaf lookup, a corner-probe
range query, and exact reference oracles for checking query results.
"""

__version__ = "0.1.0"

from .errors import QuadTreeError, OutOfBoundsError, InvalidConfigurationError
from .config import QuadTreeConfig
from .quadtree import Rectangle, Point, QuadTreeNode, QuadTree, create_quadtree
from .render import format_tree, print_tree
from .oracle import RangeOracle, ScanOracle, QueryAudit, audit_query
from .duckdb_oracle import DuckDBOracle, create_oracle_from_tree

__all__ = [
    "QuadTreeError",
    "OutOfBoundsError",
    "InvalidConfigurationError",
    "QuadTreeConfig",
    "Rectangle",
    "Point",
    "QuadTreeNode",
    "QuadTree",
    "create_quadtree",
    "format_tree",
    "print_tree",
    "RangeOracle",
    "ScanOracle",
    "QueryAudit",
    "audit_query",
    "DuckDBOracle",
    "create_oracle_from_tree",
]
