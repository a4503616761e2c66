"""
Configuration for the region quadtree.

Bounds default to the square [0, 100) x [0, 100).
"""

import math
from dataclasses import dataclass

from .errors import InvalidConfigurationError


@dataclass
class QuadTreeConfig:
    """Configuration for a quadtree."""

    xmin: float = 0.0
    """Minimum x coordinate of the domain (inclusive)."""

    xmax: float = 100.0
    """Maximum x coordinate of the domain (exclusive)."""

    ymin: float = 0.0
    """Minimum y coordinate of the domain (inclusive)."""

    ymax: float = 100.0
    """Maximum y coordinate of the domain (exclusive)."""

    max_points_per_leaf: int = 20
    """Number of points a leaf holds before it splits."""

    max_depth: int = 10
    """Maximum leaf depth. Leaves at this depth never split, whatever their size."""

    def __post_init__(self):
        for name in ("xmin", "xmax", "ymin", "ymax"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidConfigurationError(f"{name} must be finite")
        if self.xmax <= self.xmin:
            raise InvalidConfigurationError("width (xmax - xmin) must be positive")
        if self.ymax <= self.ymin:
            raise InvalidConfigurationError("height (ymax - ymin) must be positive")
        for axis, low, high in (("x", self.xmin, self.xmax), ("y", self.ymin, self.ymax)):
            extent = high - low
            if not math.isfinite(extent):
                raise InvalidConfigurationError(f"{axis} extent overflows")
            # Same split coordinate as Rectangle.midpoints()
            mid = high - extent / 2
            if not low < mid < high:
                raise InvalidConfigurationError(f"{axis} extent too small to subdivide")
        if self.max_points_per_leaf < 1:
            raise InvalidConfigurationError("max_points_per_leaf must be at least 1")
        if self.max_depth < 1:
            raise InvalidConfigurationError("max_depth must be at least 1")
