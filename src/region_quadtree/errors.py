"""Exceptions raised by the quadtree."""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .quadtree import Rectangle


class QuadTreeError(ValueError):
    """Base class for caller mistakes reported by the quadtree."""


class OutOfBoundsError(QuadTreeError):
    """A point lies outside the rectangle covered by the tree."""

    def __init__(self, x: float, y: float, bounds: Rectangle):
        self.x = x
        self.y = y
        self.bounds = bounds
        super().__init__(f"Point ({x}, {y}) outside tree bounds {bounds}")


class InvalidConfigurationError(QuadTreeError):
    """Tree configuration rejected at construction."""
