"""Tests for the corner-probe range query."""

from collections import namedtuple

import pytest
from region_quadtree.config import QuadTreeConfig
from region_quadtree.quadtree import QuadTree, Rectangle


Corner = namedtuple("Corner", ["x", "y"])


@pytest.fixture
def five_point_tree():
    """One or two points in each top-level quadrant, no splits."""
    tree = QuadTree(QuadTreeConfig(max_points_per_leaf=2, max_depth=10))
    tree.insert(10, 10, "a")
    tree.insert(90, 90, "b")
    tree.insert(10, 90, "c")
    tree.insert(90, 10, "d")
    tree.insert(50, 50, "e")
    return tree


@pytest.fixture
def gap_tree():
    """A tree whose quadrant 0 is split so that one leaf sits inside the box."""
    tree = QuadTree(QuadTreeConfig(max_points_per_leaf=1, max_depth=10))
    tree.insert(5, 5, "near")
    tree.insert(30, 30, "inner")
    return tree


def payloads(points):
    return [p.payload for p in points]


class TestQuery:
    """Tests for QuadTree.query()."""

    def test_five_points_no_split(self, five_point_tree):
        """Test the setup: no quadrant exceeds capacity."""
        assert five_point_tree.node_count == 5
        quadrants = five_point_tree.root.children
        assert payloads(quadrants[3].points) == ["b", "e"]

    def test_whole_domain(self, five_point_tree):
        """Test a query covering the whole domain."""
        result = five_point_tree.query((0, 0), (100, 100))
        # Leaves under (0,0), (0,100), (100,100), (100,0) in that order
        assert payloads(result) == ["a", "c", "b", "e", "d"]

    def test_corner_orientation(self, five_point_tree):
        """Test that corners may be given in any orientation."""
        expected = payloads(five_point_tree.query((0, 0), (100, 100)))
        assert payloads(five_point_tree.query((100, 100), (0, 0))) == expected
        assert payloads(five_point_tree.query((0, 100), (100, 0))) == expected

    def test_half_open_filter(self, five_point_tree):
        """Test that points on the max edges are excluded."""
        result = five_point_tree.query((0, 0), (50, 50))
        assert payloads(result) == ["a"]

        result = five_point_tree.query((0, 0), (50.001, 50.001))
        assert payloads(result) == ["a", "e"]

    def test_corner_objects(self, five_point_tree):
        """Test corners passed as objects with x and y attributes."""
        result = five_point_tree.query(Corner(0, 0), Corner(50.001, 50.001))
        assert payloads(result) == ["a", "e"]

    def test_stored_points_as_corners(self, five_point_tree):
        """Test that stored points can span a query box."""
        a, b = five_point_tree.locate(10, 10).points[0], five_point_tree.locate(90, 90).points[0]
        assert payloads(five_point_tree.query(a, b)) == ["a", "e"]

    def test_coverage_gap(self, gap_tree):
        """Test that a leaf strictly inside the box is not searched."""
        inner_leaf = gap_tree.locate(30, 30)
        assert inner_leaf.rect == Rectangle(25, 50, 25, 50)

        result = gap_tree.query((1, 1), (99, 99))

        assert payloads(result) == ["near"]

    def test_gap_closes_when_a_corner_reaches_the_leaf(self, gap_tree):
        """Test that the inner point is found once a corner lands in its leaf."""
        result = gap_tree.query((1, 1), (40, 40))
        assert payloads(result) == ["near", "inner"]

    def test_duplicates_kept(self):
        """Test that a leaf shared by several corners repeats its points."""
        tree = QuadTree()
        tree.insert(1.5, 1.5, "p")

        result = tree.query((1, 1), (2, 2))

        assert payloads(result) == ["p"] * 4
        assert all(q is result[0] for q in result)

    def test_degenerate_box(self, five_point_tree):
        """Test that a box with zero width or height matches nothing."""
        assert five_point_tree.query((10, 10), (10, 50)) == []
        assert five_point_tree.query((10, 10), (50, 10)) == []
        assert five_point_tree.query((10, 10), (10, 10)) == []

    def test_box_outside_domain(self, five_point_tree):
        """Test that a box missing the domain matches nothing."""
        assert five_point_tree.query((200, 200), (300, 300)) == []
        assert five_point_tree.query((-50, -50), (-10, -10)) == []
        assert five_point_tree.query((100, 0), (150, 100)) == []

    def test_box_partially_outside(self, five_point_tree):
        """Test that corners outside the domain are clamped onto it."""
        # All four clamped corners fall in quadrant 0
        result = five_point_tree.query((-10, -10), (20, 20))
        assert payloads(result) == ["a"] * 4

    def test_infinite_box(self, five_point_tree):
        """Test a box with infinite extents."""
        inf = float("inf")
        result = five_point_tree.query((-inf, -inf), (inf, inf))
        assert payloads(result) == ["a", "c", "b", "e", "d"]

    def test_empty_tree(self):
        """Test querying an empty tree."""
        assert QuadTree().query((0, 0), (100, 100)) == []

    def test_query_does_not_mutate(self, five_point_tree):
        """Test that queries leave the tree untouched."""
        before = five_point_tree.pformat()
        five_point_tree.query((0, 0), (100, 100))
        five_point_tree.query((-10, -10), (20, 20))
        assert five_point_tree.pformat() == before
