"""Tests for canvas bounds and the bounded position updater."""

import numpy as np
import pytest

from forcelayout.canvas import Canvas, is_within_bounds, move_within_bounds
from forcelayout.errors import ConfigError
from forcelayout.geometry import Vector2
from forcelayout.graph import Node


class TestCanvas:
    """Tests for Canvas construction and containment."""

    def test_rejects_non_positive_dimensions(self):
        with pytest.raises(ConfigError):
            Canvas(0, 100)
        with pytest.raises(ConfigError):
            Canvas(100, -5)

    def test_contains(self):
        canvas = Canvas(100, 100)
        assert canvas.contains(Vector2(50.0, 50.0), 10.0)
        assert canvas.contains(Vector2(10.0, 90.0), 10.0)
        assert not canvas.contains(Vector2(5.0, 50.0), 10.0)
        assert not canvas.contains(Vector2(50.0, 95.0), 10.0)

    def test_center(self):
        assert Canvas(800, 600).center == Vector2(400.0, 300.0)


class TestMoveWithinBounds:
    """Tests for move_within_bounds clamping."""

    def test_corner_clamped_to_radius(self):
        """A node dropped at the origin ends up exactly one radius in from both sides."""
        r = 12.5
        node = Node(0, radius=r)
        move_within_bounds(node, Vector2(0.0, 0.0), Canvas(100, 100))
        assert node.center == Vector2(r, r)

    def test_inside_point_unchanged(self):
        node = Node(0, radius=10.0)
        center = move_within_bounds(node, Vector2(40.0, 60.0), Canvas(100, 100))
        assert center == Vector2(40.0, 60.0)

    def test_far_side_clamp(self):
        node = Node(0, radius=10.0)
        move_within_bounds(node, Vector2(1000.0, 99.0), Canvas(200, 100))
        assert node.center == Vector2(190.0, 90.0)

    def test_partial_overlap_clamped(self):
        """A centre inside the canvas whose circle crosses a side is pulled in."""
        node = Node(0, radius=10.0)
        move_within_bounds(node, Vector2(4.0, 50.0), Canvas(100, 100))
        assert node.center == Vector2(10.0, 50.0)

    def test_centre_past_top_with_small_x(self):
        node = Node(0, radius=5.0)
        move_within_bounds(node, Vector2(3.0, -500.0), Canvas(100, 100))
        assert node.center == Vector2(5.0, 5.0)
        assert is_within_bounds(node, Canvas(100, 100))

    @pytest.mark.parametrize("radius", [1.0, 7.5, 20.0, 49.0])
    def test_stays_inside_for_random_proposals(self, radius):
        """Containment holds for arbitrary proposals, including far outside the canvas."""
        rng = np.random.default_rng(11)
        canvas = Canvas(320, 240)
        node = Node(0, radius=radius)
        for _ in range(500):
            proposed = Vector2(float(rng.uniform(-2000, 2000)), float(rng.uniform(-2000, 2000)))
            c = move_within_bounds(node, proposed, canvas)
            assert c.x - radius >= 0
            assert c.y - radius >= 0
            assert c.x + radius <= canvas.width
            assert c.y + radius <= canvas.height

    def test_axis_shorter_than_diameter_centres_node(self):
        """A node wider than the canvas is centred on that axis instead of pinned."""
        node = Node(0, radius=30.0)
        center = move_within_bounds(node, Vector2(5.0, 70.0), Canvas(40, 200))
        assert center == Vector2(20.0, 70.0)

    def test_result_never_leaves_clamp_range(self):
        node = Node(0, radius=10.0)
        canvas = Canvas(100, 100)
        for proposed in (Vector2(-1e-12, 50.0), Vector2(100.0, 100.0), Vector2(9.999, 90.001)):
            c = move_within_bounds(node, proposed, canvas)
            assert 10.0 <= c.x <= 90.0
            assert 10.0 <= c.y <= 90.0
