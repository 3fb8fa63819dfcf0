"""Tests for Vector2 arithmetic."""

import math

import numpy as np
import pytest

from forcelayout.geometry import Vector2


class TestVector2:
    """Tests for Vector2 operations."""

    def test_add_sub(self):
        a = Vector2(1.0, 2.0)
        b = Vector2(3.0, -5.0)
        assert a.add(b) == Vector2(4.0, -3.0)
        assert a.sub(b) == Vector2(-2.0, 7.0)
        assert a + b == a.add(b)
        assert a - b == a.sub(b)

    def test_scale(self):
        assert Vector2(1.5, -2.0).scale(2.0) == Vector2(3.0, -4.0)
        assert Vector2(1.5, -2.0) * 2.0 == Vector2(3.0, -4.0)
        assert 2.0 * Vector2(1.5, -2.0) == Vector2(3.0, -4.0)

    def test_magnitude(self):
        assert Vector2(3.0, 4.0).magnitude() == 5.0
        assert Vector2().magnitude() == 0.0

    def test_normalize(self):
        """Normalised vectors have unit length."""
        n = Vector2(3.0, 4.0).normalize()
        assert n.x == pytest.approx(0.6)
        assert n.y == pytest.approx(0.8)
        assert n.magnitude() == pytest.approx(1.0)

    def test_normalize_zero_vector(self):
        """The zero vector normalises to itself instead of dividing by zero."""
        assert Vector2(0.0, 0.0).normalize() == Vector2(0.0, 0.0)

    def test_distance_and_direction(self):
        a = Vector2(1.0, 1.0)
        b = Vector2(4.0, 5.0)
        assert a.distance_to(b) == 5.0
        assert b.distance_to(a) == 5.0
        assert a.vector_to(b) == Vector2(3.0, 4.0)
        d = a.direction_to(b)
        assert d.x == pytest.approx(0.6)
        assert d.y == pytest.approx(0.8)

    def test_direction_to_same_point(self):
        p = Vector2(2.0, 2.0)
        assert p.direction_to(p) == Vector2(0.0, 0.0)

    def test_midpoint(self):
        assert Vector2(0.0, 0.0).midpoint(Vector2(10.0, -4.0)) == Vector2(5.0, -2.0)

    def test_immutable(self):
        """Operations return new vectors and leave operands untouched."""
        a = Vector2(1.0, 1.0)
        a.add(Vector2(1.0, 1.0))
        a.scale(10.0)
        assert a == Vector2(1.0, 1.0)
        with pytest.raises(AttributeError):
            a.x = 5.0

    def test_random_within_rectangle(self):
        rng = np.random.default_rng(3)
        for _ in range(100):
            p = Vector2.random(rng, 10.0, 20.0, 30.0, 40.0)
            assert 10.0 <= p.x < 30.0
            assert 20.0 <= p.y < 40.0

    def test_from_angle(self):
        v = Vector2.from_angle(math.pi / 2, 2.0)
        assert v.x == pytest.approx(0.0, abs=1e-12)
        assert v.y == pytest.approx(2.0)
