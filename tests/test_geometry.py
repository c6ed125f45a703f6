"""Unit tests for planar helpers."""
from __future__ import annotations

import math

import pytest

from skirmish.geometry import centroid, clamp_to_map, distance, max_spread, offset, tile, unit_vector

pytestmark = pytest.mark.unit


def test_distance():
    assert distance((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)


def test_centroid_of_nothing_is_none():
    assert centroid([]) is None


def test_centroid():
    assert centroid([(0.0, 0.0), (4.0, 0.0), (2.0, 6.0)]) == pytest.approx((2.0, 2.0))


def test_max_spread():
    pts = [(0.0, 0.0), (4.0, 0.0)]
    assert max_spread(pts, (1.0, 0.0)) == pytest.approx(3.0)
    assert max_spread([], (1.0, 0.0)) == 0.0


def test_clamp_to_map():
    assert clamp_to_map((-3.0, 200.0), (128, 64)) == (0.0, 63.0)
    assert clamp_to_map((10.5, 20.0), (128, 64)) == (10.5, 20.0)


def test_unit_vector():
    assert unit_vector((1.0, 1.0), (1.0, 1.0)) == (0.0, 0.0)
    ux, uy = unit_vector((0.0, 0.0), (3.0, 4.0))
    assert math.hypot(ux, uy) == pytest.approx(1.0)
    assert offset((0.0, 0.0), (ux, uy), 10.0) == pytest.approx((6.0, 8.0))


def test_tile_floors_negative_coordinates():
    assert tile((-0.5, 2.7)) == (-1, 2)
