from __future__ import annotations

import math

import pytest
from pygame.math import Vector2
from pytest import approx

from murmuration.sim.utils.torus import (
    angle_difference,
    bearing,
    wrap_coordinate,
    wrap_position,
    wrapped_distance_sq,
)


def test_distance_wraps_across_edges():
    assert wrapped_distance_sq(Vector2(1, 50), Vector2(99, 50), 100, 100) == approx(4.0)
    assert wrapped_distance_sq(Vector2(50, 2), Vector2(50, 97), 100, 100) == approx(25.0)
    assert wrapped_distance_sq(Vector2(1, 1), Vector2(99, 99), 100, 100) == approx(8.0)


def test_distance_is_symmetric():
    points = [Vector2(0, 0), Vector2(3, 97), Vector2(61, 12), Vector2(99.5, 40), Vector2(50, 50)]
    for a in points:
        for b in points:
            assert wrapped_distance_sq(a, b, 100, 80) == wrapped_distance_sq(b, a, 100, 80)


def test_distance_without_wrap_is_euclidean():
    assert wrapped_distance_sq(Vector2(10, 10), Vector2(13, 14), 100, 100) == approx(25.0)


def test_bearing_reference_directions():
    origin = Vector2(50, 50)
    # rotation 0 faces up (-y), rotation pi/2 faces right (+x)
    assert angle_difference(bearing(origin, Vector2(50, 40), 100, 100), 0.0) == approx(0.0)
    assert bearing(origin, Vector2(60, 50), 100, 100) == approx(math.pi / 2)
    assert bearing(origin, Vector2(50, 60), 100, 100) == approx(math.pi)
    assert angle_difference(bearing(origin, Vector2(40, 50), 100, 100), -math.pi / 2) == approx(0.0)


def test_bearing_takes_shortest_wrapped_path():
    # target at x=95 is closer going left across the edge
    direction = bearing(Vector2(5, 50), Vector2(95, 50), 100, 100)
    assert angle_difference(direction, -math.pi / 2) == approx(0.0)
    direction = bearing(Vector2(50, 98), Vector2(50, 3), 100, 100)
    assert angle_difference(direction, math.pi) == approx(0.0)


def test_bearing_of_coincident_points_is_stable():
    assert bearing(Vector2(10, 10), Vector2(10, 10), 100, 100) == approx(math.pi / 2)


@pytest.mark.parametrize(
    "r1, r0",
    [
        (0.0, 0.0),
        (math.pi, 0.0),
        (-math.pi, 0.0),
        (3 * math.pi / 2, 0.0),
        (5 * math.pi / 2, 0.0),
        (0.1, 100.0),
        (-250.3, 17.9),
        (1e4, -1e4),
    ],
)
def test_angle_difference_is_normalized(r1, r0):
    diff = angle_difference(r1, r0)
    assert -math.pi < diff <= math.pi
    assert math.sin(diff) == approx(math.sin(r1 - r0), abs=1e-6)
    assert math.cos(diff) == approx(math.cos(r1 - r0), abs=1e-6)


def test_angle_difference_half_turn_is_positive():
    assert angle_difference(-math.pi, 0.0) == approx(math.pi)
    assert angle_difference(3 * math.pi / 2, 0.0) == approx(-math.pi / 2)


def test_wrap_coordinate_stays_in_range():
    assert wrap_coordinate(101.0, 100.0) == approx(1.0)
    assert wrap_coordinate(100.0, 100.0) == 0.0
    assert wrap_coordinate(-2.5, 100.0) == approx(97.5)
    assert wrap_coordinate(-1e-17, 100.0) == 0.0
    assert wrap_coordinate(42.0, 100.0) == 42.0


def test_wrap_position_updates_in_place():
    position = Vector2(-3.0, 104.0)
    wrap_position(position, 100.0, 100.0)
    assert position.x == approx(97.0)
    assert position.y == approx(4.0)
