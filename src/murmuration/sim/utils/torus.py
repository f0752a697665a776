from __future__ import annotations

import math

from pygame.math import Vector2

TWO_PI = 2.0 * math.pi
HALF_PI = 0.5 * math.pi


def wrapped_distance_sq(a: Vector2, b: Vector2, width: float, height: float) -> float:
    """Squared distance between ``a`` and ``b`` on a plane whose edges wrap around."""
    dx = abs(a.x - b.x)
    dy = abs(a.y - b.y)
    if dx > width * 0.5:
        dx = width - dx
    if dy > height * 0.5:
        dy = height - dy
    return dx * dx + dy * dy


def _wrap_offset(offset: float, size: float) -> float:
    half = size * 0.5
    if offset > half:
        offset -= size
    elif offset < -half:
        offset += size
    return offset


def bearing(origin: Vector2, target: Vector2, width: float, height: float) -> float:
    """Rotation ``origin`` needs to face ``target`` along the shortest wrapped path.

    Rotation 0 points up (-y), so the ``atan2`` angle is shifted by a quarter turn.
    Coincident points give ``atan2(0, 0) == 0``, i.e. a bearing of pi/2.
    """
    dx = _wrap_offset(target.x - origin.x, width)
    dy = _wrap_offset(target.y - origin.y, height)
    return math.atan2(dy, dx) + HALF_PI


def angle_difference(r1: float, r0: float) -> float:
    """``r1 - r0`` normalised into (-pi, pi]."""
    diff = math.remainder(r1 - r0, TWO_PI)
    if diff <= -math.pi:
        diff += TWO_PI
    return diff


def wrap_coordinate(value: float, size: float) -> float:
    # single step: callers never move more than one full size per tick
    if value >= size:
        value -= size
    elif value < 0.0:
        value += size
        if value >= size:
            # tiny negative values round up to exactly ``size``
            value = 0.0
    return value


def wrap_position(position: Vector2, width: float, height: float) -> None:
    position.x = wrap_coordinate(position.x, width)
    position.y = wrap_coordinate(position.y, height)
