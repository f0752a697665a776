from __future__ import annotations

import math
from enum import Enum
from typing import Tuple

from ..core.bird import Bird
from ..core.rules import FlightRules
from ..utils.torus import angle_difference, bearing
from .neighbors import Neighbor


class Zone(str, Enum):
    AVOID = "avoid"
    ALIGN = "align"
    SEEK = "seek"


def classify_zone(dist_sq: float, rules: FlightRules) -> Zone:
    if dist_sq < rules.zone_avoid_sq:
        return Zone.AVOID
    if dist_sq > rules.zone_align_sq:
        return Zone.SEEK
    return Zone.ALIGN


def desired_rotation(bird: Bird, neighbor: Neighbor, zone: Zone, rules: FlightRules) -> float:
    if zone is Zone.ALIGN:
        return neighbor.bird.rotation
    direction = bearing(bird.position, neighbor.bird.position, rules.width, rules.height)
    if zone is Zone.AVOID:
        return direction + math.pi
    return direction


def clamp_turn(desired: float, current: float, max_turn: float) -> float:
    """Shortest turn from ``current`` towards ``desired``, limited to ``max_turn``."""
    diff = angle_difference(desired, current)
    if diff > max_turn:
        return max_turn
    if diff < -max_turn:
        return -max_turn
    return diff


def rotation_correction(bird: Bird, neighbor: Neighbor, rules: FlightRules) -> Tuple[float, Zone]:
    zone = classify_zone(neighbor.dist_sq, rules)
    desired = desired_rotation(bird, neighbor, zone, rules)
    return clamp_turn(desired, bird.rotation, rules.rotation_speed_max), zone
