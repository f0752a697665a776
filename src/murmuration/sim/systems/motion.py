from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from ..core.bird import Bird
from ..core.rules import FlightRules
from ..utils.torus import wrap_position
from .influence import blend_corrections
from .neighbors import select_neighbors
from .steering import Zone, rotation_correction


@dataclass(slots=True)
class SteeringReport:
    candidates: int = 0
    neighbors: int = 0
    avoid: int = 0
    align: int = 0
    seek: int = 0
    turn: float = 0.0


def steer(bird: Bird, population: Sequence[Bird], rules: FlightRules) -> SteeringReport:
    scan = select_neighbors(bird, population, rules)
    report = SteeringReport(candidates=scan.candidates, neighbors=len(scan.ranked))
    if not scan.ranked:
        return report

    corrections: List[float] = []
    for neighbor in scan.ranked:
        correction, zone = rotation_correction(bird, neighbor, rules)
        corrections.append(correction)
        if zone is Zone.AVOID:
            report.avoid += 1
        elif zone is Zone.ALIGN:
            report.align += 1
        else:
            report.seek += 1

    turn = blend_corrections(corrections, rules.influence_weights, rules.influence_weights_sum)
    bird.rotation += turn
    report.turn = turn
    return report


def advance(bird: Bird, rules: FlightRules, delta: float) -> None:
    step = rules.speed * delta
    position = bird.position
    # rotation 0 points up on a y-down screen
    position.x += math.sin(bird.rotation) * step
    position.y -= math.cos(bird.rotation) * step
    wrap_position(position, rules.width, rules.height)


def tick_bird(bird: Bird, population: Sequence[Bird], rules: FlightRules, delta: float = 1.0) -> SteeringReport:
    report = steer(bird, population, rules)
    advance(bird, rules, delta)
    return report
