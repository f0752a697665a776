from __future__ import annotations

import math
from typing import Iterable, Sequence

from ..core.bird import Bird
from ..types.metrics import TickMetrics
from .motion import SteeringReport


def heading_alignment(birds: Sequence[Bird]) -> float:
    """Mean resultant length of the heading unit vectors: 1.0 when all birds fly the same way."""
    if not birds:
        return 0.0
    sum_x = 0.0
    sum_y = 0.0
    for bird in birds:
        sum_x += math.sin(bird.rotation)
        sum_y += math.cos(bird.rotation)
    return math.hypot(sum_x, sum_y) / len(birds)


def create_metrics(
    tick: int,
    birds: Sequence[Bird],
    reports: Iterable[SteeringReport],
    duration_ms: float,
) -> TickMetrics:
    candidates = 0
    neighbors = 0
    isolated = 0
    avoid = 0
    align = 0
    seek = 0
    turn_sum = 0.0
    for report in reports:
        candidates += report.candidates
        neighbors += report.neighbors
        if report.neighbors == 0:
            isolated += 1
        avoid += report.avoid
        align += report.align
        seek += report.seek
        turn_sum += abs(report.turn)
    population = len(birds)
    return TickMetrics(
        tick=tick,
        population=population,
        candidates=candidates,
        neighbors=neighbors,
        isolated=isolated,
        avoid=avoid,
        align=align,
        seek=seek,
        alignment=heading_alignment(birds),
        mean_turn=0.0 if population == 0 else turn_sum / population,
        tick_duration_ms=duration_ms,
    )
