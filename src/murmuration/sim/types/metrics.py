from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    candidates: int
    neighbors: int
    isolated: int
    avoid: int
    align: int
    seek: int
    alignment: float
    mean_turn: float
    tick_duration_ms: float = 0.0
