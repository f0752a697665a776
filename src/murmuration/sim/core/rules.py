from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ...config import SimulationConfig


@dataclass(frozen=True, slots=True)
class FlightRules:
    """Per-run constants in the form the steering systems consume them.

    Zone radii are stored squared and the weight table sum is computed once,
    so the per-neighbour work stays free of square roots and reductions.
    """

    width: float
    height: float
    speed: float
    rotation_speed_max: float
    zone_avoid_sq: float
    zone_align_sq: float
    influence_weights: Tuple[float, ...]
    influence_weights_sum: float
    lookahead_ticks: float
    neighborhood_cache: bool = True

    @property
    def max_delta(self) -> float:
        """Exclusive upper bound on a tick's delta: one tick must move less than a full sky."""
        return min(self.width, self.height) / self.speed

    @property
    def max_rank(self) -> int:
        return len(self.influence_weights)

    @staticmethod
    def from_config(config: SimulationConfig) -> "FlightRules":
        flight = config.flight
        weights = tuple(float(w) for w in flight.influence_weights)
        return FlightRules(
            width=float(config.sky.width),
            height=float(config.sky.height),
            speed=float(flight.speed),
            rotation_speed_max=float(flight.rotation_speed_max),
            zone_avoid_sq=flight.zone_avoid_radius * flight.zone_avoid_radius,
            zone_align_sq=flight.zone_align_radius * flight.zone_align_radius,
            influence_weights=weights,
            influence_weights_sum=sum(weights),
            lookahead_ticks=float(flight.lookahead_ticks),
            neighborhood_cache=bool(flight.neighborhood_cache),
        )
