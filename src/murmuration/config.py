from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml


@dataclass
class SkyConfig:
    width: float = 1280.0
    height: float = 720.0


@dataclass
class FlightConfig:
    # pixels travelled per reference frame
    speed: float = 5.0
    # radians per tick
    rotation_speed_max: float = 0.05
    # below: avoid, above: align
    zone_avoid_radius: float = 20.0
    # above: seek
    zone_align_radius: float = 60.0
    # nearest neighbour first
    influence_weights: List[float] = field(default_factory=lambda: [1.0, 0.95, 0.90, 0.70, 0.40, 0.10])
    lookahead_ticks: float = 5.0
    neighborhood_cache: bool = True


@dataclass
class SimulationConfig:
    population: int = 500
    seed: int = 42
    reference_fps: float = 60.0
    config_version: str = "v1"
    sky: SkyConfig = field(default_factory=SkyConfig)
    flight: FlightConfig = field(default_factory=FlightConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def load_config(raw: dict) -> SimulationConfig:
    sky = SkyConfig(**raw.get("sky", {}))
    flight_raw = dict(raw.get("flight", {}))
    if "influence_weights" in flight_raw:
        flight_raw["influence_weights"] = [float(w) for w in flight_raw["influence_weights"]]
    flight = FlightConfig(**flight_raw)
    sim_values = {k: v for k, v in raw.items() if k not in {"sky", "flight"}}
    return SimulationConfig(sky=sky, flight=flight, **sim_values)


def validate_config(config: SimulationConfig) -> None:
    """Reject constants the steering rules cannot work with.

    Raises ``ValueError`` naming the first offending field.
    """
    sky = config.sky
    flight = config.flight
    if sky.width <= 0 or sky.height <= 0:
        raise ValueError(f"Sky dimensions must be positive, got {sky.width}x{sky.height}")
    if config.population < 0:
        raise ValueError(f"population must be non-negative, got {config.population}")
    if config.reference_fps <= 0:
        raise ValueError(f"reference_fps must be positive, got {config.reference_fps}")
    if flight.speed <= 0:
        raise ValueError(f"speed must be positive, got {flight.speed}")
    if flight.speed >= min(sky.width, sky.height):
        raise ValueError(
            f"speed must stay below the smaller sky dimension, got {flight.speed} for a {sky.width}x{sky.height} sky"
        )
    if flight.rotation_speed_max < 0:
        raise ValueError(f"rotation_speed_max must be non-negative, got {flight.rotation_speed_max}")
    if flight.lookahead_ticks < 0:
        raise ValueError(f"lookahead_ticks must be non-negative, got {flight.lookahead_ticks}")
    if not 0 <= flight.zone_avoid_radius < flight.zone_align_radius:
        raise ValueError(
            "zone radii must satisfy 0 <= zone_avoid_radius < zone_align_radius, "
            f"got {flight.zone_avoid_radius} and {flight.zone_align_radius}"
        )
    weights = flight.influence_weights
    if not weights:
        raise ValueError("influence_weights must not be empty")
    if any(w < 0 for w in weights):
        raise ValueError(f"influence_weights must be non-negative, got {weights}")
    if sum(weights) <= 0:
        raise ValueError("influence_weights must not sum to zero")
