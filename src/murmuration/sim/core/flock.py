from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, Iterable, List

from pygame.math import Vector2

from ...config import SimulationConfig, validate_config
from ..systems import metrics as metrics_system
from ..systems.motion import SteeringReport, tick_bird
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from .bird import Bird
from .rng import DeterministicRng
from .rules import FlightRules

logger = logging.getLogger(__name__)


class Flock:
    """Owns the ordered bird population and drives one tick at a time.

    Birds are updated in place and in list order, each one reading the live
    list: bird ``i`` sees birds ``< i`` already moved this tick and birds
    ``>= i`` where the previous tick left them.
    """

    def __init__(self, config: SimulationConfig, birds: Iterable[Bird] | None = None):
        validate_config(config)
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self._birds: List[Bird] = []
        self._reports: List[SteeringReport] = []
        self._metrics: TickMetrics | None = None
        self._initial_birds: List[Bird] | None = None
        self._refresh_rule_cache()
        if birds is None:
            self._bootstrap_population()
        else:
            self._birds.extend(birds)
            self._check_inside_sky(self._birds)
            self._initial_birds = [_copy_bird(bird) for bird in self._birds]

    @property
    def birds(self) -> List[Bird]:
        return self._birds

    @property
    def rules(self) -> FlightRules:
        return self._rules

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def reset(self) -> None:
        """Return to tick 0: the seeded population, or copies of the birds given at construction."""
        self._birds.clear()
        self._reports.clear()
        self._rng.reset()
        self._metrics = None
        self._refresh_rule_cache()
        if self._initial_birds is None:
            self._bootstrap_population()
        else:
            self._birds.extend(_copy_bird(bird) for bird in self._initial_birds)

    def step(self, tick: int, delta: float = 1.0) -> TickMetrics:
        rules = self._rules
        if not 0.0 < delta < rules.max_delta:
            raise ValueError(
                f"delta must lie in (0, {rules.max_delta:g}) so one tick stays inside the sky, got {delta}"
            )
        start = perf_counter()
        birds = self._birds
        reports = self._reports
        reports.clear()
        for bird in birds:
            reports.append(tick_bird(bird, birds, rules, delta))
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(tick, birds, reports, duration_ms)
        return self._metrics

    def snapshot(self, tick: int) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else self._snapshot_metrics_from_state(tick)
        config = self._config
        metadata = SnapshotMetadata(
            width=config.sky.width,
            height=config.sky.height,
            population=len(self._birds),
            reference_fps=config.reference_fps,
            seed=config.seed,
            config_version=config.config_version,
        )
        return Snapshot(
            tick=tick,
            metrics=metrics,
            birds=[self._bird_snapshot(bird) for bird in self._birds],
            world=SnapshotWorld(width=config.sky.width, height=config.sky.height),
            metadata=metadata,
        )

    def _snapshot_metrics_from_state(self, tick: int) -> TickMetrics:
        return metrics_system.create_metrics(tick, self._birds, (), 0.0)

    def _bird_snapshot(self, bird: Bird) -> Dict[str, Any]:
        return {
            "id": bird.id,
            "x": bird.position.x,
            "y": bird.position.y,
            "rotation": bird.rotation,
            "heading": _heading(bird.rotation),
        }

    def _check_inside_sky(self, birds: List[Bird]) -> None:
        width = self._rules.width
        height = self._rules.height
        for bird in birds:
            position = bird.position
            if not (0.0 <= position.x < width and 0.0 <= position.y < height):
                raise ValueError(
                    f"Bird {bird.id} starts at ({position.x}, {position.y}), outside the {width:g}x{height:g} sky"
                )

    def _refresh_rule_cache(self) -> None:
        self._rules = FlightRules.from_config(self._config)

    def _bootstrap_population(self) -> None:
        sky = self._config.sky
        for index in range(self._config.population):
            position = self._rng.next_point(sky.width, sky.height)
            self._birds.append(Bird(id=index, position=position, rotation=self._rng.next_angle()))
        logger.debug(
            "Bootstrapped %d birds on a %gx%g sky (seed=%s)",
            len(self._birds),
            sky.width,
            sky.height,
            self._config.seed,
        )


def _copy_bird(bird: Bird) -> Bird:
    return Bird(id=bird.id, position=Vector2(bird.position), rotation=bird.rotation)


def _heading(rotation: float) -> List[float]:
    direction = Vector2(0.0, -1.0).rotate_rad(rotation)
    return [direction.x, direction.y]
