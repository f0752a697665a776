from __future__ import annotations

import argparse
import csv
import json
import logging
import math
import statistics
from pathlib import Path
from typing import Optional

from ..config import SimulationConfig
from ..sim.core.flock import Flock
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)


_BASIC_HEADER = [
    "tick",
    "population",
    "candidates",
    "neighbors",
    "alignment",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "population",
    "candidates",
    "neighbors",
    "isolated",
    "avoid",
    "align",
    "seek",
    "alignment",
    "mean_turn",
    "tick_ms",
    "candidates_per_bird",
    "neighbors_per_bird",
    "isolated_ratio",
    "avoid_share",
    "align_share",
    "seek_share",
    "tick_ms_per_bird",
    "cached_radius_birds",
    "avg_cached_radius",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.candidates,
        metrics.neighbors,
        f"{metrics.alignment:.4f}",
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(flock: Flock, metrics: TickMetrics, tick_ms: float) -> list[object]:
    population = metrics.population
    interactions = metrics.avoid + metrics.align + metrics.seek
    if population <= 0:
        candidates_per_bird = 0.0
        neighbors_per_bird = 0.0
        isolated_ratio = 0.0
        tick_ms_per_bird = 0.0
    else:
        candidates_per_bird = metrics.candidates / population
        neighbors_per_bird = metrics.neighbors / population
        isolated_ratio = metrics.isolated / population
        tick_ms_per_bird = tick_ms / population

    if interactions <= 0:
        avoid_share = 0.0
        align_share = 0.0
        seek_share = 0.0
    else:
        avoid_share = metrics.avoid / interactions
        align_share = metrics.align / interactions
        seek_share = metrics.seek / interactions

    cached_radius_birds = 0
    radius_sum = 0.0
    for bird in flock.birds:
        radius_sq = bird.neighborhood_radius_sq
        if math.isinf(radius_sq):
            continue
        cached_radius_birds += 1
        radius_sum += math.sqrt(radius_sq)
    avg_cached_radius = radius_sum / cached_radius_birds if cached_radius_birds else 0.0

    return [
        metrics.tick,
        population,
        metrics.candidates,
        metrics.neighbors,
        metrics.isolated,
        metrics.avoid,
        metrics.align,
        metrics.seek,
        f"{metrics.alignment:.4f}",
        f"{metrics.mean_turn:.6f}",
        f"{tick_ms:.3f}",
        f"{candidates_per_bird:.4f}",
        f"{neighbors_per_bird:.4f}",
        f"{isolated_ratio:.4f}",
        f"{avoid_share:.4f}",
        f"{align_share:.4f}",
        f"{seek_share:.4f}",
        f"{tick_ms_per_bird:.4f}",
        cached_radius_birds,
        f"{avg_cached_radius:.4f}",
    ]


_SUMMARY_PERCENTILES = (("p50", 0.50), ("p90", 0.90), ("p95", 0.95), ("p99", 0.99))


def _interpolated(ordered: list[float], fraction: float) -> float:
    position = (len(ordered) - 1) * fraction
    low = int(position)
    high = min(low + 1, len(ordered) - 1)
    return float(ordered[low] + (ordered[high] - ordered[low]) * (position - low))


def _summary_stats(values: list[float]) -> dict[str, float]:
    stats = {"min": 0.0, "max": 0.0, "avg": 0.0}
    stats.update((name, 0.0) for name, _ in _SUMMARY_PERCENTILES)
    if not values:
        return stats
    ordered = sorted(values)
    stats["min"] = float(ordered[0])
    stats["max"] = float(ordered[-1])
    stats["avg"] = float(statistics.fmean(ordered))
    for name, fraction in _SUMMARY_PERCENTILES:
        stats[name] = _interpolated(ordered, fraction)
    return stats


def _correlation(xs: list[float], ys: list[float]) -> float:
    # short, mismatched or constant series have no meaningful correlation
    try:
        return float(statistics.correlation(xs, ys))
    except statistics.StatisticsError:
        return 0.0


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    summary_window: int = 500,
    delta: float = 1.0,
    config: Optional[SimulationConfig] = None,
    population: Optional[int] = None,
) -> Flock:
    config = config if config is not None else SimulationConfig()
    if seed is not None:
        config.seed = seed
    if population is not None:
        config.population = population

    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")
    if delta <= 0:
        raise ValueError(f"delta must be positive, got {delta}")

    flock = Flock(config)
    if delta >= flock.rules.max_delta:
        raise ValueError(
            f"delta {delta} moves birds a full sky per tick; keep it below {flock.rules.max_delta:g}"
        )
    logger.info(
        "Running %d ticks with %d birds (seed=%s, delta=%g)", steps, len(flock.birds), config.seed, delta
    )

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

    tick_ms_series: list[float] = []
    candidates_series: list[float] = []
    neighbors_per_bird_series: list[float] = []
    alignment_series: list[float] = []
    isolated_series: list[float] = []
    max_tick_ms = (-1.0, -1)
    max_candidates = (-1, -1)

    try:
        for tick in range(steps):
            metrics = flock.step(tick, delta)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms

            if summary_path:
                tick_ms_series.append(tick_ms)
                candidates_series.append(float(metrics.candidates))
                neighbors_per_bird_series.append(
                    0.0 if metrics.population <= 0 else metrics.neighbors / metrics.population
                )
                alignment_series.append(metrics.alignment)
                isolated_series.append(float(metrics.isolated))
                if tick_ms > max_tick_ms[0]:
                    max_tick_ms = (tick_ms, tick)
                if metrics.candidates > max_candidates[0]:
                    max_candidates = (metrics.candidates, tick)

            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(flock, metrics, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        window = max(1, int(summary_window))
        tail_slice = slice(max(0, len(tick_ms_series) - window), len(tick_ms_series))
        summary = {
            "steps": steps,
            "seed": config.seed,
            "population": len(flock.birds),
            "delta": delta,
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "candidates": _summary_stats(candidates_series),
            "neighbors_per_bird": _summary_stats(neighbors_per_bird_series),
            "alignment": _summary_stats(alignment_series),
            "isolated": _summary_stats(isolated_series),
            "correlations": {
                "tick_ms_vs_candidates": _correlation(tick_ms_series, candidates_series),
            },
            "peaks": {
                "tick_ms": {"value": float(max_tick_ms[0]), "tick": max_tick_ms[1]},
                "candidates": {"value": max_candidates[0], "tick": max_candidates[1]},
            },
            "tail_window": {
                "window": window,
                "tick_ms": _summary_stats(tick_ms_series[tail_slice]),
                "candidates": _summary_stats(candidates_series[tail_slice]),
                "alignment": _summary_stats(alignment_series[tail_slice]),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
        logger.info("Wrote run summary to %s", summary_path)

    final = flock.metrics
    if final is not None:
        logger.info("Finished at tick %d with alignment %.4f", final.tick, final.alignment)
    return flock


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless flocking simulation")
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--population", type=int, default=None, help="Number of birds (overrides config).")
    parser.add_argument("--delta", type=float, default=1.0, help="Frame delta fed to every tick.")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation constants.")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--summary-window",
        type=int,
        default=500,
        help="Tail window size (ticks) for summary stats.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level for console output.")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        summary_window=args.summary_window,
        delta=args.delta,
        config=config,
        population=args.population,
    )


if __name__ == "__main__":
    main()
