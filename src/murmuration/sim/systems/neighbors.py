from __future__ import annotations

import math
from typing import List, NamedTuple, Sequence

from ..core.bird import Bird
from ..core.rules import FlightRules
from ..utils.torus import wrapped_distance_sq


class Neighbor(NamedTuple):
    bird: Bird
    dist_sq: float


class NeighborScan(NamedTuple):
    ranked: List[Neighbor]
    candidates: int


def scan_candidates(
    bird: Bird,
    population: Sequence[Bird],
    width: float,
    height: float,
    radius_sq: float = math.inf,
) -> List[Neighbor]:
    """Every other bird strictly inside ``radius_sq``, in population order."""
    candidates: List[Neighbor] = []
    append = candidates.append
    position = bird.position
    for other in population:
        if other is bird:
            continue
        dist_sq = wrapped_distance_sq(position, other.position, width, height)
        if dist_sq < radius_sq:
            append(Neighbor(other, dist_sq))
    return candidates


def rank_candidates(candidates: List[Neighbor], max_rank: int) -> List[Neighbor]:
    # stable: equal distances keep population order
    candidates.sort(key=lambda entry: entry.dist_sq)
    return candidates[:max_rank]


def next_neighborhood_radius_sq(ranked: Sequence[Neighbor], speed: float, lookahead_ticks: float) -> float:
    """Radius admitting the ranked set plus a few ticks of travel.

    An empty ranked set disables filtering until neighbours show up again.
    """
    if not ranked:
        return math.inf
    radius = math.sqrt(ranked[-1].dist_sq) + speed * lookahead_ticks
    return radius * radius


def select_neighbors(bird: Bird, population: Sequence[Bird], rules: FlightRules) -> NeighborScan:
    radius_sq = bird.neighborhood_radius_sq if rules.neighborhood_cache else math.inf
    candidates = scan_candidates(bird, population, rules.width, rules.height, radius_sq)
    candidate_count = len(candidates)
    ranked = rank_candidates(candidates, rules.max_rank)
    bird.neighborhood_radius_sq = next_neighborhood_radius_sq(ranked, rules.speed, rules.lookahead_ticks)
    return NeighborScan(ranked=ranked, candidates=candidate_count)
