from __future__ import annotations

from typing import Sequence


def blend_corrections(corrections: Sequence[float], weights: Sequence[float], weights_sum: float) -> float:
    """Rank-weighted average of per-neighbour corrections.

    ``weights_sum`` covers the whole weight table, not only the ranks in use:
    a bird with fewer neighbours than weight slots turns proportionally less.
    """
    total = 0.0
    for correction, weight in zip(corrections, weights):
        total += correction * weight
    return total / weights_sum
