from __future__ import annotations

import math
import random

from pygame.math import Vector2


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_angle(self) -> float:
        return self._random.random() * 2.0 * math.pi

    def next_point(self, width: float, height: float) -> Vector2:
        return Vector2(self._random.random() * width, self._random.random() * height)
