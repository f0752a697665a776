from __future__ import annotations

import math
from dataclasses import dataclass, field

from pygame.math import Vector2


@dataclass(slots=True)
class Bird:
    id: int
    position: Vector2 = field(default_factory=Vector2)
    rotation: float = 0.0
    # squared radius pre-filtering candidates on the next tick
    neighborhood_radius_sq: float = math.inf
