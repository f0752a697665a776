from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple

import pygame
from pygame.math import Vector2

from ..config import SimulationConfig
from ..sim.core.flock import Flock

logger = logging.getLogger(__name__)

BACKGROUND = (0x23, 0x23, 0x27)
BIRD_COLOR = (235, 235, 240)
BIRD_SIZE = 7.0
MIN_FPS = 10.0


def frame_delta(elapsed_ms: float, reference_fps: float, min_fps: float = MIN_FPS) -> float:
    """Elapsed frame time as a multiple of the reference frame interval.

    Long stalls count as at most ``reference_fps / min_fps`` frames.
    """
    elapsed_ms = min(elapsed_ms, 1000.0 / min_fps)
    return max(0.0, elapsed_ms) * reference_fps / 1000.0


def bird_polygon(position: Vector2, rotation: float, size: float = BIRD_SIZE) -> List[Tuple[float, float]]:
    forward = Vector2(0.0, -1.0).rotate_rad(rotation)
    side = Vector2(-forward.y, forward.x)
    tip = position + forward * size
    back = position - forward * (size * 0.6)
    left = back + side * (size * 0.6)
    right = back - side * (size * 0.6)
    return [(tip.x, tip.y), (left.x, left.y), (right.x, right.y)]


def _load_sprite(path: Optional[Path]) -> Optional[pygame.Surface]:
    if path is None:
        return None
    if not Path(path).is_file():
        logger.warning("Sprite %s not found, drawing triangles instead", path)
        return None
    return pygame.image.load(str(path)).convert_alpha()


def _draw(screen: pygame.Surface, flock: Flock, sprite: Optional[pygame.Surface]) -> None:
    screen.fill(BACKGROUND)
    for bird in flock.birds:
        if sprite is None:
            pygame.draw.polygon(screen, BIRD_COLOR, bird_polygon(bird.position, bird.rotation))
            continue
        # pygame turns counter-clockwise, bird rotation turns clockwise on screen
        rotated = pygame.transform.rotate(sprite, -math.degrees(bird.rotation))
        screen.blit(rotated, rotated.get_rect(center=(bird.position.x, bird.position.y)))


def run_viewer(
    config: SimulationConfig,
    sprite_path: Optional[Path] = None,
    max_frames: Optional[int] = None,
) -> int:
    """Open a window sized to the sky and animate the flock until closed.

    Returns the number of frames rendered. Space pauses, R reseeds, Escape quits.
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode((int(config.sky.width), int(config.sky.height)))
        pygame.display.set_caption("Murmuration")
        sprite = _load_sprite(sprite_path)
        flock = Flock(config)
        clock = pygame.time.Clock()
        logger.info("Viewer started with %d birds", len(flock.birds))

        tick = 0
        frames = 0
        paused = False
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_r:
                        flock.reset()
                        tick = 0

            delta = frame_delta(clock.tick(int(config.reference_fps)), config.reference_fps)
            delta = min(delta, math.nextafter(flock.rules.max_delta, 0.0))
            if not paused and delta > 0.0:
                flock.step(tick, delta)
                tick += 1

            _draw(screen, flock, sprite)
            pygame.display.flip()
            frames += 1
            if max_frames is not None and frames >= max_frames:
                running = False

        logger.info("Viewer stopped after %d frames (%d ticks)", frames, tick)
        return frames
    finally:
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Flocking simulation viewer")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation constants.")
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--width", type=float, default=None)
    parser.add_argument("--height", type=float, default=None)
    parser.add_argument("--sprite", type=Path, default=None, help="PNG drawn for each bird, pointing up.")
    parser.add_argument("--frames", type=int, default=None, help="Stop after this many frames.")
    parser.add_argument("--log-level", default="INFO", help="Logging level for console output.")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    if args.population is not None:
        config.population = args.population
    if args.seed is not None:
        config.seed = args.seed
    if args.width is not None:
        config.sky.width = args.width
    if args.height is not None:
        config.sky.height = args.height
    run_viewer(config, sprite_path=args.sprite, max_frames=args.frames)


if __name__ == "__main__":
    main()
