"""
Incoming projectile spawner with level-scaled pacing.
NO UI DEPENDENCIES.
"""
import random
from typing import Callable, Optional, Sequence

from .geometry import Point
from .entities import Projectile, ProjectileKind, Structure, create_projectile
from .level import LevelState
from .constants import (
    GAME_WIDTH, GROUND_Y,
    INCOMING_SPEED_MIN, INCOMING_SPEED_MAX, INCOMING_SPEED_LEVEL_SCALING,
    SPAWN_INTERVAL_BASE_MS, SPAWN_INTERVAL_MIN_MS, SPAWN_INTERVAL_LEVEL_SCALING,
    TARGET_STRUCTURE_PROBABILITY,
)


def spawn_interval_ms(level: int) -> float:
    """
    Milliseconds between spawns for a level.
    Shrinks as the level rises, floored at SPAWN_INTERVAL_MIN_MS.
    """
    return max(
        SPAWN_INTERVAL_MIN_MS,
        SPAWN_INTERVAL_BASE_MS / (level * SPAWN_INTERVAL_LEVEL_SCALING)
    )


def incoming_speed(level: int, jitter: float) -> float:
    """Speed for an incoming projectile; jitter is a sample in [0, 1)."""
    return (
        INCOMING_SPEED_MIN
        + jitter * (INCOMING_SPEED_MAX - INCOMING_SPEED_MIN)
        + level * INCOMING_SPEED_LEVEL_SCALING
    )


class Spawner:
    """
    Decides when and where new incoming projectiles appear.

    Timing uses the caller's millisecond timestamps, so spawn cadence is
    independent of frame rate even though motion is not.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()
        self.last_spawn_ms: float = 0.0

    def is_due(self, now_ms: float, level_state: LevelState) -> bool:
        """Check if the interval has elapsed and the level quota allows a spawn."""
        if not level_state.can_spawn:
            return False
        return now_ms - self.last_spawn_ms > spawn_interval_ms(level_state.level)

    def choose_target(self, structures: Sequence[Structure]) -> Point:
        """
        Pick a landing point: usually a random surviving structure,
        otherwise (or when none survive) open ground.
        """
        alive = [s for s in structures if s.is_alive]
        if alive and self.rng.random() < TARGET_STRUCTURE_PROBABILITY:
            return self.rng.choice(alive).aim_point
        return Point(self.rng.random() * GAME_WIDTH, GROUND_Y)

    def build_projectile(
        self,
        projectile_id: int,
        level: int,
        structures: Sequence[Structure]
    ) -> Projectile:
        """Create one incoming projectile launched from the top of the scene."""
        start = Point(self.rng.random() * GAME_WIDTH, 0.0)
        end = self.choose_target(structures)
        speed = incoming_speed(level, self.rng.random())
        return create_projectile(projectile_id, ProjectileKind.INCOMING, start, end, speed)

    def maybe_spawn(
        self,
        now_ms: float,
        level_state: LevelState,
        structures: Sequence[Structure],
        next_id: Callable[[], int]
    ) -> Optional[Projectile]:
        """
        Spawn a projectile if one is due.
        Records the spawn on level_state and returns the projectile, or None.
        next_id is only called when a projectile is actually created.
        """
        if not self.is_due(now_ms, level_state):
            return None

        projectile = self.build_projectile(next_id(), level_state.level, structures)
        level_state.record_spawn()
        self.last_spawn_ms = now_ms
        return projectile

    def shift_clock(self, delta_ms: float) -> None:
        """Move the spawn clock forward, e.g. to skip time spent paused."""
        self.last_spawn_ms += delta_ms
