"""
Level progression and game-over state machine.
NO UI DEPENDENCIES.
"""
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from .entities import Structure
from .constants import QUOTA_BASE, QUOTA_PER_LEVEL, SCORE_PER_STRUCTURE_SAVED


class GamePhase(Enum):
    """Current phase of the game."""
    PLAYING = auto()        # Projectiles spawning and flying
    LEVEL_CLEARED = auto()  # Quota spent and battlefield empty (resolved within the tick)
    GAME_OVER = auto()      # Every structure lost, waiting for restart


def level_quota(level: int) -> int:
    """Number of incoming projectiles launched during a level."""
    return QUOTA_BASE + level * QUOTA_PER_LEVEL


def survivor_bonus(structures: Sequence[Structure]) -> int:
    """Score awarded for every structure still standing at a level clear."""
    return count_alive(structures) * SCORE_PER_STRUCTURE_SAVED


def count_alive(structures: Sequence[Structure]) -> int:
    return sum(1 for s in structures if s.is_alive)


def merge_best_score(previous, current) -> int:
    """
    Return the higher of two scores.
    Values that are not finite numbers count as zero.
    """
    def _clean(value) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        if not math.isfinite(value):
            return 0
        return int(value)

    p = _clean(previous)
    c = _clean(current)
    return c if c > p else p


@dataclass
class LevelState:
    """
    Session-wide score and level progress.
    A single instance lives in the driver for the whole session.
    """
    score: int = 0
    level: int = 1
    spawned_count: int = 0
    quota_for_level: int = level_quota(1)
    is_awaiting_restart: bool = False

    @property
    def can_spawn(self) -> bool:
        return self.spawned_count < self.quota_for_level

    @property
    def quota_exhausted(self) -> bool:
        return self.spawned_count == self.quota_for_level

    def record_spawn(self) -> None:
        """Count one spawned projectile against the level quota."""
        if not self.can_spawn:
            raise RuntimeError(
                f"Spawn quota exceeded ({self.spawned_count}/{self.quota_for_level})"
            )
        self.spawned_count += 1

    def add_score(self, points: int) -> None:
        self.score += points

    def advance_level(self) -> None:
        """Move to the next level; score carries over."""
        self.level += 1
        self.quota_for_level = level_quota(self.level)
        self.spawned_count = 0

    def reset(self) -> None:
        """Back to level 1 with no score."""
        self.score = 0
        self.level = 1
        self.spawned_count = 0
        self.quota_for_level = level_quota(1)
        self.is_awaiting_restart = False


def check_transition(
    level_state: LevelState,
    structures: Sequence[Structure],
    battlefield_empty: bool
) -> GamePhase:
    """
    Decide the phase after collisions have been resolved.

    Loss is checked before level clear: losing the last structure on the
    same tick the wave empties is a game over.
    """
    if level_state.is_awaiting_restart:
        return GamePhase.GAME_OVER
    if count_alive(structures) == 0:
        return GamePhase.GAME_OVER
    if level_state.quota_exhausted and battlefield_empty:
        return GamePhase.LEVEL_CLEARED
    return GamePhase.PLAYING
