"""
Events emitted by the simulation for audio/visual collaborators.
NO UI DEPENDENCIES.
"""
from dataclasses import dataclass

from .geometry import Point


@dataclass(frozen=True)
class GameEvent:
    """An event that occurred during a tick (for UI to react to)."""
    pass


@dataclass(frozen=True)
class FiredEvent(GameEvent):
    """A structure launched an outgoing projectile."""
    structure_id: int
    target: Point


@dataclass(frozen=True)
class ExplosionEvent(GameEvent):
    """
    A blast was created.

    hit_structure is set on the impact blast of a projectile that also
    destroyed a structure; the StructureDestroyedEvent just before it
    describes the same impact.
    """
    position: Point
    max_radius: float
    hit_structure: bool = False


@dataclass(frozen=True)
class StructureDestroyedEvent(GameEvent):
    """An incoming projectile destroyed a structure."""
    structure_id: int
    position: Point


@dataclass(frozen=True)
class GameOverEvent(GameEvent):
    """Every structure is gone."""
    score: int
    best_score: int
    is_new_best: bool


@dataclass(frozen=True)
class LevelStartedEvent(GameEvent):
    """A level began, either after a clear or after a restart."""
    level: int
