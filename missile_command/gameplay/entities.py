"""
Battlefield entities: Structure, Projectile, Blast.
NO UI DEPENDENCIES.

All entities are frozen value types. The simulation never mutates one in
place; every tick replaces them with updated copies.
"""
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import List

from .geometry import Point, angle_to, distance
from .constants import (
    GAME_WIDTH, GROUND_Y,
    STRUCTURE_COUNT, STRUCTURE_WIDTH, STRUCTURE_HEIGHT, STRUCTURE_INITIAL_AMMO,
    BLAST_MAX_RADIUS, IMPACT_BLAST_MAX_RADIUS, CHAIN_BLAST_MAX_RADIUS,
)


class ProjectileKind(Enum):
    """Who launched a projectile."""
    INCOMING = auto()   # Enemy, falls toward the ground line
    OUTGOING = auto()   # Player, flies from a structure to a target point


@dataclass(frozen=True)
class Structure:
    """
    A defended site sitting on the ground line.

    position is the left edge of the structure at ground level.
    """
    id: int
    position: Point
    is_destroyed: bool = False
    ammo_count: int = STRUCTURE_INITIAL_AMMO

    @property
    def is_alive(self) -> bool:
        return not self.is_destroyed

    @property
    def can_fire(self) -> bool:
        return not self.is_destroyed and self.ammo_count > 0

    @property
    def aim_point(self) -> Point:
        """Where incoming projectiles targeting this structure land."""
        return Point(self.position.x + STRUCTURE_WIDTH / 2, GROUND_Y)

    @property
    def launch_point(self) -> Point:
        """Where outgoing projectiles leave from."""
        return Point(self.position.x + STRUCTURE_WIDTH / 2, self.position.y)

    @property
    def center(self) -> Point:
        """Visual center, used to pick the structure nearest a fire command."""
        return Point(
            self.position.x + STRUCTURE_WIDTH / 2,
            self.position.y - STRUCTURE_HEIGHT / 2
        )

    def covers(self, x: float) -> bool:
        """Check if x falls within this structure's horizontal extent."""
        return self.position.x <= x <= self.position.x + STRUCTURE_WIDTH

    def destroyed(self) -> 'Structure':
        return replace(self, is_destroyed=True)

    def with_ammo(self, ammo_count: int) -> 'Structure':
        return replace(self, ammo_count=max(0, ammo_count))


@dataclass(frozen=True)
class Projectile:
    """
    A projectile travelling in a straight line from start to end.

    angle is fixed at spawn; there is no re-targeting.
    """
    id: int
    kind: ProjectileKind
    start: Point
    end: Point
    current: Point
    speed: float
    angle: float

    def moved_to(self, current: Point) -> 'Projectile':
        return replace(self, current=current)


@dataclass(frozen=True)
class Blast:
    """
    A circular blast that grows to max_radius, then shrinks until it vanishes.
    """
    id: int
    center: Point
    max_radius: float
    radius: float = 0.0
    is_expanding: bool = True

    def contains(self, point: Point) -> bool:
        """Check if point is strictly inside the current radius."""
        return distance(point, self.center) < self.radius


def create_structures() -> List[Structure]:
    """Create the full row of structures, evenly spaced along the ground."""
    spacing = (GAME_WIDTH - STRUCTURE_COUNT * STRUCTURE_WIDTH) / (STRUCTURE_COUNT + 1)
    return [
        Structure(
            id=i,
            position=Point(spacing + i * (STRUCTURE_WIDTH + spacing), GROUND_Y),
        )
        for i in range(STRUCTURE_COUNT)
    ]


def create_projectile(
    projectile_id: int,
    kind: ProjectileKind,
    start: Point,
    end: Point,
    speed: float
) -> Projectile:
    """Create a projectile at start, aimed at end."""
    return Projectile(
        id=projectile_id,
        kind=kind,
        start=start,
        end=end,
        current=start,
        speed=speed,
        angle=angle_to(start, end),
    )


def create_blast(blast_id: int, center: Point, max_radius: float = BLAST_MAX_RADIUS) -> Blast:
    """Create a fresh blast with zero radius."""
    return Blast(id=blast_id, center=center, max_radius=max_radius)


def create_impact_blast(blast_id: int, center: Point) -> Blast:
    """Small blast left by an incoming projectile hitting the ground."""
    return create_blast(blast_id, center, IMPACT_BLAST_MAX_RADIUS)


def create_chain_blast(blast_id: int, center: Point) -> Blast:
    """Secondary blast left by a projectile caught in another blast."""
    return create_blast(blast_id, center, CHAIN_BLAST_MAX_RADIUS)
