"""
Collision resolution between projectiles, the ground, structures and blasts.
NO UI DEPENDENCIES.

Resolution runs in a fixed order each tick:
    1. incoming projectiles reaching the ground line
    2. outgoing projectiles reaching their target
    3. blasts catching incoming projectiles
Overlaps are settled by this order, never by simultaneous evaluation.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .geometry import distance
from .entities import (
    Blast, Projectile, Structure,
    create_blast, create_impact_blast, create_chain_blast,
)
from .events import GameEvent, ExplosionEvent, StructureDestroyedEvent
from .motion import integrate_blasts
from .constants import GROUND_Y, SCORE_PER_KILL


IdAllocator = Callable[[], int]


@dataclass
class CollisionOutcome:
    """Next generation of every population after one round of resolution."""
    incoming: List[Projectile]
    outgoing: List[Projectile]
    blasts: List[Blast]
    structures: List[Structure]
    score_delta: int = 0
    kills: int = 0
    events: List[GameEvent] = field(default_factory=list)


def find_struck_structure(x: float, structures: Sequence[Structure]) -> Optional[Structure]:
    """First surviving structure whose extent covers x, if any."""
    for structure in structures:
        if structure.is_alive and structure.covers(x):
            return structure
    return None


def resolve_ground_impacts(
    incoming: Sequence[Projectile],
    structures: Sequence[Structure],
    next_id: IdAllocator
) -> Tuple[List[Projectile], List[Structure], List[Blast], List[GameEvent]]:
    """
    Detonate incoming projectiles that reached the ground line.

    Each impact destroys at most one structure and leaves a small blast.
    Returns (surviving projectiles, structures, new blasts, events).
    """
    survivors: List[Projectile] = []
    next_structures = list(structures)
    new_blasts: List[Blast] = []
    events: List[GameEvent] = []

    for projectile in incoming:
        if projectile.current.y < GROUND_Y:
            survivors.append(projectile)
            continue

        impact = projectile.current
        struck = find_struck_structure(impact.x, next_structures)
        if struck is not None:
            next_structures = [
                s.destroyed() if s.id == struck.id else s
                for s in next_structures
            ]
            events.append(StructureDestroyedEvent(struck.id, impact))

        blast = create_impact_blast(next_id(), impact)
        new_blasts.append(blast)
        events.append(ExplosionEvent(blast.center, blast.max_radius, hit_structure=struck is not None))

    return survivors, next_structures, new_blasts, events


def has_arrived(projectile: Projectile) -> bool:
    """
    Check if a moved projectile is within one step of its target, or has
    already covered the whole start-to-end distance.
    """
    if distance(projectile.current, projectile.end) < projectile.speed:
        return True
    return distance(projectile.start, projectile.current) >= distance(projectile.start, projectile.end)


def resolve_arrivals(
    outgoing: Sequence[Projectile],
    next_id: IdAllocator
) -> Tuple[List[Projectile], List[Blast], List[GameEvent]]:
    """
    Detonate outgoing projectiles within one step of their target.

    The blast is centered exactly on the target, never on the
    projectile's own position.
    Returns (surviving projectiles, new blasts, events).
    """
    survivors: List[Projectile] = []
    new_blasts: List[Blast] = []
    events: List[GameEvent] = []

    for projectile in outgoing:
        if has_arrived(projectile):
            blast = create_blast(next_id(), projectile.end)
            new_blasts.append(blast)
            events.append(ExplosionEvent(blast.center, blast.max_radius))
        else:
            survivors.append(projectile)

    return survivors, new_blasts, events


def resolve_annihilation(
    incoming: Sequence[Projectile],
    blasts: Sequence[Blast],
    next_id: IdAllocator
) -> Tuple[List[Projectile], List[Blast], int, List[GameEvent]]:
    """
    Remove incoming projectiles caught inside a blast.

    Blasts are visited in order; a projectile consumed by one blast is not
    tested against the rest. Every kill leaves a chain blast at the
    projectile's position. Chain blasts start at zero radius and only
    catch projectiles from the next tick onward.
    Returns (surviving projectiles, chain blasts, kill count, events).
    """
    survivors = list(incoming)
    chain_blasts: List[Blast] = []
    events: List[GameEvent] = []
    kills = 0

    for blast in blasts:
        remaining: List[Projectile] = []
        for projectile in survivors:
            if blast.contains(projectile.current):
                kills += 1
                chain = create_chain_blast(next_id(), projectile.current)
                chain_blasts.append(chain)
                events.append(ExplosionEvent(chain.center, chain.max_radius))
            else:
                remaining.append(projectile)
        survivors = remaining

    return survivors, chain_blasts, kills, events


def resolve_collisions(
    incoming: Sequence[Projectile],
    outgoing: Sequence[Projectile],
    blasts: Sequence[Blast],
    structures: Sequence[Structure],
    next_id: IdAllocator
) -> CollisionOutcome:
    """
    Run all three resolution steps on already-moved populations.

    blasts must already be stepped for this tick. Blasts born in steps 1
    and 2 are stepped once here so they take part in step 3 with a
    non-zero radius.
    """
    incoming_left, next_structures, impact_blasts, events = resolve_ground_impacts(
        incoming, structures, next_id
    )
    outgoing_left, arrival_blasts, arrival_events = resolve_arrivals(outgoing, next_id)
    events.extend(arrival_events)

    active_blasts = list(blasts) + integrate_blasts(impact_blasts + arrival_blasts)

    incoming_left, chain_blasts, kills, kill_events = resolve_annihilation(
        incoming_left, active_blasts, next_id
    )
    events.extend(kill_events)

    return CollisionOutcome(
        incoming=incoming_left,
        outgoing=outgoing_left,
        blasts=active_blasts + chain_blasts,
        structures=next_structures,
        score_delta=kills * SCORE_PER_KILL,
        kills=kills,
        events=events,
    )
