"""
Per-tick motion: projectile travel and blast growth/shrink.
NO UI DEPENDENCIES.

Motion uses a constant step per tick regardless of wall-clock time
between ticks.
"""
from typing import Iterable, List, Optional

from .geometry import advance
from .entities import Blast, Projectile
from .constants import BLAST_GROWTH_RATE, BLAST_SHRINK_FACTOR


def advance_projectile(projectile: Projectile) -> Projectile:
    """Move a projectile one step along its fixed angle."""
    return projectile.moved_to(
        advance(projectile.current, projectile.angle, projectile.speed)
    )


def step_blast(blast: Blast) -> Optional[Blast]:
    """
    Grow or shrink a blast by one tick.
    Returns None when the stepped radius is no longer positive.
    """
    radius = blast.radius
    expanding = blast.is_expanding

    if expanding:
        radius += BLAST_GROWTH_RATE
        if radius >= blast.max_radius:
            expanding = False
    else:
        radius -= BLAST_GROWTH_RATE * BLAST_SHRINK_FACTOR

    if radius <= 0:
        return None
    return Blast(
        id=blast.id,
        center=blast.center,
        max_radius=blast.max_radius,
        radius=radius,
        is_expanding=expanding,
    )


def integrate_projectiles(projectiles: Iterable[Projectile]) -> List[Projectile]:
    """Advance a whole population into a new list."""
    return [advance_projectile(p) for p in projectiles]


def integrate_blasts(blasts: Iterable[Blast]) -> List[Blast]:
    """Step a whole population, dropping blasts that have vanished."""
    stepped = []
    for blast in blasts:
        next_blast = step_blast(blast)
        if next_blast is not None:
            stepped.append(next_blast)
    return stepped
