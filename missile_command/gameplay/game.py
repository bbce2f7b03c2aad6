"""
Main Game class - drives the simulation one frame at a time.
NO UI DEPENDENCIES.

This is the central gameplay module. It can be fully tested
without any UI framework.
"""
import itertools
import logging
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from .geometry import Point, distance, is_finite_point
from .entities import (
    Blast, Projectile, ProjectileKind, Structure,
    create_projectile, create_structures,
)
from .events import (
    GameEvent, FiredEvent, GameOverEvent, LevelStartedEvent, StructureDestroyedEvent,
)
from .spawner import Spawner
from .motion import integrate_projectiles, integrate_blasts
from .collisions import resolve_collisions
from .level import GamePhase, LevelState, check_transition, merge_best_score, survivor_bonus
from .constants import (
    GROUND_Y, OUTGOING_SPEED, STRUCTURE_INITIAL_AMMO, INCOMING_SPEED_MIN,
)
from ..persistence.best_score import BestScoreStore, InMemoryBestScoreStore, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the battlefield after a tick."""
    projectiles: Tuple[Projectile, ...]
    outgoing_projectiles: Tuple[Projectile, ...]
    blasts: Tuple[Blast, ...]
    structures: Tuple[Structure, ...]
    score: int
    level: int
    is_game_over: bool
    best_score: int


@dataclass(frozen=True)
class FireCommand:
    """Player asked to fire at a point."""
    target: object


@dataclass(frozen=True)
class RestartCommand:
    """Player asked for a new game."""
    pass


def find_nearest_armed(structures: Iterable[Structure], target: Point) -> Optional[Structure]:
    """Surviving structure with ammo whose center is closest to target."""
    closest: Optional[Structure] = None
    best = math.inf
    for structure in structures:
        if not structure.can_fire:
            continue
        d = distance(structure.center, target)
        if d < best:
            best = d
            closest = structure
    return closest


class Game:
    """
    The simulation driver.

    This class is COMPLETELY DECOUPLED from UI.
    It publishes an immutable Snapshot after each tick and accepts
    commands as method calls. Commands are queued and applied at the
    start of the next tick, never mid-tick.

    Usage:
        game = Game(best_score_store=JsonBestScoreStore(path))
        while running:
            snapshot = game.tick(now_ms)
            for event in game.events:
                ...  # audio reacts here
            # UI renders snapshot
    """

    def __init__(
        self,
        best_score_store: Optional[BestScoreStore] = None,
        rng: Optional[random.Random] = None,
        on_game_over: Optional[Callable[[int], None]] = None
    ):
        self._ids = itertools.count(1)
        self.best_score_store = (
            best_score_store if best_score_store is not None else InMemoryBestScoreStore()
        )
        self.on_game_over = on_game_over

        self.spawner = Spawner(rng)
        self.level_state = LevelState()
        self.phase = GamePhase.PLAYING

        # Canonical populations, keyed by entity id
        self.structures: Dict[int, Structure] = {s.id: s for s in create_structures()}
        self.incoming: Dict[int, Projectile] = {}
        self.outgoing: Dict[int, Projectile] = {}
        self.blasts: Dict[int, Blast] = {}

        self.best_score = self._load_best_score()

        self._commands: Deque[object] = deque()
        self._events: List[GameEvent] = []

        self._is_paused = False
        self._resume_pending = False
        self._last_tick_ms: Optional[float] = None

        self._snapshot = self._take_snapshot()

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def fire(self, point) -> None:
        """Queue a fire command at a scene point."""
        self._commands.append(FireCommand(point))

    def restart(self) -> None:
        """Queue a restart. Only honoured while the game is over."""
        self._commands.append(RestartCommand())

    def pause(self) -> None:
        """Stop advancing; ticks return the current snapshot until resume()."""
        if not self._is_paused:
            self._is_paused = True
            logger.info(f"Simulation paused at level {self.level_state.level}")

    def resume(self) -> None:
        """Continue after pause()."""
        if self._is_paused:
            self._is_paused = False
            self._resume_pending = True
            logger.info("Simulation resumed")

    # =========================================================================
    # UPDATE LOOP
    # =========================================================================

    def tick(self, timestamp_ms: float) -> Snapshot:
        """
        Advance the simulation by one frame.

        timestamp_ms is a monotonic clock reading; it only drives spawn
        pacing. Motion advances a fixed step per call.
        """
        self._events = []

        if self._is_paused:
            return self._snapshot

        if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, (int, float)) \
                or not math.isfinite(timestamp_ms):
            logger.debug(f"Ignoring tick with bad timestamp {timestamp_ms!r}")
            return self._snapshot

        if self._resume_pending:
            self._resume_pending = False
            if self._last_tick_ms is not None:
                self.spawner.shift_clock(timestamp_ms - self._last_tick_ms)
        self._last_tick_ms = timestamp_ms

        self._apply_commands()

        if self.phase == GamePhase.GAME_OVER:
            return self._snapshot

        self._step(timestamp_ms)
        self._snapshot = self._take_snapshot()
        return self._snapshot

    def _apply_commands(self) -> None:
        """Drain the command queue in arrival order."""
        while self._commands:
            command = self._commands.popleft()
            if isinstance(command, RestartCommand):
                if self.phase == GamePhase.GAME_OVER:
                    self._restart()
                else:
                    logger.debug("Restart ignored while playing")
            elif isinstance(command, FireCommand):
                if self.phase == GamePhase.GAME_OVER:
                    logger.debug("Fire ignored after game over")
                else:
                    self._apply_fire(command.target)

    def _apply_fire(self, target) -> None:
        """Launch one outgoing projectile from the nearest armed structure."""
        if not is_finite_point(target):
            logger.debug(f"Fire ignored, bad target {target!r}")
            return

        point = Point(float(target[0]), float(target[1]))
        if point.y > GROUND_Y:
            return

        shooter = find_nearest_armed(self.structures.values(), point)
        if shooter is None:
            return

        self.structures[shooter.id] = shooter.with_ammo(shooter.ammo_count - 1)
        projectile = create_projectile(
            self._next_id(), ProjectileKind.OUTGOING,
            shooter.launch_point, point, OUTGOING_SPEED
        )
        self.outgoing[projectile.id] = projectile
        self._events.append(FiredEvent(shooter.id, point))

    def _step(self, timestamp_ms: float) -> None:
        """spawn -> motion -> collisions -> phase transition."""
        structures = list(self.structures.values())

        spawned = self.spawner.maybe_spawn(
            timestamp_ms, self.level_state, structures, self._next_id
        )
        incoming = list(self.incoming.values())
        if spawned is not None:
            incoming.append(spawned)

        outcome = resolve_collisions(
            integrate_projectiles(incoming),
            integrate_projectiles(self.outgoing.values()),
            integrate_blasts(self.blasts.values()),
            structures,
            self._next_id,
        )

        # Swap in the next generation
        self.incoming = {p.id: p for p in outcome.incoming}
        self.outgoing = {p.id: p for p in outcome.outgoing}
        self.blasts = {b.id: b for b in outcome.blasts}
        self.structures = {s.id: s for s in outcome.structures}
        self.level_state.add_score(outcome.score_delta)
        self._events.extend(outcome.events)
        for event in outcome.events:
            if isinstance(event, StructureDestroyedEvent):
                logger.debug(f"Structure {event.structure_id} destroyed")

        phase = check_transition(
            self.level_state,
            outcome.structures,
            battlefield_empty=self.is_battlefield_empty(),
        )
        if phase == GamePhase.GAME_OVER:
            self._enter_game_over()
        elif phase == GamePhase.LEVEL_CLEARED:
            self._clear_level()

    # =========================================================================
    # PHASE TRANSITIONS
    # =========================================================================

    def _enter_game_over(self) -> None:
        self.phase = GamePhase.GAME_OVER
        self.level_state.is_awaiting_restart = True

        score = self.level_state.score
        best = merge_best_score(self.best_score, score)
        is_new_best = best > self.best_score
        if is_new_best:
            self.best_score = best
            self._save_best_score(best)

        self._events.append(GameOverEvent(score, self.best_score, is_new_best))
        logger.info(
            f"Game over at level {self.level_state.level} with score {score} "
            f"(best {self.best_score})"
        )

        if self.on_game_over is not None:
            self.on_game_over(score)

    def _clear_level(self) -> None:
        bonus = survivor_bonus(self.structures.values())
        self.level_state.add_score(bonus)
        self.level_state.advance_level()

        # Destroyed structures stay destroyed across levels
        self.structures = {
            s.id: s if s.is_destroyed else s.with_ammo(STRUCTURE_INITIAL_AMMO)
            for s in self.structures.values()
        }
        self._clear_populations()
        self.phase = GamePhase.PLAYING

        self._events.append(LevelStartedEvent(self.level_state.level))
        logger.info(
            f"Level {self.level_state.level} started "
            f"(bonus {bonus}, score {self.level_state.score})"
        )

    def _restart(self) -> None:
        self.level_state.reset()
        self.structures = {s.id: s for s in create_structures()}
        self._clear_populations()
        self.phase = GamePhase.PLAYING
        logger.info("New game started")

    def _clear_populations(self) -> None:
        self.incoming = {}
        self.outgoing = {}
        self.blasts = {}

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _load_best_score(self) -> int:
        try:
            return self.best_score_store.load_best_score()
        except StorageError as e:
            logger.warning(f"Best score unavailable, starting from 0: {e}")
            return 0

    def _save_best_score(self, score: int) -> None:
        try:
            self.best_score_store.save_best_score(score)
        except StorageError as e:
            logger.warning(f"Best score {score} not persisted: {e}")

    # =========================================================================
    # STATE QUERIES (for UI to read)
    # =========================================================================

    @property
    def snapshot(self) -> Snapshot:
        """The snapshot published by the most recent tick."""
        return self._snapshot

    @property
    def events(self) -> Tuple[GameEvent, ...]:
        """Events emitted by the most recent tick, in order."""
        return tuple(self._events)

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    def is_battlefield_empty(self) -> bool:
        return not self.incoming and not self.outgoing and not self.blasts

    def _take_snapshot(self) -> Snapshot:
        return Snapshot(
            projectiles=tuple(self.incoming.values()),
            outgoing_projectiles=tuple(self.outgoing.values()),
            blasts=tuple(self.blasts.values()),
            structures=tuple(self.structures.values()),
            score=self.level_state.score,
            level=self.level_state.level,
            is_game_over=self.is_game_over,
            best_score=self.best_score,
        )

    def _next_id(self) -> int:
        return next(self._ids)

    # =========================================================================
    # CONVENIENCE METHODS FOR TESTING
    # =========================================================================

    def simulate(self, ticks: int, frame_ms: float = 16.0,
                 start_ms: Optional[float] = None) -> List[GameEvent]:
        """
        Run a number of ticks at a steady frame interval.
        Returns all events that occurred.
        """
        now = start_ms
        if now is None:
            now = (self._last_tick_ms or 0.0) + frame_ms

        all_events: List[GameEvent] = []
        for _ in range(ticks):
            self.tick(now)
            all_events.extend(self._events)
            now += frame_ms
        return all_events

    def add_incoming(self, start: Point, end: Point,
                     speed: float = INCOMING_SPEED_MIN) -> Projectile:
        """
        Place an incoming projectile directly, outside the spawn quota.
        Useful for setting up scenarios.
        """
        projectile = create_projectile(
            self._next_id(), ProjectileKind.INCOMING, Point(*start), Point(*end), speed
        )
        self.incoming[projectile.id] = projectile
        self._snapshot = self._take_snapshot()
        return projectile
