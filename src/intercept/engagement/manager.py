"""Engagement manager — owner of the missile/target population.

Per tick: advance every active target, then every active missile, collect
the hits produced by that pass, and only then spawn replacement pairs.
Spawning mutates the population tables, so it never runs while they are
being iterated.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

import numpy as np

from intercept.core.errors import EntityNotFoundError, SpawnError
from intercept.core.types import (
    HitEvent,
    Missile,
    MissileState,
    MotionKind,
    MotionPattern,
    SpawnBounds,
    Target,
    TargetState,
    pattern_from_config,
)
from intercept.engagement.config import EngagementConfig
from intercept.engagement.guidance import GuidanceEngine
from intercept.engagement.motion import MotionGenerator, initial_phase
from intercept.engagement.spawner import Spawner
from intercept.utils.logging import tick_context
from intercept.utils.vectors import distance, is_degenerate, normalize, vec3

logger = logging.getLogger(__name__)


class EngagementManager:
    """Owns the entity population and runs the per-tick state transition.

    Missiles refer to targets by handle only. A handle that no longer
    resolves, or resolves to an inactive target, is a stale lock and
    produces no guidance command.

    Args:
        config: Engagement configuration (defaults if None).
        seed: Seed for the spawn random source. Ignored if *rng* is given.
        rng: Explicit numpy Generator used for every spawn.
    """

    def __init__(
        self,
        config: EngagementConfig | None = None,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ):
        self._config = config or EngagementConfig()
        self._rng = rng if rng is not None else np.random.default_rng(seed)

        self._motion = MotionGenerator()
        self._guidance = GuidanceEngine(hit_radius=self._config.hit_radius)
        self._spawner = Spawner(
            ranges=self._config.spawn_ranges,
            max_attempts=self._config.max_spawn_attempts,
        )

        # Insertion order is population order (tie-break for assignment)
        self._missiles: dict[str, Missile] = {}
        self._targets: dict[str, Target] = {}
        self._missile_ids = itertools.count(1)
        self._target_ids = itertools.count(1)

        self._tick = 0
        self._sim_time = 0.0
        self._total_hits = 0
        self._spawn_failures = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngagementConfig:
        return self._config

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    @property
    def missiles(self) -> list[Missile]:
        return list(self._missiles.values())

    @property
    def targets(self) -> list[Target]:
        return list(self._targets.values())

    @property
    def tick_count(self) -> int:
        return self._tick

    @property
    def sim_time(self) -> float:
        return self._sim_time

    @property
    def total_hits(self) -> int:
        return self._total_hits

    # ------------------------------------------------------------------
    # Entity creation
    # ------------------------------------------------------------------

    def create_missile(
        self,
        position,
        velocity,
        speed: float = 50.0,
        navigation_gain: float = 3.0,
        name: str | None = None,
    ) -> str:
        """Add a missile heading along *velocity* at *speed*; returns its handle.

        Raises:
            ValueError: If *velocity* is too short to define a heading.
        """
        heading = vec3(velocity)
        if is_degenerate(heading):
            raise ValueError(f"missile velocity has no heading: {heading.tolist()}")
        mid = f"M-{next(self._missile_ids)}"
        missile = Missile(
            missile_id=mid,
            position=vec3(position),
            velocity=normalize(heading) * speed,
            speed=float(speed),
            navigation_gain=float(navigation_gain),
            name=name or f"Missile {len(self._missiles) + 1}",
        )
        self._missiles[mid] = missile
        return mid

    def create_target(
        self,
        position,
        pattern: MotionPattern | MotionKind | str = MotionKind.STATIONARY,
        params: dict | None = None,
        name: str | None = None,
    ) -> str:
        """Add a target; returns its handle.

        *pattern* is either a ready pattern instance, or a motion kind
        combined with *params* (``center``, ``radius``, ``orbit_speed``,
        ``direction``). Orbit centers default to *position*.
        """
        pos = vec3(position)
        if isinstance(pattern, (MotionKind, str)):
            kind = pattern.value if isinstance(pattern, MotionKind) else pattern
            pattern = pattern_from_config({**(params or {}), "motion": kind}, position=pos)
        tid = f"T-{next(self._target_ids)}"
        target = Target(
            target_id=tid,
            position=pos,
            pattern=pattern,
            phase=initial_phase(pos, pattern),
            name=name or f"Target {len(self._targets) + 1}",
        )
        self._targets[tid] = target
        return tid

    def spawn_pair(
        self,
        bounds: SpawnBounds | None = None,
        min_separation: float | None = None,
    ) -> tuple[str, str]:
        """Spawn a random missile already locked onto a new random target.

        Defaults come from the engagement config.

        Raises:
            SpawnError: If the separation constraint cannot be met.
        """
        if bounds is None:
            bounds = self._config.spawn_bounds
        if min_separation is None:
            min_separation = self._config.min_spawn_distance

        mid = f"M-{next(self._missile_ids)}"
        tid = f"T-{next(self._target_ids)}"
        missile, target = self._spawner.spawn_pair(
            bounds, min_separation, self._rng, missile_id=mid, target_id=tid,
        )
        missile.name = f"Missile {len(self._missiles) + 1}"
        target.name = f"Target {len(self._targets) + 1}"
        self._missiles[mid] = missile
        self._targets[tid] = target

        logger.info("Spawned new pair: %s -> %s", missile.name, target.name)
        return mid, tid

    # ------------------------------------------------------------------
    # Targeting
    # ------------------------------------------------------------------

    def lock_target(self, missile_id: str, target_id: str) -> None:
        """Lock a missile onto a target, resetting its LOS history."""
        missile = self._get_missile(missile_id)
        self._get_target(target_id)
        missile.lock_onto(target_id)

    def assign_closest_targets(self) -> dict[str, str]:
        """Lock every active missile onto its nearest active target.

        Missiles are independent: several may share a target. Ties go to
        the target that comes first in population order. Missiles with no
        active candidate keep their current lock.

        Returns:
            Mapping of missile handle to the target handle it locked.
        """
        return self._assign(m for m in self._missiles.values() if m.active)

    def reassign_stragglers(self) -> dict[str, str]:
        """Closest-target assignment for active missiles whose lock is stale."""
        return self._assign(
            m for m in self._missiles.values()
            if m.active and self._resolve_target(m) is None
        )

    def _assign(self, missiles) -> dict[str, str]:
        assigned: dict[str, str] = {}
        for missile in missiles:
            target = self._find_closest_target(missile.position)
            if target is None:
                continue
            missile.lock_onto(target.target_id)
            assigned[missile.missile_id] = target.target_id
            logger.info("%s locked onto %s", missile.name, target.name)
        return assigned

    def _find_closest_target(self, position: np.ndarray) -> Target | None:
        closest = None
        min_distance = float("inf")
        for target in self._targets.values():
            if not target.active:
                continue
            d = distance(position, target.position)
            if d < min_distance:
                min_distance = d
                closest = target
        return closest

    def _resolve_target(self, missile: Missile) -> Target | None:
        """Locked target if the handle resolves to an active target, else None."""
        if missile.locked_target_id is None:
            return None
        target = self._targets.get(missile.locked_target_id)
        if target is None or not target.active:
            return None
        return target

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Re-arm every entity and optionally assign closest targets.

        Missile velocities are rescaled to their speed and guidance memory
        is cleared; target phases are recomputed from their positions.

        Raises:
            ValueError: If any missile velocity is degenerate; nothing is
                changed in that case.
        """
        headless = [m.missile_id for m in self._missiles.values() if is_degenerate(m.velocity)]
        if headless:
            raise ValueError(f"missiles have no heading to re-arm: {headless}")
        for missile in self._missiles.values():
            missile.velocity = normalize(missile.velocity) * missile.speed
            missile.active = True
            missile.has_last_los = False
        for target in self._targets.values():
            target.phase = initial_phase(target.position, target.pattern)
            target.active = True

        if self._config.auto_assign_targets:
            self.assign_closest_targets()

    def advance(self, dt: float) -> list[HitEvent]:
        """Run one tick of *dt* seconds and return the hits it produced.

        ``dt <= 0`` is a no-op tick. Replacement pairs for hits (when
        ``spawn_on_hit`` is set) are created after the full missile pass,
        so no entity spawned this tick is updated this tick.
        """
        if dt <= 0:
            logger.debug("Ignoring non-positive timestep %.6f", dt)
            return []

        self._tick += 1
        self._sim_time += dt
        with tick_context(self._tick, self._sim_time):
            return self._run_tick(dt)

    def _run_tick(self, dt: float) -> list[HitEvent]:
        for target in self._targets.values():
            if target.active:
                self._motion.advance(target, dt)

        hits: list[HitEvent] = []
        for missile in self._missiles.values():
            was_active = missile.active
            if not was_active:
                continue
            target = self._resolve_target(missile)
            self._guidance.advance(missile, target, dt)
            if was_active and not missile.active:
                hits.append(HitEvent(
                    missile_id=missile.missile_id,
                    target_id=missile.locked_target_id,
                    tick=self._tick,
                    time=self._sim_time,
                ))
                logger.info(
                    "Hit: %s destroyed %s at t=%.2fs",
                    missile.name, target.name, self._sim_time,
                )

        self._total_hits += len(hits)

        if self._config.spawn_on_hit:
            for _ in hits:
                try:
                    self.spawn_pair()
                except SpawnError as exc:
                    self._spawn_failures += 1
                    logger.warning("Replacement spawn failed: %s", exc)

        return hits

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_missile_state(self, missile_id: str) -> MissileState:
        return self._get_missile(missile_id).snapshot()

    def query_target_state(self, target_id: str) -> TargetState:
        return self._get_target(target_id).snapshot()

    def status(self) -> dict[str, Any]:
        """Population and scoring summary."""
        return {
            "tick": self._tick,
            "sim_time": round(self._sim_time, 6),
            "total_hits": self._total_hits,
            "spawn_failures": self._spawn_failures,
            "missiles_active": sum(1 for m in self._missiles.values() if m.active),
            "missiles_total": len(self._missiles),
            "targets_active": sum(1 for t in self._targets.values() if t.active),
            "targets_total": len(self._targets),
        }

    def _get_missile(self, missile_id: str) -> Missile:
        try:
            return self._missiles[missile_id]
        except KeyError:
            raise EntityNotFoundError("missile", missile_id) from None

    def _get_target(self, target_id: str) -> Target:
        try:
            return self._targets[target_id]
        except KeyError:
            raise EntityNotFoundError("target", target_id) from None

    # ------------------------------------------------------------------
    # Population management
    # ------------------------------------------------------------------

    def remove_missile(self, missile_id: str) -> None:
        self._get_missile(missile_id)
        del self._missiles[missile_id]

    def remove_target(self, target_id: str) -> None:
        """Remove a target; missiles locked onto it become stale."""
        self._get_target(target_id)
        del self._targets[target_id]

    def compact(self) -> tuple[int, int]:
        """Drop inactive entities. Returns (missiles_removed, targets_removed)."""
        dead_m = [mid for mid, m in self._missiles.items() if not m.active]
        dead_t = [tid for tid, t in self._targets.items() if not t.active]
        for mid in dead_m:
            del self._missiles[mid]
        for tid in dead_t:
            del self._targets[tid]
        return len(dead_m), len(dead_t)

    def clear(self) -> None:
        """Remove every entity and reset statistics. Handles are not reused."""
        self._missiles.clear()
        self._targets.clear()
        self._tick = 0
        self._sim_time = 0.0
        self._total_hits = 0
        self._spawn_failures = 0

    # ------------------------------------------------------------------
    # Scenario construction
    # ------------------------------------------------------------------

    def load_scenario(
        self,
        missile_defs: list[dict] | None = None,
        target_defs: list[dict] | None = None,
    ) -> None:
        """Create entities from raw config dicts (defaults: the config's scenario).

        Target dicts take ``position``, ``motion``, ``center``, ``radius``,
        ``orbit_speed``, ``direction`` and ``name``. Missile dicts take
        ``position``, ``velocity``, ``speed``, ``navigation_gain``,
        ``name`` and optionally ``target`` (a target name to lock onto).
        """
        if missile_defs is None:
            missile_defs = self._config.missile_defs
        if target_defs is None:
            target_defs = self._config.target_defs

        by_name: dict[str, str] = {}
        for td in target_defs:
            tid = self.create_target(
                td.get("position", [0.0, 0.0, 0.0]),
                pattern=pattern_from_config(td, position=vec3(td.get("position"))),
                name=td.get("name"),
            )
            by_name[self._targets[tid].name] = tid

        for md in missile_defs:
            mid = self.create_missile(
                md.get("position", [0.0, 0.0, 0.0]),
                md.get("velocity", [0.0, 0.0, 1.0]),
                speed=float(md.get("speed", 50.0)),
                navigation_gain=float(md.get("navigation_gain", 3.0)),
                name=md.get("name"),
            )
            target_name = md.get("target")
            if target_name is not None:
                if target_name not in by_name:
                    raise EntityNotFoundError("target", target_name)
                self.lock_target(mid, by_name[target_name])

        logger.info(
            "Scenario loaded: %d missiles, %d targets",
            len(missile_defs), len(target_defs),
        )

    @classmethod
    def from_config(
        cls,
        cfg: Any,
        seed: int | None = None,
    ) -> EngagementManager:
        """Build from OmegaConf or dict, load its scenario and initialize."""
        config = EngagementConfig.from_omegaconf(cfg)
        mgr = cls(config=config, seed=seed)
        mgr.load_scenario()
        mgr.initialize()
        return mgr
