"""Random missile/target pair generation with a minimum-separation constraint."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from intercept.core.errors import SpawnError
from intercept.core.types import (
    CirclePattern,
    Figure8Pattern,
    Missile,
    MotionKind,
    MotionPattern,
    SpawnBounds,
    StationaryPattern,
    StraightPattern,
    Target,
)
from intercept.utils.vectors import distance, normalize, random_unit_vector, uniform_in_box

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 100


@dataclass(frozen=True)
class SpawnRanges:
    """Bounds for the randomized parameters of a spawned pair."""

    missile_speed: tuple[float, float] = (40.0, 60.0)
    navigation_gain: tuple[float, float] = (2.5, 4.0)
    target_radius: tuple[float, float] = (10.0, 20.0)
    target_speed: tuple[float, float] = (8.0, 15.0)
    motion_kinds: tuple[MotionKind, ...] = field(
        default=(MotionKind.CIRCLE, MotionKind.FIGURE8, MotionKind.STRAIGHT),
    )

    def __post_init__(self) -> None:
        for name in ("missile_speed", "navigation_gain", "target_radius", "target_speed"):
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name} range is inverted: ({lo}, {hi})")
        if self.missile_speed[0] <= 0:
            raise ValueError("missile_speed range must be positive")
        if self.target_radius[0] <= 0:
            raise ValueError("target_radius range must be positive")
        if self.target_speed[0] < 0:
            raise ValueError("target_speed range must not be negative")
        if not self.motion_kinds:
            raise ValueError("motion_kinds must not be empty")


class Spawner:
    """Samples new engagement pairs inside a spawn box.

    The random source is always passed in explicitly so that seeded runs
    reproduce exactly.
    """

    def __init__(
        self,
        ranges: SpawnRanges | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self._ranges = ranges or SpawnRanges()
        self._max_attempts = max_attempts

    @property
    def ranges(self) -> SpawnRanges:
        return self._ranges

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def sample_positions(
        self,
        bounds: SpawnBounds,
        min_separation: float,
        rng: np.random.Generator,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Draw (missile_pos, target_pos) at least *min_separation* apart.

        The missile position is drawn once; only the target position is
        resampled.

        Raises:
            ValueError: If *min_separation* is negative.
            SpawnError: If no valid target position is found within
                ``max_attempts`` draws.
        """
        if min_separation < 0:
            raise ValueError(f"min_separation must be >= 0, got {min_separation}")

        missile_pos = uniform_in_box(rng, bounds.min_corner, bounds.max_corner)
        for attempt in range(self._max_attempts):
            target_pos = uniform_in_box(rng, bounds.min_corner, bounds.max_corner)
            if distance(missile_pos, target_pos) >= min_separation:
                if attempt:
                    logger.debug("Spawn separation met after %d rejections", attempt)
                return missile_pos, target_pos
        raise SpawnError(self._max_attempts, min_separation)

    def spawn_pair(
        self,
        bounds: SpawnBounds,
        min_separation: float,
        rng: np.random.Generator,
        missile_id: str,
        target_id: str,
    ) -> tuple[Missile, Target]:
        """Create a missile already locked onto a freshly spawned target.

        The missile launches pointing straight at the target.
        """
        missile_pos, target_pos = self.sample_positions(bounds, min_separation, rng)
        r = self._ranges

        speed = float(rng.uniform(*r.missile_speed))
        missile = Missile(
            missile_id=missile_id,
            position=missile_pos,
            velocity=normalize(target_pos - missile_pos) * speed,
            speed=speed,
            navigation_gain=float(rng.uniform(*r.navigation_gain)),
        )

        kind = r.motion_kinds[int(rng.integers(len(r.motion_kinds)))]
        pattern, phase = self._sample_pattern(kind, target_pos, rng)
        target = Target(
            target_id=target_id,
            position=target_pos,
            pattern=pattern,
            phase=phase,
        )

        missile.lock_onto(target.target_id)
        return missile, target

    def _sample_pattern(
        self,
        kind: MotionKind,
        position: np.ndarray,
        rng: np.random.Generator,
    ) -> tuple[MotionPattern, float]:
        """Pattern parameters for a target spawned at *position*, plus its phase.

        Circles are centered so the spawn point already lies on the orbit.
        The figure-eight passes through its center at phase 0.
        """
        r = self._ranges
        radius = float(rng.uniform(*r.target_radius))
        orbit_speed = float(rng.uniform(*r.target_speed))
        if kind is MotionKind.CIRCLE:
            phase = float(rng.uniform(0.0, 2.0 * math.pi))
            center = position - radius * np.array([math.cos(phase), 0.0, math.sin(phase)])
            return CirclePattern(center=center, radius=radius, orbit_speed=orbit_speed), phase
        if kind is MotionKind.FIGURE8:
            return Figure8Pattern(center=position, radius=radius, orbit_speed=orbit_speed), 0.0
        if kind is MotionKind.STRAIGHT:
            return StraightPattern(direction=random_unit_vector(rng), speed=orbit_speed), 0.0
        if kind is MotionKind.STATIONARY:
            return StationaryPattern(), 0.0
        raise TypeError(f"Unhandled motion kind: {kind!r}")
