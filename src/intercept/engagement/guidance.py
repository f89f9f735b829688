"""Proportional-navigation guidance.

Pure PN law:  a_lat = N * Vc * d(LOS)/dt

where N is the navigation gain, Vc the closing speed along the line of
sight, and the LOS rate is estimated by finite difference between
consecutive unit LOS vectors. The commanded acceleration only rotates
the velocity; its magnitude is re-clamped to the missile's fixed speed
every tick.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

import numpy as np

from intercept.core.types import Missile, Target
from intercept.utils.vectors import distance, is_degenerate, normalize

logger = logging.getLogger(__name__)

DEFAULT_HIT_RADIUS = 2.0


@dataclass(frozen=True, eq=False)
class GuidanceCommand:
    """Result of one guidance update.

    ``missile`` is the successor state; the input missile is untouched.
    ``hit`` means the missile closed inside the hit radius this tick and
    both it and its target must be deactivated.
    """

    missile: Missile
    lateral_acceleration: np.ndarray
    closing_speed: float = 0.0
    hit: bool = False


def _copy_missile(missile: Missile) -> Missile:
    return dataclasses.replace(
        missile,
        position=missile.position.copy(),
        velocity=missile.velocity.copy(),
        last_los=missile.last_los.copy(),
    )


class GuidanceEngine:
    """Steers missiles onto their locked targets with pure PN."""

    def __init__(self, hit_radius: float = DEFAULT_HIT_RADIUS):
        if hit_radius <= 0:
            raise ValueError(f"hit_radius must be > 0, got {hit_radius}")
        self._hit_radius = hit_radius

    @property
    def hit_radius(self) -> float:
        return self._hit_radius

    def update(self, missile: Missile, target: Target | None, dt: float) -> GuidanceCommand:
        """Compute the missile's next state.

        Args:
            missile: Current missile state.
            target: The resolved locked target, or None if the lock is
                absent or the handle no longer resolves.
            dt: Timestep in seconds.

        Returns:
            GuidanceCommand. No-op (copy of the input, zero command) when
            the missile is inactive, unlocked, its target is inactive, or
            ``dt <= 0``.
        """
        nxt = _copy_missile(missile)
        if (
            dt <= 0
            or not missile.active
            or target is None
            or not target.active
            or missile.locked_target_id != target.target_id
        ):
            return GuidanceCommand(missile=nxt, lateral_acceleration=np.zeros(3))

        los = normalize(target.position - missile.position)

        # No LOS history right after lock-on: zero rate, no lateral command
        if missile.has_last_los:
            los_rate = (los - missile.last_los) / dt
        else:
            los_rate = np.zeros(3)
        nxt.last_los = los.copy()
        nxt.has_last_los = True

        relative_velocity = missile.velocity - target.velocity
        closing_speed = float(np.dot(relative_velocity, los))

        lateral_acceleration = missile.navigation_gain * closing_speed * los_rate

        heading = normalize(missile.velocity + lateral_acceleration * dt)
        if not is_degenerate(heading):
            nxt.velocity = heading * missile.speed
        elif is_degenerate(missile.velocity) and not is_degenerate(los):
            # Headingless missile: launch straight down the line of sight
            nxt.velocity = los * missile.speed

        nxt.position = missile.position + nxt.velocity * dt

        hit = distance(nxt.position, target.position) < self._hit_radius
        if hit:
            nxt.active = False

        return GuidanceCommand(
            missile=nxt,
            lateral_acceleration=lateral_acceleration,
            closing_speed=closing_speed,
            hit=hit,
        )

    def advance(self, missile: Missile, target: Target | None, dt: float) -> GuidanceCommand:
        """Apply :meth:`update` in place; on a hit, deactivate both entities."""
        cmd = self.update(missile, target, dt)
        new = cmd.missile
        missile.position = new.position
        missile.velocity = new.velocity
        missile.last_los = new.last_los
        missile.has_last_los = new.has_last_los
        missile.active = new.active
        if cmd.hit and target is not None:
            target.active = False
            logger.debug(
                "%s intercepted %s (closing speed %.1f)",
                missile.missile_id, target.target_id, cmd.closing_speed,
            )
        return cmd
