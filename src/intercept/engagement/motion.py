"""Parametric target motion generators.

Orbit patterns (circle, figure-eight) place the target with a closed-form
position law driven by a phase angle; velocity is recovered by finite
difference between consecutive positions. Straight motion integrates a
constant velocity; stationary targets never move.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from intercept.core.types import (
    CirclePattern,
    Figure8Pattern,
    MotionPattern,
    StationaryPattern,
    StraightPattern,
    Target,
)
from intercept.utils.vectors import normalize


@dataclass(frozen=True, eq=False)
class MotionState:
    """Kinematic output of one motion update."""

    position: np.ndarray
    velocity: np.ndarray
    phase: float


def orbit_position(pattern: CirclePattern | Figure8Pattern, phase: float) -> np.ndarray:
    """Closed-form position on an orbit pattern at *phase* radians."""
    r = pattern.radius
    if isinstance(pattern, CirclePattern):
        offset = np.array([math.cos(phase) * r, 0.0, math.sin(phase) * r])
    else:
        offset = np.array([math.sin(phase) * r, 0.0, math.sin(2.0 * phase) * r * 0.5])
    return pattern.center + offset


def initial_phase(position: np.ndarray, pattern: MotionPattern) -> float:
    """Phase angle that best matches *position* on the pattern's curve.

    Circle uses ``atan2(dz, dx)`` of the offset from the center. For the
    figure-eight, ``sin(phi) = dx / r`` and the sign of ``cos(phi)`` is
    taken from ``dz = r sin(phi) cos(phi)``. A position at the center
    yields phase 0. Non-orbit patterns have no phase.
    """
    if isinstance(pattern, CirclePattern):
        offset = np.asarray(position, dtype=float) - pattern.center
        return float(math.atan2(offset[2], offset[0]))
    if isinstance(pattern, Figure8Pattern):
        offset = np.asarray(position, dtype=float) - pattern.center
        s = float(np.clip(offset[0] / pattern.radius, -1.0, 1.0))
        c = math.sqrt(max(0.0, 1.0 - s * s))
        if s * offset[2] < 0:
            c = -c
        return float(math.atan2(s, c))
    return 0.0


class MotionGenerator:
    """Advances targets along their motion patterns.

    Stateless: all memory (phase angle, previous position) lives on the
    Target, so ``update`` is a pure function of (target, dt).
    """

    def update(self, target: Target, dt: float) -> MotionState:
        """Compute the target's next kinematic state without mutating it.

        Returns the unchanged state when ``dt <= 0`` or the target is
        inactive.
        """
        unchanged = MotionState(
            position=target.position.copy(),
            velocity=target.velocity.copy(),
            phase=target.phase,
        )
        if dt <= 0 or not target.active:
            return unchanged

        pattern = target.pattern
        if isinstance(pattern, (CirclePattern, Figure8Pattern)):
            phase = target.phase + pattern.angular_speed * dt
            new_pos = orbit_position(pattern, phase)
            velocity = (new_pos - target.position) / dt
            return MotionState(position=new_pos, velocity=velocity, phase=phase)
        if isinstance(pattern, StraightPattern):
            velocity = normalize(pattern.direction) * pattern.speed
            return MotionState(
                position=target.position + velocity * dt,
                velocity=velocity,
                phase=target.phase,
            )
        if isinstance(pattern, StationaryPattern):
            return MotionState(
                position=target.position.copy(),
                velocity=np.zeros(3),
                phase=target.phase,
            )
        raise TypeError(f"Unhandled motion pattern: {type(pattern).__name__}")

    def advance(self, target: Target, dt: float) -> None:
        """Apply :meth:`update` to *target* in place."""
        state = self.update(target, dt)
        target.position = state.position
        target.velocity = state.velocity
        target.phase = state.phase

    def path_preview(self, target: Target, segments: int = 50) -> np.ndarray:
        """Sample one period of the target's future path, shape (segments, 3).

        Orbit patterns sweep a full 2*pi of phase from the current angle;
        straight motion samples half-second steps; stationary targets
        repeat their position.
        """
        pattern = target.pattern
        if isinstance(pattern, (CirclePattern, Figure8Pattern)):
            steps = np.linspace(2.0 * math.pi / segments, 2.0 * math.pi, segments)
            return np.array([orbit_position(pattern, target.phase + t) for t in steps])
        if isinstance(pattern, StraightPattern):
            step = normalize(pattern.direction) * pattern.speed * 0.5
            return np.array([target.position + step * i for i in range(1, segments + 1)])
        if isinstance(pattern, StationaryPattern):
            return np.tile(target.position, (segments, 1))
        raise TypeError(f"Unhandled motion pattern: {type(pattern).__name__}")
