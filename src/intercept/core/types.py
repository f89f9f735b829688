"""Core data types for the INTERCEPT engagement simulator."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

import numpy as np

from intercept.utils.vectors import vec3


class MotionKind(enum.Enum):
    """Target motion pattern tags."""

    CIRCLE = "circle"
    FIGURE8 = "figure8"
    STRAIGHT = "straight"
    STATIONARY = "stationary"


# ---------------------------------------------------------------------------
# Motion pattern variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class CirclePattern:
    """Horizontal orbit about ``center`` at constant tangential speed."""

    kind: ClassVar[MotionKind] = MotionKind.CIRCLE

    center: np.ndarray
    radius: float = 20.0
    orbit_speed: float = 10.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", vec3(self.center))
        if self.radius <= 0:
            raise ValueError(f"radius must be > 0, got {self.radius}")
        if self.orbit_speed < 0:
            raise ValueError(f"orbit_speed must be >= 0, got {self.orbit_speed}")

    @property
    def angular_speed(self) -> float:
        """Phase rate in rad/s (orbit_speed / radius)."""
        return self.orbit_speed / self.radius

    def to_dict(self) -> dict[str, Any]:
        return {
            "motion": self.kind.value,
            "center": self.center.tolist(),
            "radius": self.radius,
            "orbit_speed": self.orbit_speed,
        }


@dataclass(frozen=True, eq=False)
class Figure8Pattern:
    """Lissajous figure-eight: x = r sin(phi), z = 0.5 r sin(2 phi)."""

    kind: ClassVar[MotionKind] = MotionKind.FIGURE8

    center: np.ndarray
    radius: float = 20.0
    orbit_speed: float = 10.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", vec3(self.center))
        if self.radius <= 0:
            raise ValueError(f"radius must be > 0, got {self.radius}")
        if self.orbit_speed < 0:
            raise ValueError(f"orbit_speed must be >= 0, got {self.orbit_speed}")

    @property
    def angular_speed(self) -> float:
        return self.orbit_speed / self.radius

    def to_dict(self) -> dict[str, Any]:
        return {
            "motion": self.kind.value,
            "center": self.center.tolist(),
            "radius": self.radius,
            "orbit_speed": self.orbit_speed,
        }


@dataclass(frozen=True, eq=False)
class StraightPattern:
    """Constant velocity along ``direction`` (normalized at use) at ``speed``."""

    kind: ClassVar[MotionKind] = MotionKind.STRAIGHT

    direction: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    speed: float = 10.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", vec3(self.direction))

    def to_dict(self) -> dict[str, Any]:
        return {
            "motion": self.kind.value,
            "direction": self.direction.tolist(),
            "orbit_speed": self.speed,
        }


@dataclass(frozen=True, eq=False)
class StationaryPattern:
    """Target holds position with zero velocity."""

    kind: ClassVar[MotionKind] = MotionKind.STATIONARY

    def to_dict(self) -> dict[str, Any]:
        return {"motion": self.kind.value}


MotionPattern = Union[CirclePattern, Figure8Pattern, StraightPattern, StationaryPattern]


def pattern_from_config(cfg: dict, position: np.ndarray | None = None) -> MotionPattern:
    """Build a motion pattern from a config dict.

    Keys: ``motion`` (circle/figure8/straight/stationary), ``center``
    (defaults to *position*), ``radius``, ``orbit_speed``, ``direction``.
    Unknown motion names raise ``ValueError``.
    """
    kind = MotionKind(str(cfg.get("motion", "circle")).lower())
    if kind is MotionKind.STATIONARY:
        return StationaryPattern()
    speed = float(cfg.get("orbit_speed", 10.0))
    if kind is MotionKind.STRAIGHT:
        return StraightPattern(
            direction=vec3(cfg.get("direction", [0.0, 0.0, 1.0])),
            speed=speed,
        )
    center = cfg.get("center")
    if center is None:
        center = position if position is not None else [0.0, 0.0, 0.0]
    radius = float(cfg.get("radius", 20.0))
    if kind is MotionKind.CIRCLE:
        return CirclePattern(center=vec3(center), radius=radius, orbit_speed=speed)
    return Figure8Pattern(center=vec3(center), radius=radius, orbit_speed=speed)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


@dataclass
class Missile:
    """Constant-speed pursuer steered by proportional navigation.

    ``locked_target_id`` is a handle into the owning manager's target
    table, never the Target object itself.
    """

    missile_id: str
    position: np.ndarray
    velocity: np.ndarray
    speed: float = 50.0
    navigation_gain: float = 3.0
    name: str = "Missile"
    active: bool = True
    locked_target_id: str | None = None

    # Guidance memory for the finite-difference LOS rate
    last_los: np.ndarray = field(default_factory=lambda: np.zeros(3))
    has_last_los: bool = False

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.velocity = vec3(self.velocity)
        self.last_los = vec3(self.last_los)
        if self.speed <= 0:
            raise ValueError(f"speed must be > 0, got {self.speed}")

    def lock_onto(self, target_id: str | None) -> None:
        """Lock onto a target handle and forget the previous LOS sample."""
        self.locked_target_id = target_id
        self.has_last_los = False

    def snapshot(self) -> MissileState:
        return MissileState(
            missile_id=self.missile_id,
            name=self.name,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            speed=self.speed,
            navigation_gain=self.navigation_gain,
            active=self.active,
            locked_target=self.locked_target_id,
        )


@dataclass
class Target:
    """Maneuvering target driven by a motion pattern."""

    target_id: str
    position: np.ndarray
    pattern: MotionPattern = field(default_factory=StationaryPattern)
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    name: str = "Target"
    active: bool = True
    phase: float = 0.0  # radians, advances monotonically under orbit patterns

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.velocity = vec3(self.velocity)

    @property
    def motion(self) -> MotionKind:
        return self.pattern.kind

    def snapshot(self) -> TargetState:
        return TargetState(
            target_id=self.target_id,
            name=self.name,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            active=self.active,
            pattern=self.motion,
            phase=self.phase,
        )


# ---------------------------------------------------------------------------
# Query results and events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class MissileState:
    """Read-only view of a missile returned by ``query_missile_state``."""

    missile_id: str
    name: str
    position: np.ndarray
    velocity: np.ndarray
    speed: float
    navigation_gain: float
    active: bool
    locked_target: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "missile_id": self.missile_id,
            "name": self.name,
            "position": self.position.tolist(),
            "velocity": self.velocity.tolist(),
            "speed": self.speed,
            "navigation_gain": self.navigation_gain,
            "active": self.active,
            "locked_target": self.locked_target,
        }


@dataclass(frozen=True, eq=False)
class TargetState:
    """Read-only view of a target returned by ``query_target_state``."""

    target_id: str
    name: str
    position: np.ndarray
    velocity: np.ndarray
    active: bool
    pattern: MotionKind
    phase: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "name": self.name,
            "position": self.position.tolist(),
            "velocity": self.velocity.tolist(),
            "active": self.active,
            "pattern": self.pattern.value,
            "phase": self.phase,
        }


@dataclass(frozen=True)
class HitEvent:
    """A missile/target pair destroyed during one tick."""

    missile_id: str
    target_id: str
    tick: int = 0
    time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "missile_id": self.missile_id,
            "target_id": self.target_id,
            "tick": self.tick,
            "time": round(self.time, 6),
        }


@dataclass(frozen=True, eq=False)
class SpawnBounds:
    """Axis-aligned spawn box [min_corner, max_corner]."""

    min_corner: np.ndarray
    max_corner: np.ndarray

    def __post_init__(self) -> None:
        lo = vec3(self.min_corner)
        hi = vec3(self.max_corner)
        if np.any(lo > hi):
            raise ValueError(f"min_corner {lo.tolist()} exceeds max_corner {hi.tolist()}")
        object.__setattr__(self, "min_corner", lo)
        object.__setattr__(self, "max_corner", hi)

    @property
    def size(self) -> np.ndarray:
        return self.max_corner - self.min_corner

    @property
    def diagonal(self) -> float:
        """Largest separation two points in the box can have."""
        return float(np.linalg.norm(self.size))

    def contains(self, point: np.ndarray) -> bool:
        p = vec3(point)
        return bool(np.all(p >= self.min_corner) and np.all(p <= self.max_corner))
