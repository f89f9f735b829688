"""Engagement system configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from omegaconf import DictConfig, OmegaConf

from intercept.core.types import MotionKind, SpawnBounds
from intercept.engagement.spawner import DEFAULT_MAX_ATTEMPTS, SpawnRanges

logger = logging.getLogger(__name__)


def _pair(value: Any, default: tuple[float, float]) -> tuple[float, float]:
    if value is None:
        return default
    lo, hi = value
    return float(lo), float(hi)


@dataclass
class EngagementConfig:
    """Engagement manager configuration."""

    auto_assign_targets: bool = True
    spawn_on_hit: bool = True

    # Spawn box and separation
    spawn_area_min: tuple[float, float, float] = (-40.0, 5.0, -40.0)
    spawn_area_max: tuple[float, float, float] = (40.0, 5.0, 40.0)
    min_spawn_distance: float = 20.0
    max_spawn_attempts: int = DEFAULT_MAX_ATTEMPTS

    hit_radius: float = 2.0

    # Randomization ranges for spawned pairs
    spawn_ranges: SpawnRanges = field(default_factory=SpawnRanges)

    # Raw scenario entity definitions (consumed by EngagementManager.load_scenario)
    missile_defs: list[dict] = field(default_factory=list)
    target_defs: list[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.spawn_area_min = tuple(float(v) for v in self.spawn_area_min)
        self.spawn_area_max = tuple(float(v) for v in self.spawn_area_max)
        # Raises on inverted corners
        SpawnBounds(self.spawn_area_min, self.spawn_area_max)
        if self.min_spawn_distance < 0:
            raise ValueError(
                f"min_spawn_distance must be >= 0, got {self.min_spawn_distance}"
            )
        if self.max_spawn_attempts < 1:
            raise ValueError(
                f"max_spawn_attempts must be >= 1, got {self.max_spawn_attempts}"
            )
        if self.hit_radius <= 0:
            raise ValueError(f"hit_radius must be > 0, got {self.hit_radius}")

    @property
    def spawn_bounds(self) -> SpawnBounds:
        return SpawnBounds(self.spawn_area_min, self.spawn_area_max)

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> EngagementConfig:
        """Build from OmegaConf node or plain dict."""
        if cfg is None:
            return cls()

        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)
        if not isinstance(cfg, dict):
            cfg = dict(cfg)

        defaults = SpawnRanges()
        kinds = cfg.get("spawn_motion_kinds")
        if kinds:
            motion_kinds = tuple(MotionKind(str(k).lower()) for k in kinds)
        else:
            motion_kinds = defaults.motion_kinds
        ranges = SpawnRanges(
            missile_speed=_pair(cfg.get("missile_speed_range"), defaults.missile_speed),
            navigation_gain=_pair(cfg.get("navigation_gain_range"), defaults.navigation_gain),
            target_radius=_pair(cfg.get("target_radius_range"), defaults.target_radius),
            target_speed=_pair(cfg.get("target_speed_range"), defaults.target_speed),
            motion_kinds=motion_kinds,
        )

        scenario = cfg.get("scenario") or {}
        missile_defs = [dict(m) for m in (scenario.get("missiles") or [])]
        target_defs = [dict(t) for t in (scenario.get("targets") or [])]

        return cls(
            auto_assign_targets=bool(cfg.get("auto_assign_targets", True)),
            spawn_on_hit=bool(cfg.get("spawn_on_hit", True)),
            spawn_area_min=cfg.get("spawn_area_min", (-40.0, 5.0, -40.0)),
            spawn_area_max=cfg.get("spawn_area_max", (40.0, 5.0, 40.0)),
            min_spawn_distance=float(cfg.get("min_spawn_distance", 20.0)),
            max_spawn_attempts=int(cfg.get("max_spawn_attempts", DEFAULT_MAX_ATTEMPTS)),
            hit_radius=float(cfg.get("hit_radius", 2.0)),
            spawn_ranges=ranges,
            missile_defs=missile_defs,
            target_defs=target_defs,
        )
