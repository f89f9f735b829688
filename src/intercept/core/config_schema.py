"""Pydantic schema for INTERCEPT configuration validation.

Mirrors the YAML structure in config/default.yaml. Used when
``validate=True`` is passed to ``InterceptConfig.load()``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

MotionName = Literal["circle", "figure8", "straight", "stationary"]
Vec3 = tuple[float, float, float]
Range = tuple[float, float]


class SystemConfig(BaseModel):
    name: str = "INTERCEPT"
    version: str = "0.1.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    validate_config: bool = False
    log_file: str | None = None
    log_json: bool = False


class SimulationSchema(BaseModel):
    time_scale: float = Field(default=1.0, ge=0)
    fixed_dt: float = Field(default=1.0 / 60.0, gt=0)
    paused: bool = False
    seed: int | None = None


class ScenarioMissile(BaseModel):
    name: str | None = None
    position: Vec3
    velocity: Vec3 = (0.0, 0.0, 1.0)
    speed: float = Field(default=50.0, gt=0)
    navigation_gain: float = Field(default=3.0, ge=0)
    target: str | None = None


class ScenarioTarget(BaseModel):
    name: str | None = None
    position: Vec3
    motion: MotionName = "circle"
    center: Vec3 | None = None
    radius: float = Field(default=20.0, gt=0)
    orbit_speed: float = Field(default=10.0, ge=0)
    direction: Vec3 = (0.0, 0.0, 1.0)


class ScenarioSchema(BaseModel):
    missiles: list[ScenarioMissile] = Field(default_factory=list)
    targets: list[ScenarioTarget] = Field(default_factory=list)


class EngagementSchema(BaseModel):
    auto_assign_targets: bool = True
    spawn_on_hit: bool = True
    spawn_area_min: Vec3 = (-40.0, 5.0, -40.0)
    spawn_area_max: Vec3 = (40.0, 5.0, 40.0)
    min_spawn_distance: float = Field(default=20.0, ge=0)
    max_spawn_attempts: int = Field(default=100, ge=1)
    hit_radius: float = Field(default=2.0, gt=0)
    missile_speed_range: Range = (40.0, 60.0)
    navigation_gain_range: Range = (2.5, 4.0)
    target_radius_range: Range = (10.0, 20.0)
    target_speed_range: Range = (8.0, 15.0)
    spawn_motion_kinds: list[MotionName] = Field(
        default_factory=lambda: ["circle", "figure8", "straight"], min_length=1,
    )
    scenario: ScenarioSchema = Field(default_factory=ScenarioSchema)

    @model_validator(mode="after")
    def _check_ranges(self) -> EngagementSchema:
        for axis, (lo, hi) in enumerate(zip(self.spawn_area_min, self.spawn_area_max)):
            if lo > hi:
                raise ValueError(f"spawn_area_min exceeds spawn_area_max on axis {axis}")
        for name in (
            "missile_speed_range",
            "navigation_gain_range",
            "target_radius_range",
            "target_speed_range",
        ):
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name} is inverted: ({lo}, {hi})")
        if self.missile_speed_range[0] <= 0:
            raise ValueError("missile_speed_range must be positive")
        if self.target_radius_range[0] <= 0:
            raise ValueError("target_radius_range must be positive")
        return self


class InterceptRootConfig(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    simulation: SimulationSchema = Field(default_factory=SimulationSchema)
    engagement: EngagementSchema = Field(default_factory=EngagementSchema)

    model_config = {"extra": "allow"}


class InterceptConfigSchema(BaseModel):
    """Top-level wrapper matching YAML root key ``intercept:``."""

    intercept: InterceptRootConfig

    model_config = {"extra": "allow"}


def validate_config(cfg_dict: dict) -> InterceptConfigSchema:
    """Validate a raw config dict (e.g. from OmegaConf) against the schema.

    Raises ``pydantic.ValidationError`` on invalid config.
    """
    return InterceptConfigSchema.model_validate(cfg_dict)
