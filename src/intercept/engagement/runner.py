"""Host-side frame stepping: pause, time scale, fixed-step runs, reset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from omegaconf import DictConfig, OmegaConf

from intercept.core.clock import FrameTimer, SimClock
from intercept.core.types import HitEvent
from intercept.engagement.manager import EngagementManager

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Frame-loop settings applied outside the engagement tick."""

    time_scale: float = 1.0
    fixed_dt: float = 1.0 / 60.0
    paused: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.time_scale < 0:
            raise ValueError(f"time_scale must be >= 0, got {self.time_scale}")
        if self.fixed_dt <= 0:
            raise ValueError(f"fixed_dt must be > 0, got {self.fixed_dt}")

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> SimulationConfig:
        if cfg is None:
            return cls()
        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)
        seed = cfg.get("seed")
        return cls(
            time_scale=float(cfg.get("time_scale", 1.0)),
            fixed_dt=float(cfg.get("fixed_dt", 1.0 / 60.0)),
            paused=bool(cfg.get("paused", False)),
            seed=int(seed) if seed is not None else None,
        )


class SimulationRunner:
    """Drives an EngagementManager from host frame times.

    Each frame's elapsed time is multiplied by ``time_scale`` before it
    reaches :meth:`EngagementManager.advance`. While paused, frames are
    dropped and neither clock advances.
    """

    def __init__(
        self,
        engagement_cfg: Any = None,
        sim_config: SimulationConfig | None = None,
        clock: SimClock | None = None,
        frame_timer: FrameTimer | None = None,
    ):
        self._engagement_cfg = engagement_cfg
        self._sim_config = sim_config or SimulationConfig()
        self._clock = clock or SimClock()
        self._frame_timer = frame_timer or FrameTimer()
        self._time_scale = self._sim_config.time_scale
        self._paused = self._sim_config.paused
        self._manager = EngagementManager.from_config(
            engagement_cfg, seed=self._sim_config.seed,
        )

    @property
    def manager(self) -> EngagementManager:
        return self._manager

    @property
    def clock(self) -> SimClock:
        return self._clock

    @property
    def frame_timer(self) -> FrameTimer:
        return self._frame_timer

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"time_scale must be >= 0, got {value}")
        self._time_scale = value

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def toggle_pause(self) -> bool:
        self._paused = not self._paused
        return self._paused

    def step(self, frame_dt: float) -> list[HitEvent]:
        """Advance one host frame of *frame_dt* wall seconds.

        Paused frames still count towards the frame rate.
        """
        self._frame_timer.tick()
        if self._paused:
            return []
        self._clock.step(max(frame_dt, 0.0))
        return self._manager.advance(frame_dt * self._time_scale)

    def run(self, duration: float) -> list[HitEvent]:
        """Step at ``fixed_dt`` until *duration* frame-seconds have passed.

        Returns every hit produced during the run. Returns immediately if
        paused.
        """
        hits: list[HitEvent] = []
        if self._paused:
            return hits
        dt = self._sim_config.fixed_dt
        n_frames = int(round(duration / dt))
        for _ in range(n_frames):
            hits.extend(self.step(dt))
        logger.info(
            "Ran %d frames (%.2fs sim): %d hits",
            n_frames, self._manager.sim_time, len(hits),
        )
        return hits

    def reset(self) -> None:
        """Rebuild the scenario from config with the original seed."""
        self._manager = EngagementManager.from_config(
            self._engagement_cfg, seed=self._sim_config.seed,
        )
        self._clock.reset()
        self._frame_timer.reset()
        logger.info("Simulation reset")

    def spawn_new_pair(self) -> tuple[str, str]:
        return self._manager.spawn_pair()

    def status(self) -> dict[str, Any]:
        status = self._manager.status()
        status.update({
            "paused": self._paused,
            "time_scale": self._time_scale,
            "frame_time": round(self._clock.elapsed(), 6),
            "fps": round(self._frame_timer.fps, 1),
        })
        return status

    @classmethod
    def from_config(cls, cfg: Any) -> SimulationRunner:
        """Build from the root ``intercept`` config node (or dict)."""
        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)
        cfg = cfg or {}
        return cls(
            engagement_cfg=cfg.get("engagement"),
            sim_config=SimulationConfig.from_omegaconf(cfg.get("simulation")),
        )
