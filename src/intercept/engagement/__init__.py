"""Engagement simulation — target motion, PN guidance, spawning, orchestration.

Provides parametric target motion generators, a proportional-navigation
guidance law for constant-speed missiles, seeded pair spawning with a
minimum-separation constraint, and the manager that owns the entity
population and runs the per-tick state transition.
"""

from intercept.engagement.motion import (
    MotionGenerator,
    MotionState,
    initial_phase,
    orbit_position,
)
from intercept.engagement.guidance import (
    GuidanceCommand,
    GuidanceEngine,
)
from intercept.engagement.spawner import (
    SpawnRanges,
    Spawner,
)
from intercept.engagement.config import EngagementConfig
from intercept.engagement.manager import EngagementManager
from intercept.engagement.runner import (
    SimulationConfig,
    SimulationRunner,
)

__all__ = [
    "EngagementConfig",
    "EngagementManager",
    "GuidanceCommand",
    "GuidanceEngine",
    "MotionGenerator",
    "MotionState",
    "SimulationConfig",
    "SimulationRunner",
    "SpawnRanges",
    "Spawner",
    "initial_phase",
    "orbit_position",
]
