"""INTERCEPT multi-pair engagement demo.

Three missiles against three maneuvering targets (circle, figure-eight,
straight crossing). Prints the tactical picture at a fixed interval and
reports each intercept, with replacement pairs spawned on every hit.

Run:
    python scripts/demo_engagement.py
    python scripts/demo_engagement.py --duration 40 --seed 3 --verbose
"""

from __future__ import annotations

import argparse
import sys

import numpy as np

from intercept.core.types import CirclePattern, Figure8Pattern, StraightPattern
from intercept.engagement.config import EngagementConfig
from intercept.engagement.manager import EngagementManager


# ---------------------------------------------------------------------------
# Scenario definitions
# ---------------------------------------------------------------------------


def build_scenario(manager: EngagementManager) -> None:
    """Populate the manager with three missiles and three targets."""
    manager.create_target(
        [35.0, 5.0, 20.0],
        CirclePattern(center=np.array([20.0, 5.0, 20.0]), radius=15.0, orbit_speed=10.0),
        name="Orbiter",
    )
    manager.create_target(
        [-20.0, 5.0, 25.0],
        Figure8Pattern(center=np.array([-20.0, 5.0, 25.0]), radius=18.0, orbit_speed=12.0),
        name="Weaver",
    )
    manager.create_target(
        [30.0, 5.0, -10.0],
        StraightPattern(direction=np.array([-1.0, 0.0, 0.2]), speed=14.0),
        name="Crosser",
    )

    manager.create_missile([0.0, 5.0, -30.0], [0.0, 0.0, 1.0], speed=50.0, navigation_gain=3.0)
    manager.create_missile([-30.0, 5.0, -35.0], [0.3, 0.0, 1.0], speed=45.0, navigation_gain=4.0)
    manager.create_missile([30.0, 5.0, -40.0], [-0.2, 0.0, 1.0], speed=55.0, navigation_gain=2.5)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def print_picture(manager: EngagementManager, verbose: bool) -> None:
    status = manager.status()
    print(f"\n{'='*72}")
    print(f"=== t={manager.sim_time:6.2f}s  tick {status['tick']}  "
          f"hits {status['total_hits']}  "
          f"missiles {status['missiles_active']}/{status['missiles_total']}  "
          f"targets {status['targets_active']}/{status['targets_total']}")
    print(f"{'='*72}")
    names = {t.target_id: t.name for t in manager.targets}
    for m in manager.missiles:
        if not m.active and not verbose:
            continue
        lock = names.get(m.locked_target_id, "-")
        print(
            f"  {m.name:<12} pos=({m.position[0]:7.1f}, {m.position[2]:7.1f})  "
            f"N={m.navigation_gain:.2f}  lock={lock:<12} {'ACTIVE' if m.active else 'spent'}"
        )
    if verbose:
        for t in manager.targets:
            print(
                f"  {t.name:<12} pos=({t.position[0]:7.1f}, {t.position[2]:7.1f})  "
                f"{t.motion.value:<10} {'ACTIVE' if t.active else 'destroyed'}"
            )


def run_demo(duration: float, seed: int, verbose: bool) -> None:
    """Run the engagement demo at 60 Hz, printing every second."""
    dt = 1.0 / 60.0
    manager = EngagementManager(config=EngagementConfig(), seed=seed)
    build_scenario(manager)
    manager.initialize()

    print("=" * 72)
    print("  INTERCEPT Proportional Navigation Demo")
    print("=" * 72)
    print(f"  Duration: {duration:.0f}s   Seed: {seed}   Verbose: {verbose}")

    n_ticks = int(round(duration / dt))
    for tick in range(1, n_ticks + 1):
        for hit in manager.advance(dt):
            m = manager.query_missile_state(hit.missile_id)
            t = manager.query_target_state(hit.target_id)
            print(f"  ** t={hit.time:6.2f}s  {m.name} intercepted {t.name}")
        if tick % 60 == 0:
            print_picture(manager, verbose)

    status = manager.status()
    print(f"\n{'='*72}")
    print("=== ENGAGEMENT SUMMARY ===")
    print(f"{'='*72}")
    print(f"Simulated time: {manager.sim_time:.1f}s")
    print(f"Total hits: {status['total_hits']}")
    print(f"Missiles launched: {status['missiles_total']}")
    print(f"Targets presented: {status['targets_total']}")
    print(f"Failed replacement spawns: {status['spawn_failures']}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="INTERCEPT multi-pair proportional navigation demo",
    )
    parser.add_argument("--duration", type=float, default=20.0, help="Seconds to simulate")
    parser.add_argument("--seed", type=int, default=42, help="Spawn RNG seed")
    parser.add_argument("--verbose", action="store_true", help="Also list targets and spent missiles")
    args = parser.parse_args()
    run_demo(args.duration, args.seed, args.verbose)


if __name__ == "__main__":
    sys.exit(main())
