"""Scenario: multi-tick engagements run end to end through EngagementManager."""

from __future__ import annotations

import math

import numpy as np
import pytest

from intercept.core.types import MotionKind
from intercept.engagement.config import EngagementConfig
from intercept.engagement.manager import EngagementManager
from intercept.engagement.spawner import SpawnRanges
from intercept.utils.vectors import distance


def _run_until_hit(mgr: EngagementManager, dt: float, max_ticks: int):
    for _ in range(max_ticks):
        hits = mgr.advance(dt)
        if hits:
            return hits
    return []


class TestHeadOnIntercept:
    """Missile at (0,5,-30) flying +z at 50 u/s onto a stationary target at (0,5,0)."""

    @pytest.fixture
    def engagement(self):
        mgr = EngagementManager(config=EngagementConfig(spawn_on_hit=False))
        tid = mgr.create_target([0.0, 5.0, 0.0], "stationary")
        mid = mgr.create_missile([0.0, 5.0, -30.0], [0.0, 0.0, 1.0], speed=50.0, navigation_gain=3.0)
        mgr.lock_target(mid, tid)
        return mgr, mid, tid

    def test_z_strictly_increases_until_hit(self, engagement):
        mgr, mid, _ = engagement
        last_z = mgr.query_missile_state(mid).position[2]
        while mgr.query_missile_state(mid).active:
            mgr.advance(0.1)
            z = mgr.query_missile_state(mid).position[2]
            assert z > last_z
            last_z = z
            assert mgr.tick_count < 100

    def test_hit_emitted_on_schedule(self, engagement):
        mgr, mid, tid = engagement
        hits = _run_until_hit(mgr, 0.1, 100)
        assert len(hits) == 1
        assert hits[0].missile_id == mid
        assert hits[0].target_id == tid
        # 30 units at 50 u/s: inside the 2-unit radius on the 6th tick
        assert hits[0].tick == 6
        assert hits[0].time == pytest.approx(0.6)
        assert hits[0].time <= 7.0

    def test_path_stays_on_axis(self, engagement):
        mgr, mid, _ = engagement
        _run_until_hit(mgr, 0.1, 100)
        pos = mgr.query_missile_state(mid).position
        assert pos[0] == pytest.approx(0.0)
        assert pos[1] == pytest.approx(5.0)


class TestManeuveringTargets:
    @pytest.mark.parametrize("motion,params", [
        ("circle", {"center": [20.0, 5.0, 20.0], "radius": 15.0, "orbit_speed": 10.0}),
        ("figure8", {"radius": 15.0, "orbit_speed": 12.0}),
        ("straight", {"direction": [-1.0, 0.0, 0.0], "orbit_speed": 12.0}),
    ])
    def test_pn_missile_catches_slower_target(self, motion, params):
        mgr = EngagementManager(config=EngagementConfig(spawn_on_hit=False))
        tid = mgr.create_target([35.0, 5.0, 20.0], motion, params)
        mid = mgr.create_missile([0.0, 5.0, -30.0], [0.0, 0.0, 1.0], speed=50.0, navigation_gain=4.0)
        mgr.lock_target(mid, tid)

        hits = _run_until_hit(mgr, 0.01, 3000)
        assert [(h.missile_id, h.target_id) for h in hits] == [(mid, tid)]

    def test_speed_invariant_with_random_population(self):
        mgr = EngagementManager(config=EngagementConfig(spawn_on_hit=True), seed=7)
        for _ in range(6):
            mgr.spawn_pair()
        for _ in range(600):
            mgr.advance(1.0 / 60.0)
            for m in mgr.missiles:
                if m.active:
                    assert np.linalg.norm(m.velocity) == pytest.approx(m.speed, abs=1e-4)


class TestSpawnChain:
    def test_every_spawn_respects_separation(self):
        mgr = EngagementManager(config=EngagementConfig(min_spawn_distance=25.0), seed=11)
        for _ in range(200):
            mid, tid = mgr.spawn_pair()
            m = mgr.query_missile_state(mid)
            t = mgr.query_target_state(tid)
            assert distance(m.position, t.position) >= 25.0

    def test_hits_replenish_population(self):
        mgr = EngagementManager(config=EngagementConfig(spawn_on_hit=True), seed=21)
        mgr.spawn_pair()
        mgr.spawn_pair()
        total_hits = 0
        for _ in range(3000):
            hits = mgr.advance(1.0 / 60.0)
            total_hits += len(hits)
            # Replacement pairs are added in the same call that reports the hits
            assert len(mgr.missiles) == 2 + total_hits
        status = mgr.status()
        assert status["total_hits"] == total_hits
        assert status["missiles_total"] == 2 + total_hits
        assert status["missiles_active"] + total_hits == status["missiles_total"]


class TestDeterminism:
    def _run(self, seed: int) -> list[tuple]:
        mgr = EngagementManager(
            config=EngagementConfig(
                spawn_ranges=SpawnRanges(motion_kinds=(MotionKind.CIRCLE, MotionKind.FIGURE8)),
            ),
            seed=seed,
        )
        for _ in range(4):
            mgr.spawn_pair()
        events = []
        for _ in range(1200):
            events.extend((h.missile_id, h.target_id, h.tick) for h in mgr.advance(1.0 / 60.0))
        final = [tuple(np.round(m.position, 9)) for m in mgr.missiles]
        return events + final

    def test_same_seed_identical_runs(self):
        assert self._run(99) == self._run(99)

    def test_different_seed_differs(self):
        assert self._run(1) != self._run(2)


class TestCircleClosure:
    def test_target_returns_to_start_through_manager(self):
        mgr = EngagementManager(config=EngagementConfig(spawn_on_hit=False))
        r, s = 12.0, 9.0
        tid = mgr.create_target([r, 0.0, 0.0], "circle", {"center": [0, 0, 0], "radius": r, "orbit_speed": s})
        period = 2.0 * math.pi * r / s
        n = 2000
        for _ in range(n):
            mgr.advance(period / n)
        np.testing.assert_allclose(mgr.query_target_state(tid).position, [r, 0.0, 0.0], atol=1e-6)
