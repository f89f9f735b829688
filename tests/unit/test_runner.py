"""Tests for SimulationRunner frame stepping."""

import numpy as np
import pytest

from intercept.core.clock import FrameTimer, SimClock
from intercept.engagement.runner import SimulationConfig, SimulationRunner

HEAD_ON = {
    "spawn_on_hit": False,
    "scenario": {
        "missiles": [{"position": [0, 5, -30], "velocity": [0, 0, 1], "speed": 50.0}],
        "targets": [{"position": [0, 5, 0], "motion": "stationary"}],
    },
}


class TestSimulationConfig:
    def test_defaults(self):
        cfg = SimulationConfig.from_omegaconf(None)
        assert cfg.time_scale == 1.0
        assert cfg.paused is False
        assert cfg.seed is None

    def test_from_dict(self):
        cfg = SimulationConfig.from_omegaconf({"time_scale": 0.5, "fixed_dt": 0.1, "seed": 9})
        assert cfg.time_scale == 0.5
        assert cfg.fixed_dt == 0.1
        assert cfg.seed == 9

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            SimulationConfig(time_scale=-1.0)
        with pytest.raises(ValueError):
            SimulationConfig(fixed_dt=0.0)


class TestSimulationRunner:
    def test_time_scale_applied_to_dt(self):
        runner = SimulationRunner(HEAD_ON, SimulationConfig(time_scale=2.0))
        runner.step(0.05)
        assert runner.manager.sim_time == pytest.approx(0.1)
        assert runner.clock.elapsed() == pytest.approx(0.05)
        np.testing.assert_allclose(runner.manager.missiles[0].position, [0, 5, -25])

    def test_zero_time_scale_freezes_simulation(self):
        runner = SimulationRunner(HEAD_ON, SimulationConfig(time_scale=0.0))
        runner.step(0.1)
        assert runner.manager.tick_count == 0
        assert runner.clock.elapsed() == pytest.approx(0.1)

    def test_pause_and_resume(self):
        runner = SimulationRunner(HEAD_ON)
        runner.pause()
        assert runner.step(0.1) == []
        assert runner.manager.tick_count == 0
        assert runner.clock.elapsed() == 0.0
        runner.resume()
        runner.step(0.1)
        assert runner.manager.tick_count == 1
        assert runner.toggle_pause() is True

    def test_run_reports_hit(self):
        runner = SimulationRunner(HEAD_ON, SimulationConfig(fixed_dt=0.1))
        hits = runner.run(1.0)
        assert len(hits) == 1
        assert runner.manager.tick_count == 10
        assert runner.status()["total_hits"] == 1

    def test_run_while_paused(self):
        runner = SimulationRunner(HEAD_ON, SimulationConfig(paused=True))
        assert runner.run(1.0) == []
        assert runner.manager.tick_count == 0

    def test_reset_restores_scenario(self):
        runner = SimulationRunner(HEAD_ON, SimulationConfig(fixed_dt=0.1))
        runner.run(1.0)
        runner.reset()
        assert runner.manager.total_hits == 0
        assert runner.clock.elapsed() == 0.0
        np.testing.assert_allclose(runner.manager.missiles[0].position, [0, 5, -30])
        assert runner.manager.targets[0].active

    def test_spawn_new_pair(self):
        runner = SimulationRunner(HEAD_ON, SimulationConfig(seed=1))
        mid, tid = runner.spawn_new_pair()
        assert runner.manager.query_missile_state(mid).locked_target == tid

    def test_set_time_scale(self):
        runner = SimulationRunner(HEAD_ON)
        runner.time_scale = 3.0
        assert runner.status()["time_scale"] == 3.0
        with pytest.raises(ValueError):
            runner.time_scale = -0.5

    def test_injected_clock(self):
        clock = SimClock(start_epoch=500.0)
        runner = SimulationRunner(HEAD_ON, clock=clock)
        runner.step(0.25)
        assert clock.now() == pytest.approx(500.25)

    def test_status_reports_frame_rate(self):
        stamps = iter([0.0, 0.1, 0.2, 0.3, 0.4])
        runner = SimulationRunner(
            HEAD_ON, frame_timer=FrameTimer(time_source=lambda: next(stamps)),
        )
        runner.step(0.1)
        runner.pause()
        runner.step(0.1)
        runner.step(0.1)
        assert runner.status()["fps"] == pytest.approx(10.0)
        runner.reset()
        assert runner.status()["fps"] == 0.0

    def test_from_root_config(self, default_config):
        runner = SimulationRunner.from_config(default_config.intercept)
        status = runner.status()
        assert status["missiles_total"] == 1
        assert status["targets_total"] == 1
        assert status["paused"] is False
