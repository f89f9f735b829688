"""Tests for the ``python -m intercept`` entry point."""

from __future__ import annotations

import json

from intercept.__main__ import main


class TestCLI:
    def test_head_on_run_prints_summary(self, config_path, capsys):
        rc = main([
            "--config", str(config_path),
            "--scenario", "head_on",
            "--duration", "1.0",
            "--log-level", "ERROR",
        ])
        assert rc == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["total_hits"] == 1
        assert len(summary["hits"]) == 1
        assert summary["hits"][0]["missile_id"] == "M-1"
        assert summary["missiles_total"] == 1

    def test_overrides(self, config_path, capsys):
        rc = main([
            "--config", str(config_path),
            "--duration", "0.5",
            "--time-scale", "2.0",
            "--seed", "3",
            "--log-level", "ERROR",
        ])
        assert rc == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["time_scale"] == 2.0
        assert summary["sim_time"] > summary["frame_time"]

    def test_missing_config(self, tmp_path, capsys):
        rc = main(["--config", str(tmp_path / "nope.yaml")])
        assert rc == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        bad = tmp_path / "bad.yaml"
        bad.write_text("intercept:\n  engagement:\n    hit_radius: 0\n")
        rc = main(["--config", str(bad), "--validate-config"])
        assert rc == 1
        assert "validation failed" in capsys.readouterr().err
