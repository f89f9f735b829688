"""Tests for Pydantic config schema validation."""

from __future__ import annotations

import pytest
from omegaconf import OmegaConf
from pydantic import ValidationError

from intercept.core.config_schema import (
    InterceptConfigSchema,
    validate_config,
)


def _load_default_dict(config_path):
    cfg = OmegaConf.load(config_path)
    return OmegaConf.to_container(cfg, resolve=True)


class TestValidConfig:
    def test_default_yaml_passes(self, config_path):
        schema = validate_config(_load_default_dict(config_path))
        assert isinstance(schema, InterceptConfigSchema)
        assert schema.intercept.system.name == "INTERCEPT"
        assert schema.intercept.engagement.scenario.missiles[0].speed == 50.0

    def test_minimal_config_passes(self):
        schema = validate_config({"intercept": {}})
        assert schema.intercept.engagement.hit_radius == 2.0
        assert schema.intercept.simulation.time_scale == 1.0

    def test_extra_keys_allowed(self):
        validate_config({"intercept": {"custom_section": {"a": 1}}})


class TestInvalidConfig:
    def test_missing_root(self):
        with pytest.raises(ValidationError):
            validate_config({})

    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"system": {"log_level": "LOUD"}}})

    def test_negative_time_scale(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"simulation": {"time_scale": -1}}})

    def test_unknown_motion(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"engagement": {"spawn_motion_kinds": ["spiral"]}}})

    def test_inverted_spawn_area(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"engagement": {
                "spawn_area_min": [10, 0, 0], "spawn_area_max": [0, 0, 0],
            }}})

    def test_inverted_range(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"engagement": {"navigation_gain_range": [5, 1]}}})

    def test_scenario_target_needs_position(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"engagement": {"scenario": {"targets": [{"motion": "circle"}]}}}})

    def test_zero_attempts(self):
        with pytest.raises(ValidationError):
            validate_config({"intercept": {"engagement": {"max_spawn_attempts": 0}}})
