"""Shared pytest fixtures for INTERCEPT tests."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest
from omegaconf import OmegaConf

from intercept.core.types import CirclePattern, Missile, StationaryPattern, Target


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def config_path(project_root: Path) -> Path:
    return project_root / "config" / "default.yaml"


@pytest.fixture
def default_config(config_path: Path):
    return OmegaConf.load(config_path)


@pytest.fixture(autouse=True)
def _restore_intercept_logger():
    """setup_logging() detaches the package logger from root; undo it per test."""
    yield
    root = logging.getLogger("intercept")
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)


@pytest.fixture
def head_on_missile() -> Missile:
    """Missile 30 units short of the origin target, flying straight at it."""
    return Missile(
        missile_id="M-1",
        position=np.array([0.0, 5.0, -30.0]),
        velocity=np.array([0.0, 0.0, 50.0]),
        speed=50.0,
        navigation_gain=3.0,
        locked_target_id="T-1",
    )


@pytest.fixture
def stationary_target() -> Target:
    return Target(
        target_id="T-1",
        position=np.array([0.0, 5.0, 0.0]),
        pattern=StationaryPattern(),
    )


@pytest.fixture
def circle_target() -> Target:
    """Target on a radius-15 orbit, starting at phase 0."""
    center = np.array([20.0, 5.0, 20.0])
    return Target(
        target_id="T-C",
        position=center + np.array([15.0, 0.0, 0.0]),
        pattern=CirclePattern(center=center, radius=15.0, orbit_speed=10.0),
        phase=0.0,
    )
