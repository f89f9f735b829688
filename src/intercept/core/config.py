"""Hierarchical YAML configuration system using OmegaConf."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf


class InterceptConfig:
    """Loads and merges YAML configuration files.

    Supports a base config with optional scenario overrides from a
    ``scenarios/`` directory beside it, and dot-path overrides.
    """

    def __init__(self, config_path: str | Path = "config/default.yaml"):
        self._config_path = Path(config_path)
        self._config: DictConfig | None = None

    def load(self, validate: bool = False, scenario: str | None = None) -> DictConfig:
        """Load the base config, optionally merging a named scenario file.

        Args:
            validate: If True, validate the loaded config against the
                Pydantic schema and raise ``pydantic.ValidationError``
                on invalid values.
            scenario: Name of ``scenarios/<name>.yaml`` next to the base
                config, merged over it.
        """
        if not self._config_path.exists():
            raise FileNotFoundError(f"Config not found: {self._config_path}")

        base = OmegaConf.load(self._config_path)
        assert isinstance(base, DictConfig)

        if scenario is not None:
            scenario_path = self._config_path.parent / "scenarios" / f"{scenario}.yaml"
            if not scenario_path.exists():
                raise FileNotFoundError(f"Scenario not found: {scenario_path}")
            base = OmegaConf.merge(base, OmegaConf.load(scenario_path))

        if validate or OmegaConf.select(base, "intercept.system.validate_config", default=False):
            from intercept.core.config_schema import validate_config

            validate_config(OmegaConf.to_container(base, resolve=True))

        self._config = base
        return self._config

    def override(self, dotpath: str, value: Any) -> None:
        """Override a config value using dot notation.

        Example: config.override("intercept.simulation.time_scale", 2.0)
        """
        if self._config is None:
            raise RuntimeError("Config not loaded yet. Call load() first.")
        OmegaConf.update(self._config, dotpath, value)

    @property
    def cfg(self) -> DictConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded yet. Call load() first.")
        return self._config
