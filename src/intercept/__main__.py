"""INTERCEPT CLI entry point.

Usage:
    python -m intercept                              # Default config, 30 s run
    python -m intercept --config custom.yaml         # Custom config
    python -m intercept --scenario head_on           # Merge config/scenarios/head_on.yaml
    python -m intercept --duration 60 --seed 7       # Longer, reseeded run
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from intercept.core.config import InterceptConfig
from intercept.engagement.runner import SimulationRunner
from intercept.utils.logging import setup_logging

logger = logging.getLogger("intercept.cli")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="intercept",
        description="INTERCEPT - proportional-navigation engagement simulator",
    )
    parser.add_argument(
        "--config",
        "-c",
        default="config/default.yaml",
        help="Path to configuration YAML file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--scenario",
        default=None,
        help="Scenario name merged from scenarios/<name>.yaml beside the config",
    )
    parser.add_argument(
        "--duration",
        "-d",
        type=float,
        default=30.0,
        help="Host seconds to simulate (default: 30)",
    )
    parser.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Override simulation time-scale multiplier",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override spawn RNG seed",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        default=False,
        help="Validate config against Pydantic schema before starting",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to log file (default: no file logging)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=False,
        help="Output logs as JSON instead of human-readable",
    )
    args = parser.parse_args(argv)

    config = InterceptConfig(args.config)
    try:
        cfg = config.load(validate=args.validate_config, scenario=args.scenario)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: Config validation failed:\n{e}", file=sys.stderr)
        return 1

    if args.time_scale is not None:
        config.override("intercept.simulation.time_scale", args.time_scale)
    if args.seed is not None:
        config.override("intercept.simulation.seed", args.seed)

    system = cfg.intercept.get("system", {})
    log_level = args.log_level or system.get("log_level", "INFO")
    log_file = args.log_file or system.get("log_file", None)
    log_json = args.log_json or system.get("log_json", False)
    setup_logging(log_level, log_file=log_file, log_json=log_json)

    runner = SimulationRunner.from_config(cfg.intercept)
    logger.info("Running %.1fs of simulated time", args.duration)
    hits = runner.run(args.duration)
    logger.info("Finished: %d hits", len(hits))

    summary = runner.status()
    summary["hits"] = [h.to_dict() for h in hits]
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
