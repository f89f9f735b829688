"""Structured logging for the engagement simulator.

Simulator modules log through plain ``logging.getLogger(__name__)``;
:func:`setup_logging` routes the ``intercept`` logger tree through
structlog so those records come out as console text or JSON lines.
Log lines go to stderr by default, keeping stdout free for the CLI's
JSON summary. :func:`tick_context` stamps records with the tick being
simulated.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import structlog

PACKAGE_LOGGER = "intercept"


def _processor_chain() -> list:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _open_handlers(
    stream: TextIO, log_file: str | None, level: int,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(path), encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for the simulator.

    Safe to call repeatedly; earlier handlers on the package logger are
    closed and replaced.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR). Unknown names
            fall back to INFO.
        log_file: Optional path to a log file; parent dirs are created.
        log_json: Render one JSON object per line instead of console text.
        stream: Console stream, ``sys.stderr`` when omitted.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    stream = stream if stream is not None else sys.stderr

    chain = _processor_chain()
    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=hasattr(stream, "isatty") and stream.isatty(),
        )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()
    for handler in _open_handlers(stream, log_file, numeric_level):
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False


def tick_context(tick: int, sim_time: float):
    """Context manager binding tick index and simulated time to log lines.

    Every record emitted inside the block, structlog or stdlib, carries
    ``tick`` and ``sim_time`` fields once :func:`setup_logging` has run.
    """
    return structlog.contextvars.bound_contextvars(
        tick=tick, sim_time=round(sim_time, 6),
    )
