"""Exception types raised by the simulator API."""

from __future__ import annotations


class InterceptError(Exception):
    """Base class for simulator errors."""


class EntityNotFoundError(InterceptError, KeyError):
    """A handle does not resolve to a missile or target in the population."""

    def __init__(self, kind: str, handle: str):
        self.kind = kind
        self.handle = handle
        super().__init__(f"{kind} not found: {handle!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class SpawnError(InterceptError, RuntimeError):
    """Rejection sampling could not satisfy the minimum spawn separation."""

    def __init__(self, attempts: int, min_separation: float):
        self.attempts = attempts
        self.min_separation = min_separation
        super().__init__(
            f"No target position at least {min_separation:.1f} units from the "
            f"missile after {attempts} attempts"
        )
