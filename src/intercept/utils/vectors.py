"""3-vector helpers shared by the motion and guidance code."""

from __future__ import annotations

import numpy as np

# Magnitudes below this are treated as degenerate directions.
EPSILON = 1e-9


def vec3(values=None) -> np.ndarray:
    """Coerce a sequence to a float64 [x, y, z] array (zeros if None)."""
    if values is None:
        return np.zeros(3)
    arr = np.array(values, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr


def magnitude(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along *v*, or the zero vector if |v| < EPSILON.

    Never returns NaN; callers check :func:`is_degenerate` when they
    need to distinguish the zero-vector fallback.
    """
    n = np.linalg.norm(v)
    if n < EPSILON:
        return np.zeros(3)
    return np.asarray(v, dtype=float) / n


def is_degenerate(v: np.ndarray) -> bool:
    return bool(np.linalg.norm(v) < EPSILON)


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def random_unit_vector(rng: np.random.Generator) -> np.ndarray:
    """Uniformly distributed direction on the unit sphere.

    Gaussian samples are rotation-invariant, so their normalized value is
    uniform on the sphere. Redraws on the (vanishingly rare) zero sample.
    """
    while True:
        v = rng.standard_normal(3)
        if not is_degenerate(v):
            return normalize(v)


def uniform_in_box(
    rng: np.random.Generator, lo: np.ndarray, hi: np.ndarray,
) -> np.ndarray:
    """Uniform sample inside the axis-aligned box [lo, hi].

    Degenerate axes (lo == hi) return lo on that axis.
    """
    return rng.uniform(lo, hi)
