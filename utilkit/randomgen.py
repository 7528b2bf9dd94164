"""Uniform random vectors and matrices, optionally reproducible by seed."""

from __future__ import annotations

import random

REAL_RANDOM = 0
"""Seed value meaning: draw from a fresh, unpredictable seed."""


def _engine(seed: int) -> random.Random:
    return random.Random(None if seed == REAL_RANDOM else seed)


def _validate(min_value: float, max_value: float, *sizes: int) -> None:
    if min_value > max_value:
        raise ValueError("min_value must not exceed max_value")
    if any(size < 0 for size in sizes):
        raise ValueError("sizes must not be negative")


def _draw(rng: random.Random, min_value: float, max_value: float) -> float:
    return min_value + (max_value - min_value) * rng.random()


def generate_vector(
    dim: int,
    min_value: float = 0.0,
    max_value: float = 1.0,
    seed: int = REAL_RANDOM,
) -> list[float]:
    """Return *dim* values drawn uniformly from [min_value, max_value).

    A *seed* other than :data:`REAL_RANDOM` makes the result reproducible.
    """
    _validate(min_value, max_value, dim)
    rng = _engine(seed)
    return [_draw(rng, min_value, max_value) for _ in range(dim)]


def generate_matrix(
    height: int,
    column: int,
    min_value: float = 0.0,
    max_value: float = 1.0,
    seed: int = REAL_RANDOM,
) -> list[list[float]]:
    """Return a *height* by *column* matrix of uniform values, row by row."""
    _validate(min_value, max_value, height, column)
    rng = _engine(seed)
    return [[_draw(rng, min_value, max_value) for _ in range(column)] for _ in range(height)]