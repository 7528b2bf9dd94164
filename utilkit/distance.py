"""Vector distance measures and a calculator that optionally validates input."""

from __future__ import annotations

import abc
import math
from collections.abc import Sequence

Vector = Sequence[float]


class DistanceError(ValueError):
    """Raised when vectors are unsuitable for a distance computation."""


class Distance(abc.ABC):
    """Base class for a distance between two vectors.

    Subclasses implement :meth:`calc`; :meth:`check` and :meth:`normalize`
    may be overridden.
    """

    @abc.abstractmethod
    def calc(self, v1: Vector, v2: Vector) -> float:
        """Return the distance between *v1* and *v2*."""

    def check(self, v1: Vector | None, v2: Vector | None) -> None:
        """Raise :class:`DistanceError` if either vector is missing or empty."""
        if v1 is None or v2 is None:
            raise DistanceError("input is nullptr")
        if len(v1) * len(v2) == 0:
            raise DistanceError("input dim error")

    def normalize(self, v: Vector) -> list[float]:
        """Return *v* scaled to unit length."""
        squared = sum(x * x for x in v)
        if squared == 0:
            raise DistanceError("cannot normalize a zero vector")
        factor = 1 / math.sqrt(squared)
        return [x * factor for x in v]


class EuclideanDistance(Distance):
    """Euclidean distance, or its square when *need_sqrt* is false."""

    def __init__(self, need_sqrt: bool = True) -> None:
        self.need_sqrt = need_sqrt

    def calc(self, v1: Vector, v2: Vector) -> float:
        total = sum((a - b) ** 2 for a, b in zip(v1, v2))
        return math.sqrt(total) if self.need_sqrt else total

    def check(self, v1: Vector | None, v2: Vector | None) -> None:
        """Also require both vectors to have the same, non-zero length."""
        if v1 is None or v2 is None:
            raise DistanceError("input is nullptr")
        if len(v1) != len(v2) or len(v1) * len(v2) == 0:
            raise DistanceError("euclidean distance dim error")


class CosineDistance(Distance):
    """Cosine of the angle between two vectors."""

    def calc(self, v1: Vector, v2: Vector) -> float:
        dot = norm1 = norm2 = 0.0
        for a, b in zip(v1, v2):
            dot += a * b
            norm1 += a * a
            norm2 += b * b
        denominator = math.sqrt(norm1) * math.sqrt(norm2)
        if denominator == 0:
            raise DistanceError("cosine distance of a zero vector")
        return dot / denominator


class InnerProductDistance(Distance):
    """Inner-product distance for normalized vectors.

    The result lies in [0, 1]; smaller means more similar and 0.5 means
    orthogonal.
    """

    def calc(self, v1: Vector, v2: Vector) -> float:
        dot = sum(a * b for a, b in zip(v1, v2))
        return (1 - dot) * 0.5


class DistanceCalculator:
    """Computes distances with a given :class:`Distance`, checking input if asked."""

    def __init__(self, distance: Distance, need_check: bool = False) -> None:
        if not isinstance(distance, Distance):
            raise TypeError("distance must be a Distance instance")
        self.distance = distance
        self.need_check = need_check

    def calculate(self, v1: Vector, v2: Vector) -> float:
        """Return the distance between *v1* and *v2*."""
        if self.need_check:
            self.distance.check(v1, v2)
        return self.distance.calc(v1, v2)

    def calculate_batch(self, query: Vector, nodes: Sequence[Vector]) -> list[float]:
        """Return the distance from *query* to each of *nodes*, in order."""
        return [self.calculate(query, node) for node in nodes]

    def normalize(self, v: Vector) -> list[float]:
        """Return *v* normalized by the distance's rule."""
        if self.need_check:
            self.distance.check(v, v)
        return self.distance.normalize(v)