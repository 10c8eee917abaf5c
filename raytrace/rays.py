"""Rays and their transformation between coordinate spaces."""
from typing import NamedTuple

from raytrace.transforms import Matrix, apply
from raytrace.tuples import Vec4, add, mul


class Ray(NamedTuple):
    """Ray with ``origin`` point and ``direction`` vector."""

    origin: Vec4
    direction: Vec4

    def position(self, t: float) -> Vec4:
        return add(self.origin, mul(self.direction, t))

    def transform(self, m: Matrix) -> "Ray":
        """Return this ray expressed in the space ``m`` maps into."""
        return Ray(apply(m, self.origin), apply(m, self.direction))
