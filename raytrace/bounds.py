"""
Axis-aligned bounding boxes.

Boxes are only ever used to skip work: a ray that misses a group's box
cannot hit anything inside it. They never produce a final hit.
"""
import math
from typing import Iterable, Optional, Tuple

from raytrace.rays import Ray
from raytrace.transforms import Matrix, apply
from raytrace.tuples import EPSILON, Vec4

Vec3 = Tuple[float, float, float]

INF = math.inf


def _check_axis(origin: float, direction: float, lo: float, hi: float) -> Tuple[float, float]:
    """Entry and exit distance of a ray against one pair of slab planes."""
    tmin_num = lo - origin
    tmax_num = hi - origin
    if abs(direction) >= EPSILON:
        tmin = tmin_num / direction
        tmax = tmax_num / direction
    else:
        # Parallel to the slab: either always inside it or never
        tmin = -INF if tmin_num <= 0 else INF
        tmax = INF if tmax_num >= 0 else -INF
    if tmin > tmax:
        tmin, tmax = tmax, tmin
    return tmin, tmax

def ray_aabb(ro: Vec4, rd: Vec4, bmin: Vec3, bmax: Vec3) -> Optional[Tuple[float, float]]:
    """Ray-Axis Aligned Bounding Box intersection.

    Returns the entry and exit distances, which may be negative when the
    box is partly or wholly behind the origin, or None on a miss.
    """
    xmin, xmax = _check_axis(ro[0], rd[0], bmin[0], bmax[0])
    ymin, ymax = _check_axis(ro[1], rd[1], bmin[1], bmax[1])
    zmin, zmax = _check_axis(ro[2], rd[2], bmin[2], bmax[2])

    tmin = max(xmin, ymin, zmin)
    tmax = min(xmax, ymax, zmax)

    if tmin > tmax:
        return None
    return tmin, tmax


class BoundingBox:
    """Axis-aligned box given by its ``minimum`` and ``maximum`` corners."""

    __slots__ = ("minimum", "maximum")

    def __init__(self, minimum: Vec3 = (INF, INF, INF), maximum: Vec3 = (-INF, -INF, -INF)):
        self.minimum = tuple(float(v) for v in minimum[:3])
        self.maximum = tuple(float(v) for v in maximum[:3])

    @classmethod
    def from_points(cls, points: Iterable[Tuple[float, ...]]) -> "BoundingBox":
        box = cls()
        for p in points:
            box.add_point(p)
        return box

    def __repr__(self) -> str:
        return f"BoundingBox(minimum={self.minimum}, maximum={self.maximum})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.minimum == other.minimum and self.maximum == other.maximum

    def __getstate__(self):
        return (self.minimum, self.maximum)

    def __setstate__(self, state) -> None:
        self.minimum, self.maximum = state

    def copy(self) -> "BoundingBox":
        return BoundingBox(self.minimum, self.maximum)

    @property
    def is_empty(self) -> bool:
        return any(lo > hi for lo, hi in zip(self.minimum, self.maximum))

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.minimum + self.maximum)

    def add_point(self, p: Tuple[float, ...]) -> None:
        self.minimum = (min(self.minimum[0], p[0]), min(self.minimum[1], p[1]), min(self.minimum[2], p[2]))
        self.maximum = (max(self.maximum[0], p[0]), max(self.maximum[1], p[1]), max(self.maximum[2], p[2]))

    def merge(self, other: "BoundingBox") -> None:
        if other.is_empty:
            return
        self.add_point(other.minimum)
        self.add_point(other.maximum)

    def contains_point(self, p: Tuple[float, ...]) -> bool:
        return all(lo <= v <= hi for lo, v, hi in zip(self.minimum, p[:3], self.maximum))

    def contains_box(self, other: "BoundingBox") -> bool:
        return self.contains_point(other.minimum) and self.contains_point(other.maximum)

    def transform(self, m: Matrix) -> "BoundingBox":
        """Box around this box's eight corners after applying ``m``."""
        if self.is_empty:
            return BoundingBox()
        if not self.is_finite:
            # Transformed infinite extents turn into NaN; stay conservative
            return BoundingBox((-INF, -INF, -INF), (INF, INF, INF))
        (x0, y0, z0), (x1, y1, z1) = self.minimum, self.maximum
        corners = [
            (x, y, z, 1.0)
            for x in (x0, x1)
            for y in (y0, y1)
            for z in (z0, z1)
        ]
        return BoundingBox.from_points(apply(m, c) for c in corners)

    def intersects(self, ray: Ray) -> bool:
        if self.is_empty:
            return False
        return ray_aabb(ray.origin, ray.direction, self.minimum, self.maximum) is not None

    def split(self) -> Tuple["BoundingBox", "BoundingBox"]:
        """Halve the box across its longest axis."""
        extents = [hi - lo for lo, hi in zip(self.minimum, self.maximum)]
        axis = extents.index(max(extents))
        mid = self.minimum[axis] + extents[axis] / 2.0

        left_max = list(self.maximum)
        left_max[axis] = mid
        right_min = list(self.minimum)
        right_min[axis] = mid
        return (
            BoundingBox(self.minimum, tuple(left_max)),
            BoundingBox(tuple(right_min), self.maximum),
        )
