"""Intersection records and hit selection."""
from operator import attrgetter
from typing import Iterable, List, Optional


class Intersection:
    """A root ``t`` of a ray against ``object``.

    Triangles also record the barycentric ``u``/``v`` of the hit so smooth
    triangles can interpolate their vertex normals.
    """

    __slots__ = ("t", "object", "u", "v")

    def __init__(self, t: float, object, u: Optional[float] = None, v: Optional[float] = None):
        self.t = t
        self.object = object
        self.u = u
        self.v = v

    def __repr__(self) -> str:
        return f"Intersection(t={self.t!r}, object={self.object!r})"


def intersections(*xs: Intersection) -> List[Intersection]:
    """Collect intersections in ascending ``t``."""
    return sort_intersections(xs)

def sort_intersections(xs: Iterable[Intersection]) -> List[Intersection]:
    return sorted(xs, key=attrgetter("t"))

def hit(xs: Iterable[Intersection]) -> Optional[Intersection]:
    """Nearest intersection in front of the ray origin (t > 0), if any."""
    best = None
    for i in xs:
        if i.t > 0 and (best is None or i.t < best.t):
            best = i
    return best
