"""The world: top-level shapes and the lights that illuminate them."""
from typing import Iterable, List

from raytrace import shading, shapes
from raytrace.config import RENDER_MAX_DEPTH
from raytrace.intersections import Intersection, sort_intersections
from raytrace.lights import Light, PointLight
from raytrace.materials import Material
from raytrace.patterns import solid
from raytrace.rays import Ray
from raytrace.shapes import Shape
from raytrace.transforms import scaling
from raytrace.tuples import WHITE, Color, Vec4, color, point


class World:
    """Read-only during a render; build it fully before calling ``render``."""

    def __init__(self, shapes: Iterable[Shape] = (), lights: Iterable[Light] = ()):
        self.shapes: List[Shape] = list(shapes)
        self.lights: List[Light] = list(lights)

    def __repr__(self) -> str:
        return f"World(shapes={len(self.shapes)}, lights={len(self.lights)})"

    def add(self, *items: Shape) -> None:
        self.shapes.extend(items)

    def intersect(self, ray: Ray) -> List[Intersection]:
        """Intersections with every shape, ascending in t."""
        xs: List[Intersection] = []
        for s in self.shapes:
            xs.extend(shapes.intersect(s, ray))
        return sort_intersections(xs)

    def is_shadowed(self, light_position: Vec4, p: Vec4) -> bool:
        return shading.is_shadowed(self, light_position, p)

    def color_at(self, ray: Ray, remaining: int = RENDER_MAX_DEPTH) -> Color:
        return shading.color_at(self, ray, remaining)

    def leaf_count(self) -> int:
        return sum(len(shapes.leaves(s)) for s in self.shapes)


def intersect(world: World, ray: Ray) -> List[Intersection]:
    return world.intersect(ray)

def default_world() -> World:
    """Two concentric spheres lit from the upper left; handy in tests and demos."""
    light = PointLight(point(-10, 10, -10), WHITE)
    outer = shapes.sphere(material=Material(
        pattern=solid(color(0.8, 1.0, 0.6)), diffuse=0.7, specular=0.2))
    inner = shapes.sphere(transform=scaling(0.5, 0.5, 0.5))
    return World([outer, inner], [light])
