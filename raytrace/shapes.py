"""
Shapes and groups.

Every shape is a ``Shape`` tagged with a ``ShapeKind``; the per-kind
intersection, normal and bounds routines are looked up in dispatch tables
rather than through subclasses. Groups form a strict tree: a shape
belongs to at most one group and its transform is relative to that
group.
"""
import enum
from typing import Iterable, List, Optional

from raytrace import primitives
from raytrace.bounds import BoundingBox
from raytrace.errors import GeometryError
from raytrace.intersections import Intersection, sort_intersections
from raytrace.materials import Material, glass
from raytrace.rays import Ray
from raytrace.transforms import Transform, apply, identity
from raytrace.tuples import EPSILON, Vec4, cross, length, norm, point, sub, vector


class ShapeKind(enum.Enum):
    SPHERE = "sphere"
    PLANE = "plane"
    CUBE = "cube"
    CYLINDER = "cylinder"
    CONE = "cone"
    TRIANGLE = "triangle"
    SMOOTH_TRIANGLE = "smooth_triangle"
    GROUP = "group"


class Shape:
    """A primitive or group in the scene graph.

    Kind-specific data lives in plain attributes set by the constructor
    functions below (``minimum``/``maximum``/``closed`` for cylinders and
    cones, ``p1``..``p3`` for triangles, ``children`` for groups).
    """

    def __init__(self, kind: ShapeKind, transform: Optional[Transform] = None,
                 material: Optional[Material] = None):
        self.kind = kind
        self.parent: Optional["Shape"] = None
        self._transform = transform if transform is not None else identity()
        if material is None and kind is not ShapeKind.GROUP:
            material = Material()
        self.material = material
        self._bounds: Optional[BoundingBox] = None

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        if name:
            return f"Shape({self.kind.value}, name={name!r})"
        return f"Shape({self.kind.value})"

    @property
    def transform(self) -> Transform:
        return self._transform

    @transform.setter
    def transform(self, value: Transform) -> None:
        self._transform = value
        if self.parent is not None:
            _invalidate_bounds(self.parent)

    @property
    def is_group(self) -> bool:
        return self.kind is ShapeKind.GROUP


# Constructors
def sphere(transform: Optional[Transform] = None, material: Optional[Material] = None) -> Shape:
    return Shape(ShapeKind.SPHERE, transform, material)

def glass_sphere(transform: Optional[Transform] = None, refractive_index: float = 1.5) -> Shape:
    return Shape(ShapeKind.SPHERE, transform, glass(refractive_index=refractive_index))

def plane(transform: Optional[Transform] = None, material: Optional[Material] = None) -> Shape:
    return Shape(ShapeKind.PLANE, transform, material)

def cube(transform: Optional[Transform] = None, material: Optional[Material] = None) -> Shape:
    return Shape(ShapeKind.CUBE, transform, material)

def cylinder(minimum: float = -float("inf"), maximum: float = float("inf"), closed: bool = False,
             transform: Optional[Transform] = None, material: Optional[Material] = None) -> Shape:
    if minimum > maximum:
        raise GeometryError(f"cylinder minimum {minimum} is above its maximum {maximum}")
    s = Shape(ShapeKind.CYLINDER, transform, material)
    s.minimum, s.maximum, s.closed = float(minimum), float(maximum), closed
    return s

def cone(minimum: float = -float("inf"), maximum: float = float("inf"), closed: bool = False,
         transform: Optional[Transform] = None, material: Optional[Material] = None) -> Shape:
    if minimum > maximum:
        raise GeometryError(f"cone minimum {minimum} is above its maximum {maximum}")
    s = Shape(ShapeKind.CONE, transform, material)
    s.minimum, s.maximum, s.closed = float(minimum), float(maximum), closed
    return s

def _as_point(p) -> Vec4:
    return point(p[0], p[1], p[2])

def triangle(p1, p2, p3, transform: Optional[Transform] = None,
             material: Optional[Material] = None) -> Shape:
    """Flat triangle; raises GeometryError when the corners are collinear."""
    s = Shape(ShapeKind.TRIANGLE, transform, material)
    s.p1, s.p2, s.p3 = _as_point(p1), _as_point(p2), _as_point(p3)
    s.e1 = sub(s.p2, s.p1)
    s.e2 = sub(s.p3, s.p1)
    n = cross(s.e2, s.e1)
    if length(n) < EPSILON * EPSILON:
        raise GeometryError(f"triangle corners are collinear: {p1}, {p2}, {p3}")
    s.normal = norm(n)
    return s

def smooth_triangle(p1, p2, p3, n1, n2, n3, transform: Optional[Transform] = None,
                    material: Optional[Material] = None) -> Shape:
    """Triangle whose normal is interpolated from per-vertex normals."""
    s = triangle(p1, p2, p3, transform, material)
    s.kind = ShapeKind.SMOOTH_TRIANGLE
    s.n1 = vector(n1[0], n1[1], n1[2])
    s.n2 = vector(n2[0], n2[1], n2[2])
    s.n3 = vector(n3[0], n3[1], n3[2])
    return s

def group(children: Iterable[Shape] = (), transform: Optional[Transform] = None,
          name: Optional[str] = None) -> Shape:
    g = Shape(ShapeKind.GROUP, transform)
    g.children = []
    g.name = name
    for child in children:
        add_child(g, child)
    return g


# Group membership
def add_child(g: Shape, child: Shape) -> None:
    if not g.is_group:
        raise TypeError(f"cannot add children to a {g.kind.value}")
    if child.parent is not None:
        raise ValueError(f"{child!r} already belongs to a group")
    child.parent = g
    g.children.append(child)
    _invalidate_bounds(g)

def remove_child(g: Shape, child: Shape) -> None:
    for i, c in enumerate(g.children):
        if c is child:
            del g.children[i]
            break
    else:
        raise ValueError(f"{child!r} is not a child of {g!r}")
    child.parent = None
    _invalidate_bounds(g)

def _invalidate_bounds(shape: Optional[Shape]) -> None:
    while shape is not None:
        shape._bounds = None
        shape = shape.parent

def leaves(shape: Shape) -> List[Shape]:
    """All non-group shapes under ``shape`` (the shape itself if not a group)."""
    if not shape.is_group:
        return [shape]
    out: List[Shape] = []
    for child in shape.children:
        out.extend(leaves(child))
    return out


# Groups
def _group_local_intersect(g: Shape, ray: Ray) -> List[Intersection]:
    if not bounds_of(g).intersects(ray):
        return []
    xs: List[Intersection] = []
    for child in g.children:
        xs.extend(intersect(child, ray))
    return xs

def _group_normal(g: Shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    raise TypeError("groups have no surface normal; ask the intersected child")

def _group_bounds(g: Shape) -> BoundingBox:
    box = BoundingBox()
    for child in g.children:
        box.merge(parent_space_bounds_of(child))
    return box


_LOCAL_INTERSECT = {
    ShapeKind.SPHERE: primitives.ray_sphere,
    ShapeKind.PLANE: primitives.ray_plane,
    ShapeKind.CUBE: primitives.ray_cube,
    ShapeKind.CYLINDER: primitives.ray_cylinder,
    ShapeKind.CONE: primitives.ray_cone,
    ShapeKind.TRIANGLE: primitives.ray_triangle,
    ShapeKind.SMOOTH_TRIANGLE: primitives.ray_triangle,
    ShapeKind.GROUP: _group_local_intersect,
}

_LOCAL_NORMAL = {
    ShapeKind.SPHERE: primitives.sphere_normal,
    ShapeKind.PLANE: primitives.plane_normal,
    ShapeKind.CUBE: primitives.cube_normal,
    ShapeKind.CYLINDER: primitives.cylinder_normal,
    ShapeKind.CONE: primitives.cone_normal,
    ShapeKind.TRIANGLE: primitives.triangle_normal,
    ShapeKind.SMOOTH_TRIANGLE: primitives.smooth_triangle_normal,
    ShapeKind.GROUP: _group_normal,
}

_LOCAL_BOUNDS = {
    ShapeKind.SPHERE: primitives.sphere_bounds,
    ShapeKind.PLANE: primitives.plane_bounds,
    ShapeKind.CUBE: primitives.cube_bounds,
    ShapeKind.CYLINDER: primitives.cylinder_bounds,
    ShapeKind.CONE: primitives.cone_bounds,
    ShapeKind.TRIANGLE: primitives.triangle_bounds,
    ShapeKind.SMOOTH_TRIANGLE: primitives.triangle_bounds,
    ShapeKind.GROUP: _group_bounds,
}


def local_intersect(shape: Shape, local_ray: Ray) -> List[Intersection]:
    return _LOCAL_INTERSECT[shape.kind](shape, local_ray)

def intersect(shape: Shape, ray: Ray) -> List[Intersection]:
    """Intersections of a parent-space ray with ``shape``, ascending in t."""
    local_ray = ray.transform(shape.transform.inverse)
    return sort_intersections(_LOCAL_INTERSECT[shape.kind](shape, local_ray))

def bounds_of(shape: Shape) -> BoundingBox:
    """Bounding box in the shape's own object space."""
    if shape.is_group:
        if shape._bounds is None:
            shape._bounds = _group_bounds(shape)
        return shape._bounds
    return _LOCAL_BOUNDS[shape.kind](shape)

def parent_space_bounds_of(shape: Shape) -> BoundingBox:
    return bounds_of(shape).transform(shape.transform.matrix)

def world_to_object(shape: Shape, p: Vec4) -> Vec4:
    """Convert a world-space point by walking down from the root group."""
    if shape.parent is not None:
        p = world_to_object(shape.parent, p)
    return shape.transform.apply_inverse(p)

def normal_to_world(shape: Shape, normal: Vec4) -> Vec4:
    n = apply(shape.transform.inverse_transpose, normal)
    n = norm((n[0], n[1], n[2], 0.0))
    if shape.parent is not None:
        n = normal_to_world(shape.parent, n)
    return n

def normal_at(shape: Shape, world_point: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    local_point = world_to_object(shape, world_point)
    local_normal = _LOCAL_NORMAL[shape.kind](shape, local_point, hit)
    return normal_to_world(shape, local_normal)
