"""
Local-space intersection, normals and bounds of the primitive shapes.

Every routine works in the shape's canonical space: unit sphere at the
origin, the x-z plane, the [-1, 1] cube, and unit-radius cylinders and
double cones along the y axis. ``shapes.intersect`` moves the ray into
that space before calling in here.
"""
import math
from typing import List, Optional

from raytrace.bounds import INF, BoundingBox, ray_aabb
from raytrace.intersections import Intersection
from raytrace.rays import Ray
from raytrace.tuples import EPSILON, Vec4, cross, dot, sub, vector


def solve_quadratic(a: float, b: float, c: float) -> List[float]:
    """Real roots of a*t^2 + b*t + c in ascending order.

    A tangent ray gives the same root twice. A degenerate (zero-length)
    direction has no roots.
    """
    if abs(a) < EPSILON:
        return []
    disc = b * b - 4 * a * c
    if disc < 0:
        return []
    sdisc = math.sqrt(disc)
    t0 = (-b - sdisc) / (2 * a)
    t1 = (-b + sdisc) / (2 * a)
    if t0 > t1:
        t0, t1 = t1, t0
    return [t0, t1]


# Sphere
def ray_sphere(shape, ray: Ray) -> List[Intersection]:
    ro, rd = ray
    # Vector from the sphere center (the origin) to the ray origin
    oc = (ro[0], ro[1], ro[2], 0.0)
    a = dot(rd, rd)
    b = 2.0 * dot(oc, rd)
    c = dot(oc, oc) - 1.0
    return [Intersection(t, shape) for t in solve_quadratic(a, b, c)]

def sphere_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    return vector(p[0], p[1], p[2])

def sphere_bounds(shape) -> BoundingBox:
    return BoundingBox((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))


# Plane
def ray_plane(shape, ray: Ray) -> List[Intersection]:
    ro, rd = ray
    if abs(rd[1]) < EPSILON:
        return []
    return [Intersection(-ro[1] / rd[1], shape)]

def plane_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    return vector(0.0, 1.0, 0.0)

def plane_bounds(shape) -> BoundingBox:
    return BoundingBox((-INF, 0.0, -INF), (INF, 0.0, INF))


# Cube
def ray_cube(shape, ray: Ray) -> List[Intersection]:
    span = ray_aabb(ray.origin, ray.direction, (-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))
    if span is None:
        return []
    return [Intersection(span[0], shape), Intersection(span[1], shape)]

def cube_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    ax, ay, az = abs(p[0]), abs(p[1]), abs(p[2])
    maxc = max(ax, ay, az)
    if maxc == ax:
        return vector(p[0], 0.0, 0.0)
    elif maxc == ay:
        return vector(0.0, p[1], 0.0)
    return vector(0.0, 0.0, p[2])

def cube_bounds(shape) -> BoundingBox:
    return BoundingBox((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))


# Cylinder and cone share truncation and caps
def _check_cap(ray: Ray, t: float, radius: float) -> bool:
    """Is the hit at ``t`` within ``radius`` of the y axis?"""
    x = ray.origin[0] + t * ray.direction[0]
    z = ray.origin[2] + t * ray.direction[2]
    return x * x + z * z <= radius * radius + EPSILON

def _intersect_caps(shape, ray: Ray, xs: List[Intersection], cone: bool) -> None:
    if not shape.closed or abs(ray.direction[1]) < EPSILON:
        return
    for y in (shape.minimum, shape.maximum):
        if math.isinf(y):
            continue
        t = (y - ray.origin[1]) / ray.direction[1]
        radius = abs(y) if cone else 1.0
        if _check_cap(ray, t, radius):
            xs.append(Intersection(t, shape))

def _truncate(shape, ray: Ray, ts: List[float]) -> List[Intersection]:
    xs = []
    for t in ts:
        y = ray.origin[1] + t * ray.direction[1]
        if shape.minimum < y < shape.maximum:
            xs.append(Intersection(t, shape))
    return xs

def ray_cylinder(shape, ray: Ray) -> List[Intersection]:
    """Ray-cylinder intersection (unit radius around the y axis)."""
    ro, rd = ray
    a = rd[0] * rd[0] + rd[2] * rd[2]

    # Parallel to the y axis: only the caps can be hit
    if abs(a) < EPSILON:
        xs: List[Intersection] = []
        _intersect_caps(shape, ray, xs, cone=False)
        return xs

    b = 2.0 * (ro[0] * rd[0] + ro[2] * rd[2])
    c = ro[0] * ro[0] + ro[2] * ro[2] - 1.0
    ts = solve_quadratic(a, b, c)
    if not ts:
        return []
    xs = _truncate(shape, ray, ts)
    _intersect_caps(shape, ray, xs, cone=False)
    return xs

def cylinder_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    dist = p[0] * p[0] + p[2] * p[2]
    if dist < 1.0 and p[1] >= shape.maximum - EPSILON:
        return vector(0.0, 1.0, 0.0)
    if dist < 1.0 and p[1] <= shape.minimum + EPSILON:
        return vector(0.0, -1.0, 0.0)
    return vector(p[0], 0.0, p[2])

def cylinder_bounds(shape) -> BoundingBox:
    return BoundingBox((-1.0, shape.minimum, -1.0), (1.0, shape.maximum, 1.0))

def ray_cone(shape, ray: Ray) -> List[Intersection]:
    """Ray-double-cone intersection (x^2 + z^2 = y^2)."""
    ro, rd = ray
    a = rd[0] * rd[0] - rd[1] * rd[1] + rd[2] * rd[2]
    b = 2.0 * (ro[0] * rd[0] - ro[1] * rd[1] + ro[2] * rd[2])
    c = ro[0] * ro[0] - ro[1] * ro[1] + ro[2] * ro[2]

    if abs(a) < EPSILON:
        xs: List[Intersection] = []
        # Parallel to one of the halves: a single crossing of the other
        if abs(b) >= EPSILON:
            xs = _truncate(shape, ray, [-c / (2.0 * b)])
        _intersect_caps(shape, ray, xs, cone=True)
        return xs

    ts = solve_quadratic(a, b, c)
    if not ts:
        return []
    xs = _truncate(shape, ray, ts)
    _intersect_caps(shape, ray, xs, cone=True)
    return xs

def cone_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    dist = p[0] * p[0] + p[2] * p[2]
    if dist < shape.maximum * shape.maximum and p[1] >= shape.maximum - EPSILON:
        return vector(0.0, 1.0, 0.0)
    if dist < shape.minimum * shape.minimum and p[1] <= shape.minimum + EPSILON:
        return vector(0.0, -1.0, 0.0)
    y = math.sqrt(dist)
    if p[1] > 0:
        y = -y
    return vector(p[0], y, p[2])

def cone_bounds(shape) -> BoundingBox:
    limit = max(abs(shape.minimum), abs(shape.maximum))
    return BoundingBox((-limit, shape.minimum, -limit), (limit, shape.maximum, limit))


# Triangles
def ray_triangle(shape, ray: Ray) -> List[Intersection]:
    """Moller-Trumbore; the hit keeps its barycentric u and v."""
    ro, rd = ray
    dir_cross_e2 = cross(rd, shape.e2)
    det = dot(shape.e1, dir_cross_e2)
    if abs(det) < EPSILON:
        return []

    f = 1.0 / det
    p1_to_origin = sub(ro, shape.p1)
    u = f * dot(p1_to_origin, dir_cross_e2)
    if u < 0.0 or u > 1.0:
        return []

    origin_cross_e1 = cross(p1_to_origin, shape.e1)
    v = f * dot(rd, origin_cross_e1)
    if v < 0.0 or u + v > 1.0:
        return []

    t = f * dot(shape.e2, origin_cross_e1)
    return [Intersection(t, shape, u, v)]

def triangle_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    return shape.normal

def smooth_triangle_normal(shape, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
    if hit is None or hit.u is None:
        return shape.normal
    u, v = hit.u, hit.v
    w = 1.0 - u - v
    return (
        shape.n2[0] * u + shape.n3[0] * v + shape.n1[0] * w,
        shape.n2[1] * u + shape.n3[1] * v + shape.n1[1] * w,
        shape.n2[2] * u + shape.n3[2] * v + shape.n1[2] * w,
        0.0,
    )

def triangle_bounds(shape) -> BoundingBox:
    return BoundingBox.from_points((shape.p1, shape.p2, shape.p3))
