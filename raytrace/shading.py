"""
Phong shading with shadows, reflection and refraction.

Everything here is a pure function of the world, the ray and the
remaining recursion depth, so rows can be shaded in any order and on any
worker. ``world`` is anything with ``lights``, ``intersect(ray)`` and
``is_shadowed(light_position, point)``; see ``raytrace.world.World``.
"""
import math
from typing import List, Optional

from raytrace.config import RENDER_MAX_DEPTH
from raytrace.intersections import Intersection, hit
from raytrace.lights import Light, intensity_at, sample_positions
from raytrace.materials import Material
from raytrace.patterns import Pattern, PatternKind, pattern_at_object
from raytrace.rays import Ray
from raytrace.shapes import Shape, normal_at, world_to_object
from raytrace.tuples import (
    ACNE_EPSILON, BLACK, EPSILON, Color, Vec4, add, color_add, color_mul, color_scale, dot, length,
    mul, neg, norm, reflect, sub,
)


class Computations:
    """Everything about a hit that shading needs, computed once."""

    __slots__ = ("t", "object", "point", "eyev", "normalv", "inside", "reflectv",
                 "over_point", "under_point", "n1", "n2")

    def __init__(self, t, object, point, eyev, normalv, inside, reflectv,
                 over_point, under_point, n1, n2):
        self.t = t
        self.object = object
        self.point = point
        self.eyev = eyev
        self.normalv = normalv
        self.inside = inside
        self.reflectv = reflectv
        self.over_point = over_point
        self.under_point = under_point
        self.n1 = n1
        self.n2 = n2


def _refractive_indices(the_hit: Intersection, xs: List[Intersection]):
    """n1/n2 on either side of the hit, from the objects the ray is inside of."""
    n1 = n2 = 1.0
    containers: List[Shape] = []
    for i in xs:
        if i is the_hit:
            n1 = containers[-1].material.refractive_index if containers else 1.0
        for k, c in enumerate(containers):
            if c is i.object:
                del containers[k]
                break
        else:
            containers.append(i.object)
        if i is the_hit:
            n2 = containers[-1].material.refractive_index if containers else 1.0
            break
    return n1, n2

def prepare_computations(the_hit: Intersection, ray: Ray,
                         xs: Optional[List[Intersection]] = None) -> Computations:
    """Precompute the hit point, shading vectors and refractive indices.

    ``xs`` is the full sorted intersection list the hit came from; it is
    needed to know which transparent objects the ray is inside of.
    """
    if xs is None:
        xs = [the_hit]
    p = ray.position(the_hit.t)
    eyev = neg(ray.direction)
    normalv = normal_at(the_hit.object, p, the_hit)
    inside = dot(normalv, eyev) < 0
    if inside:
        normalv = neg(normalv)
    offset = mul(normalv, ACNE_EPSILON)
    n1, n2 = _refractive_indices(the_hit, xs)
    return Computations(
        t=the_hit.t,
        object=the_hit.object,
        point=p,
        eyev=eyev,
        normalv=normalv,
        inside=inside,
        reflectv=reflect(ray.direction, normalv),
        over_point=add(p, offset),
        under_point=sub(p, offset),
        n1=n1,
        n2=n2,
    )


def schlick(comps: Computations) -> float:
    """Approximate Fresnel reflectance at the hit."""
    cos = dot(comps.eyev, comps.normalv)
    if comps.n1 > comps.n2:
        n = comps.n1 / comps.n2
        sin2_t = n * n * (1.0 - cos * cos)
        if sin2_t > 1.0:
            return 1.0
        cos = math.sqrt(1.0 - sin2_t)
    r0 = ((comps.n1 - comps.n2) / (comps.n1 + comps.n2)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cos) ** 5

def refraction_direction(comps: Computations) -> Optional[Vec4]:
    """Snell's law refracted direction, or None on total internal reflection."""
    n_ratio = comps.n1 / comps.n2
    cos_i = dot(comps.eyev, comps.normalv)
    sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
    if sin2_t > 1.0:
        return None
    cos_t = math.sqrt(1.0 - sin2_t)
    return sub(mul(comps.normalv, n_ratio * cos_i - cos_t), mul(comps.eyev, n_ratio))


def pattern_at_shape(pattern: Pattern, shape: Optional[Shape], world_point: Vec4) -> Color:
    if pattern.kind is PatternKind.SOLID:
        return pattern.a
    object_point = world_to_object(shape, world_point) if shape is not None else world_point
    return pattern_at_object(pattern, object_point)

def lighting(material: Material, shape: Optional[Shape], light: Light, p: Vec4,
             eyev: Vec4, normalv: Vec4, intensity: float = 1.0) -> Color:
    """Phong reflection at ``p``.

    Diffuse and specular terms are averaged over the light's sample
    positions and scaled by ``intensity``, the visible fraction of the
    light. Ambient is never shadowed.
    """
    surface = pattern_at_shape(material.pattern, shape, p)
    effective = color_mul(surface, light.intensity)
    ambient = color_scale(effective, material.ambient)
    if intensity <= 0.0:
        return ambient

    positions = sample_positions(light)
    total = BLACK
    for pos in positions:
        lightv = norm(sub(pos, p))
        light_dot_normal = dot(lightv, normalv)
        if light_dot_normal <= 0:
            continue
        total = color_add(total, color_scale(effective, material.diffuse * light_dot_normal))
        reflect_dot_eye = dot(reflect(neg(lightv), normalv), eyev)
        if reflect_dot_eye > 0:
            factor = reflect_dot_eye ** material.shininess
            total = color_add(total, color_scale(light.intensity, material.specular * factor))
    return color_add(ambient, color_scale(total, intensity / len(positions)))


def is_shadowed(world, light_position: Vec4, p: Vec4) -> bool:
    """Is anything between ``p`` and ``light_position``?"""
    v = sub(light_position, p)
    distance = length(v)
    # A light sitting on the point has no direction to test
    if distance < EPSILON:
        return False
    h = hit(world.intersect(Ray(p, norm(v))))
    return h is not None and h.t < distance

def shade_hit(world, comps: Computations, remaining: int = RENDER_MAX_DEPTH) -> Color:
    material = comps.object.material
    surface = BLACK
    for light in world.lights:
        intensity = intensity_at(light, world, comps.over_point)
        surface = color_add(surface, lighting(
            material, comps.object, light, comps.over_point, comps.eyev, comps.normalv, intensity))

    reflected = reflected_color(world, comps, remaining)
    refracted = refracted_color(world, comps, remaining)
    if material.reflective > 0 and material.transparency > 0:
        reflectance = schlick(comps)
        return color_add(surface, color_add(
            color_scale(reflected, reflectance), color_scale(refracted, 1.0 - reflectance)))
    return color_add(surface, color_add(reflected, refracted))

def color_at(world, ray: Ray, remaining: int = RENDER_MAX_DEPTH) -> Color:
    """Color seen along ``ray``; black when it hits nothing."""
    xs = world.intersect(ray)
    h = hit(xs)
    if h is None:
        return BLACK
    return shade_hit(world, prepare_computations(h, ray, xs), remaining)

def reflected_color(world, comps: Computations, remaining: int = RENDER_MAX_DEPTH) -> Color:
    reflective = comps.object.material.reflective
    if remaining <= 0 or reflective == 0:
        return BLACK
    c = color_at(world, Ray(comps.over_point, comps.reflectv), remaining - 1)
    return color_scale(c, reflective)

def refracted_color(world, comps: Computations, remaining: int = RENDER_MAX_DEPTH) -> Color:
    transparency = comps.object.material.transparency
    if remaining <= 0 or transparency == 0:
        return BLACK
    direction = refraction_direction(comps)
    if direction is None:
        return BLACK
    c = color_at(world, Ray(comps.under_point, direction), remaining - 1)
    return color_scale(c, transparency)
