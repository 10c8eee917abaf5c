"""
Procedural color patterns evaluated in 3D.

A pattern has its own transform on top of the shape's: a point is taken
from world space to object space (by the shading code) and then to
pattern space here before the pattern function is evaluated.
"""
import enum
import math
from typing import Optional

from raytrace.transforms import Transform, identity
from raytrace.tuples import BLACK, WHITE, Color, Vec4, color_add, color_scale, color_sub


class PatternKind(enum.Enum):
    SOLID = "solid"
    STRIPE = "stripe"
    GRADIENT = "gradient"
    RING = "ring"
    CHECKER = "checker"


class Pattern:
    """Two-color pattern (``b`` unused for solid colors)."""

    __slots__ = ("kind", "a", "b", "transform")

    def __init__(self, kind: PatternKind, a: Color = WHITE, b: Color = BLACK,
                 transform: Optional[Transform] = None):
        self.kind = kind
        self.a = tuple(float(c) for c in a)
        self.b = tuple(float(c) for c in b)
        self.transform = transform if transform is not None else identity()

    def __repr__(self) -> str:
        return f"Pattern({self.kind.value}, a={self.a}, b={self.b})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return (self.kind, self.a, self.b) == (other.kind, other.a, other.b) and \
            self.transform == other.transform


def solid(c: Color) -> Pattern:
    return Pattern(PatternKind.SOLID, c, c)

def stripe(a: Color, b: Color, transform: Optional[Transform] = None) -> Pattern:
    return Pattern(PatternKind.STRIPE, a, b, transform)

def gradient(a: Color, b: Color, transform: Optional[Transform] = None) -> Pattern:
    return Pattern(PatternKind.GRADIENT, a, b, transform)

def ring(a: Color, b: Color, transform: Optional[Transform] = None) -> Pattern:
    return Pattern(PatternKind.RING, a, b, transform)

def checker(a: Color, b: Color, transform: Optional[Transform] = None) -> Pattern:
    return Pattern(PatternKind.CHECKER, a, b, transform)


def _solid_at(p: Pattern, x: float, y: float, z: float) -> Color:
    return p.a

def _stripe_at(p: Pattern, x: float, y: float, z: float) -> Color:
    return p.a if math.floor(x) % 2 == 0 else p.b

def _gradient_at(p: Pattern, x: float, y: float, z: float) -> Color:
    fraction = x - math.floor(x)
    return color_add(p.a, color_scale(color_sub(p.b, p.a), fraction))

def _ring_at(p: Pattern, x: float, y: float, z: float) -> Color:
    return p.a if math.floor(math.hypot(x, z)) % 2 == 0 else p.b

def _checker_at(p: Pattern, x: float, y: float, z: float) -> Color:
    return p.a if (math.floor(x) + math.floor(y) + math.floor(z)) % 2 == 0 else p.b

_PATTERN_AT = {
    PatternKind.SOLID: _solid_at,
    PatternKind.STRIPE: _stripe_at,
    PatternKind.GRADIENT: _gradient_at,
    PatternKind.RING: _ring_at,
    PatternKind.CHECKER: _checker_at,
}


def pattern_at(pattern: Pattern, pattern_point: Vec4) -> Color:
    """Color at a point already expressed in pattern space."""
    x, y, z, _ = pattern_point
    return _PATTERN_AT[pattern.kind](pattern, x, y, z)

def pattern_at_object(pattern: Pattern, object_point: Vec4) -> Color:
    """Color at a point in the owning shape's object space."""
    if pattern.kind is PatternKind.SOLID:
        return pattern.a
    return pattern_at(pattern, pattern.transform.apply_inverse(object_point))
