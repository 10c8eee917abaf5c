"""
Homogeneous point/vector math and linear RGB colors on plain tuples.

Points carry w=1 and vectors w=0, so subtracting two points yields a
vector and adding a vector to a point yields a point without any checks.
"""
import math
from typing import Tuple

Vec4 = Tuple[float, float, float, float]
Color = Tuple[float, float, float]

EPSILON = 1e-5
# Offset along the normal for secondary ray origins
ACNE_EPSILON = 1e-4

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)


def point(x: float, y: float, z: float) -> Vec4:
    return (float(x), float(y), float(z), 1.0)

def vector(x: float, y: float, z: float) -> Vec4:
    return (float(x), float(y), float(z), 0.0)

def is_point(t: Vec4) -> bool:
    return t[3] == 1.0

def is_vector(t: Vec4) -> bool:
    return t[3] == 0.0

def add(a: Vec4, b: Vec4) -> Vec4:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2], a[3] + b[3])

def sub(a: Vec4, b: Vec4) -> Vec4:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2], a[3] - b[3])

def neg(a: Vec4) -> Vec4:
    return (-a[0], -a[1], -a[2], a[3])

def mul(a: Vec4, s: float) -> Vec4:
    """Scale the xyz part; w is left alone."""
    return (a[0] * s, a[1] * s, a[2] * s, a[3])

def dot(a: Vec4, b: Vec4) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

def cross(a: Vec4, b: Vec4) -> Vec4:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
        0.0,
    )

def length(v: Vec4) -> float:
    return math.sqrt(dot(v, v))

def norm(v: Vec4) -> Vec4:
    l = length(v)
    if l < 1e-12:
        return (0.0, 0.0, 0.0, v[3])
    return mul(v, 1.0 / l)

def reflect(rd: Vec4, n: Vec4) -> Vec4:
    """Reflect direction rd off a surface with normal n."""
    return sub(rd, mul(n, 2.0 * dot(rd, n)))

def approx(a: float, b: float, eps: float = EPSILON) -> bool:
    return abs(a - b) < eps

def approx_eq(a: Tuple[float, ...], b: Tuple[float, ...], eps: float = EPSILON) -> bool:
    return len(a) == len(b) and all(abs(x - y) < eps for x, y in zip(a, b))


# Colors
def color(r: float, g: float, b: float) -> Color:
    return (float(r), float(g), float(b))

def color_add(a: Color, b: Color) -> Color:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])

def color_sub(a: Color, b: Color) -> Color:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])

def color_scale(c: Color, s: float) -> Color:
    return (c[0] * s, c[1] * s, c[2] * s)

def color_mul(a: Color, b: Color) -> Color:
    """Hadamard product, e.g. surface color filtered by light intensity."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])

def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))
