"""
4x4 matrices and affine transforms.

Matrices are immutable tuples of row tuples. A ``Transform`` caches its
inverse and inverse transpose; building one from a singular matrix fails
immediately, so a scene can never hold a transform that cannot be undone.
"""
import math
from typing import Tuple

from raytrace.errors import ConfigurationError, TransformError
from raytrace.tuples import EPSILON, Vec4, cross, length, norm, sub

Row = Tuple[float, float, float, float]
Matrix = Tuple[Row, Row, Row, Row]

IDENTITY: Matrix = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
)


def matrix(rows) -> Matrix:
    """Build a matrix from any nested 4x4 sequence."""
    m = tuple(tuple(float(x) for x in row) for row in rows)
    if len(m) != 4 or any(len(row) != 4 for row in m):
        raise ValueError("a transform matrix must be 4x4")
    return m

def matmul(a: Matrix, b: Matrix) -> Matrix:
    return tuple(
        tuple(
            a[r][0] * b[0][c] + a[r][1] * b[1][c] + a[r][2] * b[2][c] + a[r][3] * b[3][c]
            for c in range(4)
        )
        for r in range(4)
    )

def apply(m: Matrix, t: Vec4) -> Vec4:
    """Multiply a matrix by a point or vector."""
    x, y, z, w = t
    return (
        m[0][0] * x + m[0][1] * y + m[0][2] * z + m[0][3] * w,
        m[1][0] * x + m[1][1] * y + m[1][2] * z + m[1][3] * w,
        m[2][0] * x + m[2][1] * y + m[2][2] * z + m[2][3] * w,
        m[3][0] * x + m[3][1] * y + m[3][2] * z + m[3][3] * w,
    )

def transpose(m: Matrix) -> Matrix:
    return tuple(tuple(m[r][c] for r in range(4)) for c in range(4))

def _submatrix(m, row: int, col: int):
    return [[m[r][c] for c in range(len(m)) if c != col] for r in range(len(m)) if r != row]

def _cofactor(m, row: int, col: int) -> float:
    minor = determinant(_submatrix(m, row, col))
    return -minor if (row + col) % 2 else minor

def determinant(m) -> float:
    """Determinant by cofactor expansion along the first row (2x2 up to 4x4)."""
    if len(m) == 2:
        return m[0][0] * m[1][1] - m[0][1] * m[1][0]
    return sum(m[0][c] * _cofactor(m, 0, c) for c in range(len(m)))

def inverse(m: Matrix) -> Matrix:
    det = determinant(m)
    if det == 0:
        raise TransformError(f"matrix is not invertible (determinant {det!r})")
    # Transposed cofactor matrix divided by the determinant
    return tuple(tuple(_cofactor(m, c, r) / det for c in range(4)) for r in range(4))


class Transform:
    """An invertible affine transform with its inverse precomputed."""

    __slots__ = ("matrix", "inverse", "inverse_transpose")

    def __init__(self, m: Matrix = IDENTITY):
        self.matrix = matrix(m)
        self.inverse = inverse(self.matrix)
        self.inverse_transpose = transpose(self.inverse)

    def __matmul__(self, other: "Transform") -> "Transform":
        """Compose: ``a @ b`` applies ``b`` first, then ``a``."""
        return Transform(matmul(self.matrix, other.matrix))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return all(
            abs(x - y) < EPSILON
            for ra, rb in zip(self.matrix, other.matrix)
            for x, y in zip(ra, rb)
        )

    def __repr__(self) -> str:
        return f"Transform({self.matrix!r})"

    def __getstate__(self):
        return self.matrix

    def __setstate__(self, state) -> None:
        self.matrix = state
        self.inverse = inverse(state)
        self.inverse_transpose = transpose(self.inverse)

    def apply(self, t: Vec4) -> Vec4:
        return apply(self.matrix, t)

    def apply_inverse(self, t: Vec4) -> Vec4:
        return apply(self.inverse, t)

    @property
    def is_identity(self) -> bool:
        return self.matrix == IDENTITY


def identity() -> Transform:
    return Transform(IDENTITY)

def translation(x: float, y: float, z: float) -> Transform:
    return Transform((
        (1.0, 0.0, 0.0, x),
        (0.0, 1.0, 0.0, y),
        (0.0, 0.0, 1.0, z),
        (0.0, 0.0, 0.0, 1.0),
    ))

def scaling(x: float, y: float, z: float) -> Transform:
    if x == 0 or y == 0 or z == 0:
        raise TransformError(f"scaling by zero is not invertible: ({x}, {y}, {z})")
    return Transform((
        (x, 0.0, 0.0, 0.0),
        (0.0, y, 0.0, 0.0),
        (0.0, 0.0, z, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    ))

def rotation_x(r: float) -> Transform:
    c, s = math.cos(r), math.sin(r)
    return Transform((
        (1.0, 0.0, 0.0, 0.0),
        (0.0, c, -s, 0.0),
        (0.0, s, c, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    ))

def rotation_y(r: float) -> Transform:
    c, s = math.cos(r), math.sin(r)
    return Transform((
        (c, 0.0, s, 0.0),
        (0.0, 1.0, 0.0, 0.0),
        (-s, 0.0, c, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    ))

def rotation_z(r: float) -> Transform:
    c, s = math.cos(r), math.sin(r)
    return Transform((
        (c, -s, 0.0, 0.0),
        (s, c, 0.0, 0.0),
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    ))

def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Transform:
    return Transform((
        (1.0, xy, xz, 0.0),
        (yx, 1.0, yz, 0.0),
        (zx, zy, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    ))

def chain(*transforms: Transform) -> Transform:
    """Compose transforms in the order they are listed (first applied first)."""
    result = IDENTITY
    for t in transforms:
        result = matmul(t.matrix, result)
    return Transform(result)

def view_transform(from_: Vec4, to: Vec4, up: Vec4) -> Transform:
    """Orient the world relative to an eye at ``from_`` looking at ``to``."""
    if length(sub(to, from_)) < EPSILON:
        raise ConfigurationError("view transform needs distinct 'from' and 'to' points")
    forward = norm(sub(to, from_))
    left = cross(forward, norm(up))
    if length(left) < EPSILON:
        raise ConfigurationError("view transform 'up' vector is parallel to the view direction")
    true_up = cross(left, forward)
    orientation = (
        (left[0], left[1], left[2], 0.0),
        (true_up[0], true_up[1], true_up[2], 0.0),
        (-forward[0], -forward[1], -forward[2], 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )
    return Transform(orientation) @ translation(-from_[0], -from_[1], -from_[2])
