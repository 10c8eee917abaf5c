"""
Point and area lights.

An area light is a rectangle split into ``usteps`` x ``vsteps`` cells and
is sampled once per cell. Where in the cell the sample lands is a pure
function of the cell index: either the cell centre, or an offset taken
from the light's fixed ``jitter`` sequence. No random state is shared
between render workers.
"""
from typing import List, Optional, Sequence, Union

from raytrace.errors import ConfigurationError
from raytrace.tuples import WHITE, Color, Vec4, add, mul, point, vector


class PointLight:
    __slots__ = ("position", "intensity")

    def __init__(self, position: Vec4, intensity: Color = WHITE):
        self.position = point(position[0], position[1], position[2])
        self.intensity = tuple(float(c) for c in intensity)

    def __repr__(self) -> str:
        return f"PointLight(position={self.position}, intensity={self.intensity})"

    @property
    def samples(self) -> int:
        return 1


class AreaLight:
    """Rectangular light spanned by ``full_uvec`` and ``full_vvec`` from ``corner``."""

    __slots__ = ("corner", "uvec", "usteps", "vvec", "vsteps", "intensity", "jitter", "position")

    def __init__(self, corner: Vec4, full_uvec: Vec4, usteps: int, full_vvec: Vec4, vsteps: int,
                 intensity: Color = WHITE, jitter: Optional[Sequence[float]] = None):
        for name, steps in (("usteps", usteps), ("vsteps", vsteps)):
            if not isinstance(steps, int) or steps < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {steps!r}")
        if jitter is not None:
            jitter = tuple(float(j) for j in jitter)
            if not jitter:
                raise ConfigurationError("jitter sequence must not be empty")
            if any(not 0.0 <= j < 1.0 for j in jitter):
                raise ConfigurationError(f"jitter offsets must lie in [0, 1), got {jitter}")

        full_uvec = vector(full_uvec[0], full_uvec[1], full_uvec[2])
        full_vvec = vector(full_vvec[0], full_vvec[1], full_vvec[2])
        self.corner = point(corner[0], corner[1], corner[2])
        self.uvec = mul(full_uvec, 1.0 / usteps)
        self.usteps = usteps
        self.vvec = mul(full_vvec, 1.0 / vsteps)
        self.vsteps = vsteps
        self.intensity = tuple(float(c) for c in intensity)
        self.jitter = jitter
        self.position = add(add(self.corner, mul(full_uvec, 0.5)), mul(full_vvec, 0.5))

    def __repr__(self) -> str:
        return (f"AreaLight(corner={self.corner}, usteps={self.usteps}, "
                f"vsteps={self.vsteps}, intensity={self.intensity})")

    @property
    def samples(self) -> int:
        return self.usteps * self.vsteps


Light = Union[PointLight, AreaLight]


def _offsets(light: AreaLight, u: int, v: int):
    if light.jitter is None:
        return 0.5, 0.5
    # Each cell takes two consecutive values, wrapping around the sequence
    index = 2 * (v * light.usteps + u)
    n = len(light.jitter)
    return light.jitter[index % n], light.jitter[(index + 1) % n]

def point_on_light(light: AreaLight, u: int, v: int) -> Vec4:
    """Sample point inside cell (u, v) of an area light."""
    du, dv = _offsets(light, u, v)
    return add(add(light.corner, mul(light.uvec, u + du)), mul(light.vvec, v + dv))

def sample_positions(light: Light) -> List[Vec4]:
    """Every position a light is sampled from, in a fixed order."""
    if isinstance(light, PointLight):
        return [light.position]
    return [
        point_on_light(light, u, v)
        for v in range(light.vsteps)
        for u in range(light.usteps)
    ]

def intensity_at(light: Light, world, p: Vec4) -> float:
    """Fraction of the light's samples visible from ``p``."""
    positions = sample_positions(light)
    visible = sum(1 for pos in positions if not world.is_shadowed(pos, p))
    return visible / len(positions)
