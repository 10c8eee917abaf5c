"""Surface materials."""
from dataclasses import dataclass, field

from raytrace.errors import MaterialError
from raytrace.patterns import Pattern, solid
from raytrace.tuples import WHITE

# Common refractive indices
VACUUM = 1.0
AIR = 1.00029
WATER = 1.333
GLASS = 1.5
DIAMOND = 2.417


@dataclass
class Material:
    """Phong coefficients plus reflection/refraction parameters.

    Values are checked once here; shading code trusts them.
    """

    pattern: Pattern = field(default_factory=lambda: solid(WHITE))
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = VACUUM

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular", "shininess", "reflective", "transparency"):
            value = getattr(self, name)
            if value < 0:
                raise MaterialError(f"{name} must not be negative, got {value}")
        for name in ("reflective", "transparency"):
            value = getattr(self, name)
            if value > 1:
                raise MaterialError(f"{name} must be at most 1, got {value}")
        if self.refractive_index <= 0:
            raise MaterialError(f"refractive_index must be positive, got {self.refractive_index}")


def glass(**overrides) -> Material:
    """Fully transparent glass; keyword arguments override any field."""
    values = dict(transparency=1.0, refractive_index=GLASS)
    values.update(overrides)
    return Material(**values)
