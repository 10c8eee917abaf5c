"""Exception hierarchy for the ray tracer.

Everything that can go wrong is detected while the scene is being built.
Once a world and camera exist, tracing rays never raises.
"""


class RaytraceError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(RaytraceError):
    """A scene or render setting is invalid."""


class TransformError(ConfigurationError):
    """A transform is singular and cannot be inverted."""


class CameraError(ConfigurationError):
    """Camera dimensions or field of view are unusable."""


class MaterialError(ConfigurationError):
    """A material coefficient is out of range."""


class GeometryError(RaytraceError):
    """A primitive was given degenerate geometry (e.g. collinear triangle)."""


class ModelError(RaytraceError):
    """Parsed model data references missing vertices or normals."""


__all__ = [
    "RaytraceError",
    "ConfigurationError",
    "TransformError",
    "CameraError",
    "MaterialError",
    "GeometryError",
    "ModelError",
]
