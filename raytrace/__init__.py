"""Recursive Whitted-style ray tracer with groups, BVH and soft shadows."""
from raytrace.bvh import divide
from raytrace.camera import Camera, render
from raytrace.canvas import Canvas, save, to_image
from raytrace.errors import (
    CameraError, ConfigurationError, GeometryError, MaterialError, ModelError, RaytraceError,
    TransformError,
)
from raytrace.intersections import Intersection, hit, intersections
from raytrace.lights import AreaLight, PointLight
from raytrace.materials import Material
from raytrace.model import FaceVertex, Mesh, mesh_to_group
from raytrace.rays import Ray
from raytrace.world import World, default_world, intersect

__version__ = "0.1.0"
