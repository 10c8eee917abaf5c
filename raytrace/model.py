"""
Turn already-parsed polygon mesh data into a group of triangles.

Text parsing (OBJ or otherwise) happens elsewhere; this module only
takes vertex/normal lists and 1-based face indices, as OBJ files use.
"""
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from raytrace.errors import GeometryError, ModelError
from raytrace.logging_config import get_logger
from raytrace.materials import Material
from raytrace.shapes import Shape, add_child, group, smooth_triangle, triangle
from raytrace.transforms import Transform

logger = get_logger(__name__)

Vec3 = Tuple[float, float, float]


class FaceVertex(NamedTuple):
    """1-based vertex index with an optional 1-based normal index."""

    vertex: int
    normal: Optional[int] = None


FaceEntry = Union[int, FaceVertex]
Face = Sequence[FaceEntry]


@dataclass
class Mesh:
    vertices: Sequence[Vec3]
    faces: Sequence[Face] = ()
    normals: Sequence[Vec3] = ()
    groups: Dict[str, Sequence[Face]] = field(default_factory=dict)

    @property
    def face_count(self) -> int:
        return len(self.faces) + sum(len(fs) for fs in self.groups.values())


def _lookup(items: Sequence[Vec3], index: int, what: str, where: str) -> Vec3:
    if not isinstance(index, int) or not 1 <= index <= len(items):
        raise ModelError(f"{where}: {what} index {index!r} out of range 1..{len(items)}")
    return items[index - 1]

def _fan(mesh: Mesh, face: Face, where: str, material: Optional[Material]) -> List[Shape]:
    if len(face) < 3:
        raise ModelError(f"{where}: a face needs at least 3 vertices, got {len(face)}")
    entries = [e if isinstance(e, FaceVertex) else FaceVertex(e) for e in face]
    points = [_lookup(mesh.vertices, e.vertex, "vertex", where) for e in entries]
    normals = [
        _lookup(mesh.normals, e.normal, "normal", where) if e.normal is not None else None
        for e in entries
    ]

    out = []
    for i in range(1, len(entries) - 1):
        corners = (0, i, i + 1)
        p1, p2, p3 = (points[k] for k in corners)
        n1, n2, n3 = (normals[k] for k in corners)
        try:
            if n1 is not None and n2 is not None and n3 is not None:
                out.append(smooth_triangle(p1, p2, p3, n1, n2, n3, material=material))
            else:
                out.append(triangle(p1, p2, p3, material=material))
        except GeometryError as e:
            logger.warning("%s: skipping degenerate triangle %s", where, e)
    return out

def mesh_to_group(mesh: Mesh, material: Optional[Material] = None,
                  transform: Optional[Transform] = None, name: Optional[str] = None) -> Shape:
    """Fan-triangulate every face into a group.

    Faces listed directly on the mesh become children of the returned
    group; each named group becomes a subgroup carrying its name. Call
    ``bvh.divide`` on the result to speed up large meshes.
    """
    root = group(transform=transform, name=name)
    for i, face in enumerate(mesh.faces):
        for tri in _fan(mesh, face, f"face {i + 1}", material):
            add_child(root, tri)

    for group_name, faces in mesh.groups.items():
        sub = group(name=group_name)
        for i, face in enumerate(faces):
            for tri in _fan(mesh, face, f"face {i + 1} of group {group_name!r}", material):
                add_child(sub, tri)
        add_child(root, sub)

    logger.info("Loaded mesh: %d vertices, %d faces, %d triangles",
                len(mesh.vertices), mesh.face_count, _count_triangles(root))
    return root

def _count_triangles(g: Shape) -> int:
    return sum(_count_triangles(c) if c.is_group else 1 for c in g.children)
