"""
Interactive 3D preview of a world using Plotly.
Helps verify geometry and camera placement before rendering.
"""
from typing import List, Optional

import plotly.graph_objects as go

from raytrace.bounds import BoundingBox
from raytrace.camera import Camera
from raytrace.lights import AreaLight, sample_positions
from raytrace.shapes import Shape, bounds_of, leaves
from raytrace.tuples import add, mul, vector

# Pairs of corner indices forming the 12 edges of a box
BOX_EDGES = [
    [0, 1], [1, 3], [3, 2], [2, 0],  # x-y face at min z
    [4, 5], [5, 7], [7, 6], [6, 4],  # x-y face at max z
    [0, 4], [1, 5], [2, 6], [3, 7],  # connecting edges
]


def world_bounds_of(shape: Shape) -> BoundingBox:
    """Bounding box of ``shape`` in world space, following its parent groups."""
    box = bounds_of(shape)
    node: Optional[Shape] = shape
    while node is not None:
        box = box.transform(node.transform.matrix)
        node = node.parent
    return box

def _box_corners(box: BoundingBox) -> List[List[float]]:
    (x0, y0, z0), (x1, y1, z1) = box.minimum, box.maximum
    return [[x, y, z] for z in (z0, z1) for y in (y0, y1) for x in (x0, x1)]

def _add_box(fig: go.Figure, box: BoundingBox, color: str, name: str) -> None:
    corners = _box_corners(box)
    xs, ys, zs = [], [], []
    for a, b in BOX_EDGES:
        xs += [corners[a][0], corners[b][0], None]
        ys += [corners[a][1], corners[b][1], None]
        zs += [corners[a][2], corners[b][2], None]
    fig.add_trace(go.Scatter3d(
        x=xs, y=ys, z=zs,
        mode='lines',
        line=dict(color=color, width=2),
        name=name,
    ))

def create_scene_preview(world, camera: Optional[Camera] = None) -> go.Figure:
    """Wireframe boxes for every finite shape, plus lights and the camera."""
    fig = go.Figure()

    for i, top in enumerate(world.shapes):
        for leaf in leaves(top):
            box = world_bounds_of(leaf)
            # Planes and other unbounded shapes have nothing sensible to draw
            if box.is_empty or not box.is_finite:
                continue
            _add_box(fig, box, 'gray', f'{leaf.kind.value} {i + 1}')

    for i, light in enumerate(world.lights):
        if isinstance(light, AreaLight):
            pts = sample_positions(light)
            fig.add_trace(go.Scatter3d(
                x=[p[0] for p in pts],
                y=[p[1] for p in pts],
                z=[p[2] for p in pts],
                mode='markers',
                marker=dict(size=4, color='orange'),
                name=f'Area light {i + 1} samples',
            ))
        pos = light.position
        fig.add_trace(go.Scatter3d(
            x=[pos[0]], y=[pos[1]], z=[pos[2]],
            mode='markers',
            marker=dict(size=12, color='yellow', symbol='circle'),
            name=f'Light {i + 1}',
        ))

    if camera is not None:
        eye = camera.transform.apply_inverse((0.0, 0.0, 0.0, 1.0))
        forward = camera.transform.apply_inverse(vector(0.0, 0.0, -1.0))
        look_at = add(eye, mul(forward, 2.0))
        fig.add_trace(go.Scatter3d(
            x=[eye[0]], y=[eye[1]], z=[eye[2]],
            mode='markers',
            marker=dict(size=10, color='red', symbol='diamond'),
            name='Camera',
        ))
        fig.add_trace(go.Scatter3d(
            x=[eye[0], look_at[0]],
            y=[eye[1], look_at[1]],
            z=[eye[2], look_at[2]],
            mode='lines',
            line=dict(color='red', width=3, dash='dash'),
            name='Camera Look',
        ))

    fig.update_layout(
        title="Scene Preview (Interactive 3D)",
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode='data'
        ),
        width=1000,
        height=800
    )
    return fig
