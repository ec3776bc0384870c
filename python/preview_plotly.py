"""
Interactive 3D preview of the scene using Plotly.
Helps verify geometry before rendering.
"""
import argparse
import logging
import math
import sys
from typing import List, Optional

import plotly.graph_objects as go

from errors import RenderError
from geometry import Mesh, Sphere
from logging_config import setup_logging
from scene import Scene, read_scene
from vectors import add, mul

logger = logging.getLogger(__name__)

SPHERE_STEPS = 16


def _rgb(color) -> str:
    return f"rgb({int(color[0] * 255)}, {int(color[1] * 255)}, {int(color[2] * 255)})"


def sphere_surface(sphere: Sphere, steps: int = SPHERE_STEPS) -> go.Surface:
    """Parametric surface for a sphere, colored with its diffuse color."""
    xs, ys, zs = [], [], []
    for i in range(steps + 1):
        theta = math.pi * i / steps
        row_x, row_y, row_z = [], [], []
        for j in range(steps + 1):
            phi = 2 * math.pi * j / steps
            row_x.append(sphere.center[0] + sphere.radius * math.sin(theta) * math.cos(phi))
            row_y.append(sphere.center[1] + sphere.radius * math.sin(theta) * math.sin(phi))
            row_z.append(sphere.center[2] + sphere.radius * math.cos(theta))
        xs.append(row_x)
        ys.append(row_y)
        zs.append(row_z)

    color = _rgb(sphere.material.diffuse)
    return go.Surface(x=xs, y=ys, z=zs,
                      colorscale=[[0, color], [1, color]],
                      showscale=False, opacity=0.9)


def mesh_trace(mesh: Mesh) -> go.Mesh3d:
    x: List[float] = []
    y: List[float] = []
    z: List[float] = []
    for face in mesh.faces:
        for vertex in face.vertices:
            x.append(vertex[0])
            y.append(vertex[1])
            z.append(vertex[2])
    n = len(mesh.faces)
    return go.Mesh3d(
        x=x, y=y, z=z,
        i=[3 * k for k in range(n)],
        j=[3 * k + 1 for k in range(n)],
        k=[3 * k + 2 for k in range(n)],
        color=_rgb(mesh.material.diffuse),
        opacity=0.8,
    )


def create_scene_preview(scene: Scene) -> go.Figure:
    """Create interactive 3D plot of scene."""
    fig = go.Figure()

    # Objects
    for i, obj in enumerate(scene.objects):
        trace = sphere_surface(obj) if isinstance(obj, Sphere) else mesh_trace(obj)
        trace.name = f"{type(obj).__name__} {i + 1}"
        fig.add_trace(trace)

    # Point lights
    for i, light in enumerate(scene.lights):
        fig.add_trace(go.Scatter3d(
            x=[light.position[0]],
            y=[light.position[1]],
            z=[light.position[2]],
            mode='markers',
            marker=dict(size=10, color=_rgb(light.color), symbol='circle',
                        line=dict(color='black', width=1)),
            name=f'Light {i + 1} ({light.intensity:g})'
        ))

    # Camera
    cam = scene.camera
    look = add(cam.position, cam.direction)
    fig.add_trace(go.Scatter3d(
        x=[cam.position[0]],
        y=[cam.position[1]],
        z=[cam.position[2]],
        mode='markers',
        marker=dict(size=10, color='red', symbol='diamond'),
        name='Camera'
    ))

    # Camera look direction and up vector
    fig.add_trace(go.Scatter3d(
        x=[cam.position[0], look[0]],
        y=[cam.position[1], look[1]],
        z=[cam.position[2], look[2]],
        mode='lines',
        line=dict(color='red', width=3, dash='dash'),
        name='Camera Look'
    ))
    up = add(cam.position, mul(cam.up, 0.5))
    fig.add_trace(go.Scatter3d(
        x=[cam.position[0], up[0]],
        y=[cam.position[1], up[1]],
        z=[cam.position[2], up[2]],
        mode='lines',
        line=dict(color='green', width=3),
        name='Camera Up'
    ))

    fig.update_layout(
        title=f"Scene Preview ({cam.width()}x{cam.height()}, fov {cam.fov:g})",
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


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="preview-scene", description="Interactive 3D preview of a scene file.")
    parser.add_argument("scene", help="path to the JSON scene file")
    parser.add_argument("-o", "--output", help="write an HTML file instead of opening a browser")
    args = parser.parse_args(argv)
    setup_logging()

    try:
        scene = read_scene(args.scene)
    except RenderError as e:
        logger.error("%s", e)
        return 1

    fig = create_scene_preview(scene)
    if args.output:
        fig.write_html(args.output)
    else:
        fig.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
