"""Pytest configuration and shared fixtures."""

import json
import sys
from pathlib import Path

import pytest

# Make the flat modules under python/ importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "python"))

from camera import Camera  # noqa: E402
from scene import AmbientLight, Scene  # noqa: E402


@pytest.fixture(scope="session")
def project_root_path():
    """Provide the project root path."""
    return project_root


@pytest.fixture
def ambient_scene():
    """1x1 scene lit only by a red ambient light."""
    camera = Camera((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), resolution=(1, 1))
    return Scene(camera, AmbientLight((1.0, 0.0, 0.0), 1.0))


@pytest.fixture
def scene_data():
    """A small valid scene description."""
    return {
        "camera": {
            "position": [0, 0, 0],
            "direction": [1, 0, 0],
            "up": [0, 0, 1],
            "resolution": [4, 3],
            "fov": 60,
        },
        "ambient_light": {"color": [1, 1, 1], "intensity": 0.1},
        "lights": [
            {"position": [0, 0, 5], "color": [1, 1, 1], "intensity": 10},
        ],
        "spheres": [
            {
                "center": [5, 0, 0],
                "radius": 1,
                "material": {
                    "color": [1, 0, 0],
                    "specular": [1, 1, 1],
                    "reflectivity": 0.4,
                    "roughness": 0.2,
                },
            },
        ],
        "meshes": [
            {
                "faces": [[[2, -5, -1], [8, 5, -1], [8, -5, -1]]],
                "material": {"color": [0.5, 0.5, 0.5]},
            },
        ],
        "render": {"samples": 2, "max_bounces": 2, "seed": 3},
    }


@pytest.fixture
def write_scene(tmp_path):
    """Write a scene dictionary to a JSON file and return its path."""
    def _write(data, name="scene.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return _write
