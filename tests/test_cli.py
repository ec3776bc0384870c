"""Tests for the raytrace command line."""

import os

import pytest
from PIL import Image

from raytrace import build_parser, default_output, main


def test_parser_modes():
    parser = build_parser()
    assert parser.parse_args(["s.json"]).parallel is None
    for mode in ("sequential", "pool", "reduce"):
        assert parser.parse_args(["s.json", "--parallel", mode]).parallel == mode
    with pytest.raises(SystemExit):
        parser.parse_args(["s.json", "--parallel", "gpu"])


def test_default_output():
    path = default_output(os.path.join("scenes", "spheres.json"))
    assert path.startswith(os.path.join("renders", "spheres_"))
    assert path.endswith(".png")


@pytest.mark.parametrize("mode", ["sequential", "pool", "reduce"])
def test_render_ambient_scene(project_root_path, tmp_path, mode):
    output = tmp_path / "ambient.png"
    scene_path = str(project_root_path / "scenes" / "ambient.json")
    assert main([scene_path, "-o", str(output), "--parallel", mode, "--workers", "2"]) == 0
    with Image.open(output) as img:
        assert img.size == (1, 1)
        assert img.getpixel((0, 0)) == (255, 0, 0)


def test_fast_render(write_scene, scene_data, tmp_path):
    output = tmp_path / "fast.png"
    assert main([write_scene(scene_data), "-o", str(output), "--fast", "--seed", "1",
                 "--max-bounces", "1"]) == 0
    with Image.open(output) as img:
        assert img.size == (4, 3)


def test_invalid_scene_writes_nothing(write_scene, scene_data, tmp_path):
    scene_data["spheres"][0]["radius"] = -2
    output = tmp_path / "never.png"
    assert main([write_scene(scene_data), "-o", str(output)]) == 1
    assert not output.exists()


def test_black_scene_writes_nothing(write_scene, tmp_path):
    scene = write_scene({
        "camera": {"position": [0, 0, 0], "direction": [1, 0, 0], "resolution": [2, 2]},
        "ambient_light": {"color": [0, 0, 0], "intensity": 1},
    })
    output = tmp_path / "black.png"
    assert main([scene, "-o", str(output), "--samples", "1"]) == 1
    assert not output.exists()


def test_invalid_samples(write_scene, scene_data, tmp_path):
    output = tmp_path / "never.png"
    assert main([write_scene(scene_data), "-o", str(output), "--samples", "0"]) == 1
    assert not output.exists()


def test_unwritable_output(project_root_path, tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    output = blocker / "ambient.png"
    scene_path = str(project_root_path / "scenes" / "ambient.json")
    assert main([scene_path, "-o", str(output)]) == 1
    assert "Cannot write" in caplog.text
