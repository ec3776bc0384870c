"""Scene loading and validation from a JSON scene file."""
import json
import logging
import math
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from camera import Camera, DEFAULT_FOV, DEFAULT_RESOLUTION, DEFAULT_UP
from errors import DegenerateVectorError, GeometryError, SceneError
from geometry import Face, Material, Mesh, SceneObject, Sphere
from vectors import Color, Vec3, BLACK, clamp01, hadamard, mul

logger = logging.getLogger(__name__)


class AmbientLight(NamedTuple):
    color: Color
    intensity: float

    def contribution(self) -> Color:
        return mul(self.color, self.intensity)


class PointLight(NamedTuple):
    position: Vec3
    color: Color
    intensity: float

    def emitted(self) -> Color:
        return mul(self.color, self.intensity)


class Scene:
    """
    Everything needed for one render. Built once and never mutated, so it can
    be shared by any number of concurrent samples.
    """

    def __init__(self, camera: Camera, ambient_light: AmbientLight,
                 lights: Sequence[PointLight] = (),
                 objects: Sequence[SceneObject] = (),
                 render_settings: Optional[Dict[str, Any]] = None):
        self.camera = camera
        self.ambient_light = ambient_light
        self.lights: Tuple[PointLight, ...] = tuple(lights)
        self.objects: Tuple[SceneObject, ...] = tuple(objects)
        self.render_settings: Dict[str, Any] = dict(render_settings or {})

    def ambient(self) -> Color:
        """Constant term returned for misses and at the end of recursion."""
        return self.ambient_light.contribution()

    def ambient_filtered(self, color: Color) -> Color:
        return hadamard(color, self.ambient())

    def __repr__(self):
        return (f"Scene({self.camera!r}, {len(self.lights)} lights, "
                f"{len(self.objects)} objects)")


def load_scene(json_path: str = "scene.json") -> Dict[str, Any]:
    """Load scene configuration from JSON file."""
    try:
        with open(json_path, 'r') as f:
            return json.load(f)
    except OSError as e:
        raise SceneError(f"cannot read scene file {json_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SceneError(f"scene file {json_path} is not valid JSON: {e}") from e


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SceneError(message)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _check_triple(value: Any, where: str) -> None:
    _require(isinstance(value, (list, tuple)) and len(value) == 3
             and all(_is_number(c) for c in value),
             f"{where} must be a list of 3 finite numbers, got {value!r}")


def _check_number(value: Any, where: str) -> None:
    _require(_is_number(value), f"{where} must be a finite number, got {value!r}")


def _check_material(mat: Any, where: str) -> None:
    _require(isinstance(mat, dict), f"{where} must be an object")
    _require("color" in mat, f"{where} must have color")
    _check_triple(mat["color"], f"{where}.color")
    if "specular" in mat:
        _check_triple(mat["specular"], f"{where}.specular")
    for key in ("reflectivity", "roughness"):
        if key in mat:
            _check_number(mat[key], f"{where}.{key}")


def validate_scene(scene: Dict[str, Any]) -> None:
    """
    Check the structure of a scene dictionary.

    Raises:
        SceneError: naming the first missing or malformed field
    """
    _require(isinstance(scene, dict), "Scene must be a JSON object")
    _require("camera" in scene, "Scene must have camera")
    _require("ambient_light" in scene, "Scene must have ambient_light")

    # Validate camera
    cam = scene["camera"]
    _require(isinstance(cam, dict), "camera must be an object")
    _require("position" in cam, "camera must have position")
    _check_triple(cam["position"], "camera.position")
    _require("direction" in cam, "camera must have direction")
    _check_triple(cam["direction"], "camera.direction")
    if "up" in cam:
        _check_triple(cam["up"], "camera.up")
    if "resolution" in cam:
        res = cam["resolution"]
        _require(isinstance(res, (list, tuple)) and len(res) == 2
                 and all(isinstance(v, int) and not isinstance(v, bool) and v > 0 for v in res),
                 f"camera.resolution must be two positive integers, got {res!r}")
    if "fov" in cam:
        _check_number(cam["fov"], "camera.fov")

    # Validate lights
    ambient = scene["ambient_light"]
    _require(isinstance(ambient, dict), "ambient_light must be an object")
    _require("color" in ambient, "ambient_light must have color")
    _check_triple(ambient["color"], "ambient_light.color")
    _require("intensity" in ambient, "ambient_light must have intensity")
    _check_number(ambient["intensity"], "ambient_light.intensity")

    for key in ("lights", "spheres", "meshes"):
        _require(isinstance(scene.get(key, []), list), f"{key} must be a list")

    for i, light in enumerate(scene.get("lights", [])):
        where = f"lights[{i}]"
        _require(isinstance(light, dict), f"{where} must be an object")
        for key in ("position", "color", "intensity"):
            _require(key in light, f"{where} must have {key}")
        _check_triple(light["position"], f"{where}.position")
        _check_triple(light["color"], f"{where}.color")
        _check_number(light["intensity"], f"{where}.intensity")

    # Validate objects
    for i, sphere in enumerate(scene.get("spheres", [])):
        where = f"spheres[{i}]"
        _require(isinstance(sphere, dict), f"{where} must be an object")
        for key in ("center", "radius", "material"):
            _require(key in sphere, f"{where} must have {key}")
        _check_triple(sphere["center"], f"{where}.center")
        _check_number(sphere["radius"], f"{where}.radius")
        _check_material(sphere["material"], f"{where}.material")

    for i, mesh in enumerate(scene.get("meshes", [])):
        where = f"meshes[{i}]"
        _require(isinstance(mesh, dict), f"{where} must be an object")
        _require("faces" in mesh and isinstance(mesh["faces"], list) and mesh["faces"],
                 f"{where} must have a non-empty list of faces")
        for j, face in enumerate(mesh["faces"]):
            _require(isinstance(face, list) and len(face) == 3,
                     f"{where}.faces[{j}] must have 3 vertices")
            for k, vertex in enumerate(face):
                _check_triple(vertex, f"{where}.faces[{j}][{k}]")
        _require("material" in mesh, f"{where} must have material")
        _check_material(mesh["material"], f"{where}.material")

    if "render" in scene:
        _require(isinstance(scene["render"], dict), "render must be an object")


def read_color(value: Sequence[float]) -> Color:
    """Colors are clamped to [0, 1] channel by channel."""
    return (clamp01(float(value[0])), clamp01(float(value[1])), clamp01(float(value[2])))


def read_vec3(value: Sequence[float]) -> Vec3:
    return (float(value[0]), float(value[1]), float(value[2]))


def read_material(mat: Dict[str, Any]) -> Material:
    return Material(
        diffuse=read_color(mat["color"]),
        specular=read_color(mat["specular"]) if "specular" in mat else BLACK,
        reflectivity=float(mat.get("reflectivity", 0.0)),
        roughness=float(mat.get("roughness", Material().roughness)),
    ).validate()


def build_scene(scene: Dict[str, Any]) -> Scene:
    """
    Build the Scene aggregate from a validated dictionary.

    Raises:
        SceneError: when a camera, light or object cannot be constructed
    """
    try:
        cam = scene["camera"]
        camera = Camera(
            read_vec3(cam["position"]),
            read_vec3(cam["direction"]),
            up=read_vec3(cam.get("up", DEFAULT_UP)),
            resolution=tuple(cam.get("resolution", DEFAULT_RESOLUTION)),
            fov=float(cam.get("fov", DEFAULT_FOV)),
        )

        ambient = scene["ambient_light"]
        ambient_light = AmbientLight(read_color(ambient["color"]), float(ambient["intensity"]))

        lights: List[PointLight] = [
            PointLight(read_vec3(l["position"]), read_color(l["color"]), float(l["intensity"]))
            for l in scene.get("lights", [])
        ]

        objects: List[SceneObject] = []
        for s in scene.get("spheres", []):
            objects.append(Sphere(read_vec3(s["center"]), float(s["radius"]),
                                  read_material(s["material"])))
        for m in scene.get("meshes", []):
            faces = [Face(*(read_vec3(v) for v in f)) for f in m["faces"]]
            objects.append(Mesh(faces, read_material(m["material"])))
    except DegenerateVectorError as e:
        raise SceneError(f"degenerate camera basis: {e}") from e
    except GeometryError as e:
        raise SceneError(str(e)) from e

    return Scene(camera, ambient_light, lights, objects, scene.get("render"))


def read_scene(json_path: str) -> Scene:
    """Load, validate and build a scene in one step."""
    data = load_scene(json_path)
    validate_scene(data)
    scene = build_scene(data)
    logger.info("Loaded %r from %s", scene, json_path)
    return scene
