"""
CPU path tracer.
Diffuse lighting with shadow rays, a specular highlight and a stochastic
glossy reflection, recursing up to a fixed number of bounces.
"""
import math
import random
from typing import Optional, Tuple

from config import RenderConfig
from errors import DegenerateVectorError
from geometry import Intersect, Mesh, Ray, Sphere
from scene import PointLight, Scene
from vectors import (
    Color, Vec3, add, sub, mul, dot, cross, normsq, norm, reflect, hadamard
)

# Occluders closer than the light by less than this do not cast a shadow
SHADOW_TOLERANCE = 1e-9
# Reflected rays start this far above the surface
SURFACE_OFFSET = 1e-4


def get_intersect(scene: Scene, ray: Ray) -> Optional[Intersect]:
    """Nearest hit over every object of the scene; the first object wins ties."""
    nearest = None
    nearest_dist = math.inf

    for obj in scene.objects:
        if not isinstance(obj, (Sphere, Mesh)):
            raise TypeError(f"unsupported scene object {obj!r}")
        hit = obj.intersect(ray)

        if hit is not None and hit.distance < nearest_dist:
            nearest_dist = hit.distance
            nearest = hit

    return nearest


def light_visible(scene: Scene, light: PointLight, hit: Intersect,
                  config: RenderConfig) -> Tuple[bool, Vec3, float]:
    """
    Shadow test for one point light.

    A ray is cast from the light toward the hit point. The light is hidden
    when something is closer to it than the hit point. A shadow ray that
    hits nothing at all also hides the light unless config.shadow_miss_visible
    is set.

    Returns:
        (visible, vector from hit to light, squared distance to light)
    """
    to_light = sub(light.position, hit.position)
    dist_sq = normsq(to_light)
    try:
        shadow_ray = Ray.towards(light.position, sub(hit.position, light.position))
    except DegenerateVectorError:
        # light sits on the surface
        return False, to_light, dist_sq

    occluder = get_intersect(scene, shadow_ray)
    if occluder is None:
        return config.shadow_miss_visible, to_light, dist_sq
    if occluder.distance < math.sqrt(dist_sq) - SHADOW_TOLERANCE:
        return False, to_light, dist_sq
    return True, to_light, dist_sq


def compute_diffuse(scene: Scene, hit: Intersect, config: RenderConfig) -> Color:
    """Ambient plus unnormalized Lambertian light from every visible point light."""
    diffuse = hit.material.diffuse
    color = scene.ambient_filtered(diffuse)

    for light in scene.lights:
        factor = dot(hit.normal, sub(light.position, hit.position))
        if factor <= 0.0:
            continue
        visible, _, dist_sq = light_visible(scene, light, hit, config)
        if visible:
            color = add(color, mul(hadamard(diffuse, light.emitted()), factor / dist_sq))

    return color


def compute_specular(scene: Scene, ray: Ray, hit: Intersect, config: RenderConfig) -> Color:
    """
    Highlight around the mirror direction.

    Falloff is cos(angle / roughness), cut off once angle / roughness
    exceeds pi/2.
    """
    material = hit.material
    color = scene.ambient_filtered(material.specular)
    mirror = reflect(ray.direction, hit.normal)

    for light in scene.lights:
        visible, to_light, dist_sq = light_visible(scene, light, hit, config)
        if not visible:
            continue
        light_dir = mul(to_light, 1.0 / math.sqrt(dist_sq))
        angle = math.acos(max(-1.0, min(1.0, dot(mirror, light_dir))))
        spread = angle / material.roughness
        if spread > math.pi / 2:
            continue
        weight = math.cos(spread) / (dist_sq * material.roughness)
        color = add(color, mul(hadamard(material.specular, light.emitted()), weight))

    return color


def orthonormal_basis(w: Vec3) -> Tuple[Vec3, Vec3]:
    """Two unit vectors perpendicular to the unit vector w and to each other."""
    # seed with the axis least aligned with w
    ax, ay, az = abs(w[0]), abs(w[1]), abs(w[2])
    if ax <= ay and ax <= az:
        seed = (1.0, 0.0, 0.0)
    elif ay <= az:
        seed = (0.0, 1.0, 0.0)
    else:
        seed = (0.0, 0.0, 1.0)
    u = norm(cross(w, seed))
    v = cross(w, u)
    return u, v


def perturb(direction: Vec3, roughness: float, rng: random.Random) -> Vec3:
    """Random direction inside a cone of half-angle up to roughness * pi/2 around direction."""
    theta = rng.random() * roughness * math.pi / 2
    phi = rng.random() * 2 * math.pi
    u, v = orthonormal_basis(direction)
    side = add(mul(u, math.cos(phi)), mul(v, math.sin(phi)))
    return norm(add(mul(direction, math.cos(theta)), mul(side, math.sin(theta))))


def compute_reflection(scene: Scene, ray: Ray, hit: Intersect, depth: int,
                       rng: random.Random, config: RenderConfig) -> Color:
    """One glossy reflection sample, filtered by the specular color."""
    mirror = reflect(ray.direction, hit.normal)
    bounce_dir = perturb(mirror, hit.material.roughness, rng)
    bounce = Ray.towards(add(hit.position, mul(hit.normal, SURFACE_OFFSET)), bounce_dir)
    return hadamard(hit.material.specular, send_ray(scene, bounce, depth - 1, rng, config))


def send_ray(scene: Scene, ray: Ray, depth: int, rng: random.Random,
             config: RenderConfig = RenderConfig()) -> Color:
    """
    Radiance carried back along ray.

    Args:
        scene: Scene to trace through
        ray: Ray to follow (unit direction)
        depth: Bounces left; zero returns the ambient term
        rng: Random source owned by the calling sample
        config: Shadow-test behaviour
    """
    if depth == 0:
        return scene.ambient()

    hit = get_intersect(scene, ray)
    if hit is None:
        return scene.ambient()

    reflectivity = hit.material.reflectivity
    color = mul(compute_diffuse(scene, hit, config), 1.0 - reflectivity)

    if reflectivity > 0.0:
        reflection = compute_reflection(scene, ray, hit, depth, rng, config)
        specular = compute_specular(scene, ray, hit, config)
        color = add(color, mul(add(reflection, specular), reflectivity))

    return color


def sample_pixel(scene: Scene, config: RenderConfig, column: int, line: int,
                 rng: random.Random) -> Color:
    """One radiance sample through a random point of pixel (column, line)."""
    ray = scene.camera.ray((column + rng.random(), line + rng.random()))
    return send_ray(scene, ray, config.max_bounces, rng, config)

