"""Pinhole camera producing one ray per (possibly fractional) pixel."""
import math
from typing import Tuple

from errors import GeometryError
from geometry import Ray
from vectors import Vec3, add, sub, mul, dot, cross, norm, is_finite

DEFAULT_UP: Vec3 = (0.0, 0.0, 1.0)
DEFAULT_RESOLUTION = (1024, 768)
DEFAULT_FOV = 90.0


class Camera:
    """
    Camera basis built once from a position and a view direction.

    Args:
        position: Eye position
        direction: View direction (any non-zero length)
        up: Approximate up vector, orthogonalized against direction
        resolution: (width, height) in pixels
        fov: Horizontal field of view in degrees

    Raises:
        DegenerateVectorError: direction is zero or parallel to up
        GeometryError: invalid resolution or field of view
    """

    def __init__(self, position: Vec3, direction: Vec3, up: Vec3 = DEFAULT_UP,
                 resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
                 fov: float = DEFAULT_FOV):
        width, height = resolution
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise GeometryError(f"resolution must be two positive integers, got {resolution}")
        if not 0.0 < fov < 180.0:
            raise GeometryError(f"field of view must be in (0, 180) degrees, got {fov}")
        if not is_finite(position):
            raise GeometryError(f"camera position must be finite, got {position}")

        self.position = tuple(position)
        self.resolution = (int(width), int(height))
        self.fov = float(fov)

        self.direction = norm(direction)
        # Gram-Schmidt: drop the part of up along the view direction
        self.up = norm(sub(up, mul(self.direction, dot(up, self.direction))))
        self.right = cross(self.direction, self.up)

        step = -math.radians(self.fov) / self.resolution[0]
        self.px_down = mul(self.up, step)
        self.px_left = mul(self.right, step)

    def width(self) -> int:
        return self.resolution[0]

    def height(self) -> int:
        return self.resolution[1]

    def ray(self, px: Tuple[float, float]) -> Ray:
        """Ray through pixel coordinate px = (column, line); fractions allowed."""
        offset_x = px[0] - self.resolution[0] / 2.0
        offset_y = px[1] - self.resolution[1] / 2.0
        direction = add(self.direction,
                        add(mul(self.px_left, -offset_x), mul(self.px_down, offset_y)))
        return Ray.towards(self.position, direction)

    def __repr__(self):
        return (f"Camera(position={self.position}, direction={self.direction}, "
                f"resolution={self.resolution}, fov={self.fov})")
