"""
Vector math on plain 3-tuples.
The same helpers serve points, directions and RGB colors.
"""
import math
from typing import Tuple

from errors import DegenerateVectorError

Vec3 = Tuple[float, float, float]
Color = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
BLACK: Color = (0.0, 0.0, 0.0)


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])

def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])

def mul(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)

def div(a: Vec3, s: float) -> Vec3:
    return (a[0] / s, a[1] / s, a[2] / s)

def neg(a: Vec3) -> Vec3:
    return (-a[0], -a[1], -a[2])

def hadamard(a: Color, b: Color) -> Color:
    """Channel-wise product, used to filter one color by another."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])

def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )

def normsq(v: Vec3) -> float:
    return dot(v, v)

def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))

def norm(v: Vec3) -> Vec3:
    """
    Scale v to unit length.

    Raises:
        DegenerateVectorError: if v is exactly the zero vector.
    """
    l = length(v)
    if l == 0.0:
        raise DegenerateVectorError(f"cannot normalize degenerate vector {v}")
    return (v[0] / l, v[1] / l, v[2] / l)

def reflect(rd: Vec3, n: Vec3) -> Vec3:
    """Reflect direction rd about the plane orthogonal to the unit normal n."""
    return sub(rd, mul(n, 2.0 * dot(rd, n)))

def is_finite(v: Vec3) -> bool:
    return all(math.isfinite(c) for c in v)

def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))
