"""PNG output for normalized render buffers."""
import logging
import os
from typing import Sequence

from PIL import Image

from vectors import clamp01

logger = logging.getLogger(__name__)


def to_rgb8(data: Sequence[float]) -> bytes:
    """Map channels in [0, 1] to 0-255, clamping anything outside."""
    return bytes(int(clamp01(v) * 255) for v in data)


def to_image(data: Sequence[float], width: int, height: int) -> Image.Image:
    if len(data) != 3 * width * height:
        raise ValueError(f"expected {3 * width * height} channels for a {width}x{height} "
                         f"image, got {len(data)}")
    return Image.frombytes("RGB", (width, height), to_rgb8(data))


def to_png(data: Sequence[float], width: int, height: int, output_path: str) -> None:
    """Save a normalized row-major RGB buffer as an 8-bit PNG."""
    img = to_image(data, width, height)
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    img.save(output_path, format="PNG")
    logger.info("Saved %s", output_path)
