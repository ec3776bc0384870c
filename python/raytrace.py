"""
Command-line entry point: load a scene, render it and save a PNG.

Usage examples:
  raytrace scenes/spheres.json -o renders/spheres.png
  raytrace scenes/spheres.json --parallel pool --workers 8 --samples 256
  raytrace scenes/spheres.json --fast --seed 1
"""
import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from config import FAST_SAMPLES, ParallelMode, RenderConfig
from errors import RenderError
from image_output import to_png
from logging_config import setup_logging
from raytrace_parallel import render
from scene import read_scene

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="raytrace",
        description="Monte Carlo ray tracer for JSON scene files.")
    parser.add_argument("scene", help="path to the JSON scene file")
    parser.add_argument("-o", "--output",
                        help="PNG file to write (default: renders/<scene>_<timestamp>.png)")
    parser.add_argument("--parallel", choices=[m.value for m in ParallelMode],
                        help="sampling strategy (default: sequential)")
    parser.add_argument("--samples", type=int, help="samples per pixel")
    parser.add_argument("--fast", action="store_true",
                        help=f"quick preview with {FAST_SAMPLES} samples per pixel")
    parser.add_argument("--workers", type=int, help="worker threads for pool and reduce")
    parser.add_argument("--max-bounces", type=int, help="recursion depth of the path tracer")
    parser.add_argument("--seed", type=int, help="seed for reproducible sampling")
    parser.add_argument("--shadow-miss-visible", action="store_true", default=None,
                        help="treat a shadow ray that hits nothing as a visible light")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING or ERROR (default: $LOG_LEVEL or INFO)")
    return parser


def default_output(scene_path: str) -> str:
    name = os.path.splitext(os.path.basename(scene_path))[0]
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join("renders", f"{name}_{timestamp}.png")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    samples = FAST_SAMPLES if args.fast and args.samples is None else args.samples
    try:
        scene = read_scene(args.scene)
        config = RenderConfig.from_settings(
            scene.render_settings,
            mode=args.parallel,
            samples=samples,
            workers=args.workers,
            max_bounces=args.max_bounces,
            seed=args.seed,
            shadow_miss_visible=args.shadow_miss_visible,
        )
        data = render(scene, config)
    except RenderError as e:
        logger.error("%s", e)
        return 1

    output_path = args.output or default_output(args.scene)
    try:
        to_png(data, scene.camera.width(), scene.camera.height(), output_path)
    except OSError as e:
        logger.error("Cannot write %s: %s", output_path, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
