"""Render settings: defaults, scene-file values and command-line overrides."""
import enum
import os
from typing import Any, Dict, NamedTuple, Optional

from errors import SceneError

DEFAULT_SAMPLES = 64
FAST_SAMPLES = 4
DEFAULT_MAX_BOUNCES = 3
DEFAULT_WORKERS = os.cpu_count() or 4


def _integral(value: Any, field: str) -> int:
    """Whole numbers only; 2.0 is accepted, 2.7, "2" and booleans are not."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise SceneError(f"{field} must be an integer, got {value!r}")
    return int(value)


class ParallelMode(enum.Enum):
    SEQUENTIAL = "sequential"
    POOL = "pool"
    REDUCE = "reduce"


class RenderConfig(NamedTuple):
    """
    Tunables passed to the render drivers.

    shadow_miss_visible decides what a shadow ray that hits nothing means.
    By default such a light is skipped; set it to treat the light as visible.
    """
    mode: ParallelMode = ParallelMode.SEQUENTIAL
    samples: int = DEFAULT_SAMPLES
    max_bounces: int = DEFAULT_MAX_BOUNCES
    workers: int = DEFAULT_WORKERS
    seed: Optional[int] = None
    shadow_miss_visible: bool = False

    def validate(self) -> "RenderConfig":
        if not isinstance(self.mode, ParallelMode):
            raise SceneError(f"unknown parallel mode {self.mode!r}")
        if self.samples < 1:
            raise SceneError(f"samples must be at least 1, got {self.samples}")
        if self.max_bounces < 0:
            raise SceneError(f"max_bounces must be non-negative, got {self.max_bounces}")
        if self.workers < 1:
            raise SceneError(f"workers must be at least 1, got {self.workers}")
        return self

    @classmethod
    def from_settings(cls, settings: Optional[Dict[str, Any]] = None,
                      **overrides: Any) -> "RenderConfig":
        """
        Resolve each field from overrides, then the scene's render block,
        then the defaults. Overrides set to None are ignored.
        """
        settings = settings or {}
        values: Dict[str, Any] = {}
        for field in cls._fields:
            if overrides.get(field) is not None:
                values[field] = overrides[field]
            elif settings.get(field) is not None:
                values[field] = settings[field]

        try:
            if "mode" in values and not isinstance(values["mode"], ParallelMode):
                values["mode"] = ParallelMode(values["mode"])
        except (TypeError, ValueError) as e:
            raise SceneError(f"invalid render settings: {e}") from e
        for field in ("samples", "max_bounces", "workers", "seed"):
            if field in values:
                values[field] = _integral(values[field], field)
        if "shadow_miss_visible" in values and not isinstance(values["shadow_miss_visible"], bool):
            raise SceneError(
                f"shadow_miss_visible must be true or false, got {values['shadow_miss_visible']!r}")

        return cls(**values).validate()
