"""Exceptions raised while loading a scene or rendering it."""


class RenderError(Exception):
    """Base class for every error raised by the ray tracer."""


class DegenerateVectorError(RenderError, ValueError):
    """A zero-length vector was asked to normalize."""


class GeometryError(RenderError, ValueError):
    """A primitive or camera was built from invalid parameters."""


class SceneError(RenderError):
    """The scene description is malformed or incomplete."""


class NormalizationError(RenderError, ArithmeticError):
    """The radiance buffer cannot be scaled to [0, 1]."""
