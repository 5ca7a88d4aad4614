"""Exceptions raised by pathtracer.

Invalid configuration (camera parameters, primitives, materials) raises the
built-in ValueError at construction time. The types below cover failures
that need to be told apart from that.
"""


class SceneError(ValueError):
    """A scene file could not be read or describes an invalid scene."""


class RenderError(RuntimeError):
    """A background render failed; the cause is chained as ``__cause__``."""
