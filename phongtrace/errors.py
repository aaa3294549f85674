"""Exceptions raised by PhongTrace.

Degenerate geometry never raises; it simply produces no intersection.
Only configuration problems that make a render impossible are reported,
and always before rendering starts.
"""


class PhongTraceError(Exception):
    """Base class for all PhongTrace errors."""
    pass


class SceneError(PhongTraceError):
    """A scene or camera cannot be rendered as configured."""
    pass


class SceneParseError(SceneError):
    """Error during scene file parsing."""
    pass
