"""Exceptions raised by the path tracer.

All domain errors also derive from ValueError, since each of them reports an
invalid input rather than a failure of the renderer itself.
"""


class SoftPTError(Exception):
    """Base class for path tracer errors."""


class DegenerateVector(SoftPTError, ValueError):
    """Raised when a zero-length vector is normalized."""


class InvalidGeometry(SoftPTError, ValueError):
    """Raised when a sphere would have a non-positive or non-finite radius."""


class DegenerateCameraBasis(SoftPTError, ValueError):
    """Raised when the camera configuration cannot produce a usable basis.

    Typical causes are an up hint parallel to the view direction, a camera
    placed at its own target, or a camera placed at the world origin.
    """
