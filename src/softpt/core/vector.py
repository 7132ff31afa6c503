"""Three-component vector value type for the reference renderer.

Vector3 is a frozen dataclass with the arithmetic needed by the path tracer:
component-wise and scalar operators, dot/cross products, length, distance and
epsilon-equivalence. All operations return new vectors; nothing is mutated.

Example:
    >>> a = Vector3(1.0, 0.0, 0.0)
    >>> b = Vector3(0.0, 1.0, 0.0)
    >>> a.cross(b)
    Vector3(x=0.0, y=0.0, z=1.0)
    >>> (a + b).normalize().length()
    1.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from src.softpt.errors import DegenerateVector

# Tolerance shared by equivalence tests, the intersector's tangency gate and
# the bounce-ray offset
EPSILON = 1e-5


@dataclass(frozen=True)
class Vector3:
    """An immutable (x, y, z) triple of floats.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def splat(cls, value: float) -> Vector3:
        """Create a vector with all three components set to value."""
        return cls(value, value, value)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vector3:
        """Create a vector from any iterable of exactly three numbers.

        Raises:
            ValueError: If the iterable does not hold three values.
        """
        items = [float(v) for v in values]
        if len(items) != 3:
            raise ValueError(f"Expected 3 components, got {len(items)}")
        return cls(items[0], items[1], items[2])

    # =========================================================================
    # Products and norms
    # =========================================================================

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vector3:
        """Return a unit vector in the same direction.

        Raises:
            DegenerateVector: If the vector has zero length.
        """
        length = self.length()
        if length == 0.0:
            raise DegenerateVector(f"Cannot normalize zero-length vector {self}")
        return self * (1.0 / length)

    def distance(self, other: Vector3) -> float:
        return (self - other).length()

    def is_equivalent(self, other: Vector3, max_delta: float = EPSILON) -> bool:
        """Check whether other lies strictly within max_delta of this vector."""
        return (other - self).length() < max_delta

    # =========================================================================
    # Operators
    # =========================================================================

    def __add__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)
        return Vector3(self.x + other, self.y + other, self.z + other)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vector3(self.x * other, self.y * other, self.z * other)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ZERO = Vector3(0.0, 0.0, 0.0)


def lerp(start: Vector3, end: Vector3, t: float) -> Vector3:
    """Linearly interpolate between two vectors (t is not clamped)."""
    return start + (end - start) * t


def saturate(value: float) -> float:
    """Clamp a scalar to [0, 1]."""
    return 0.0 if value < 0.0 else 1.0 if value > 1.0 else value
