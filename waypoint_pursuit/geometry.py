"""Planar geometry value types.

Provides the two immutable primitives the planner and tracker are built on:
- Point2D: a position or offset in the plane (meters)
- Rotation: an angle stored as its cosine and sine
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rotation:
    """Planar rotation stored as (cos, sin) of the angle from the +x axis."""

    cos: float = 1.0
    sin: float = 0.0

    @classmethod
    def from_radians(cls, radians: float) -> "Rotation":
        return cls(math.cos(radians), math.sin(radians))

    @classmethod
    def from_degrees(cls, degrees: float) -> "Rotation":
        return cls.from_radians(math.radians(degrees))

    @property
    def radians(self) -> float:
        return math.atan2(self.sin, self.cos)

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    def inverse(self) -> "Rotation":
        """Rotation by the negated angle."""
        return Rotation(self.cos, -self.sin)

    def rotate_by(self, other: "Rotation") -> "Rotation":
        """Compose two rotations (angles add)."""
        return Rotation(
            self.cos * other.cos - self.sin * other.sin,
            self.cos * other.sin + self.sin * other.cos,
        )

    def flip(self) -> "Rotation":
        """Rotation pointing the opposite way (angle + 180°)."""
        return Rotation(-self.cos, -self.sin)


@dataclass(frozen=True)
class Point2D:
    """Point or offset in the plane (meters)."""

    x: float = 0.0
    y: float = 0.0

    def translate_by(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def inverse(self) -> "Point2D":
        return Point2D(-self.x, -self.y)

    def rotate_by(self, rotation: Rotation) -> "Point2D":
        """Rotate about the origin."""
        return Point2D(
            self.x * rotation.cos - self.y * rotation.sin,
            self.x * rotation.sin + self.y * rotation.cos,
        )

    def angle_to(self, other: "Point2D") -> Rotation:
        """Direction of the vector from this point to ``other``."""
        return Rotation.from_radians(math.atan2(other.y - self.y, other.x - self.x))

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def interpolate(self, other: "Point2D", fraction: float) -> "Point2D":
        """Linear interpolation towards ``other``; ``fraction`` is not clamped.

        Exact at both ends: fraction 0 returns this point, fraction 1 returns ``other``.
        """
        keep = 1.0 - fraction
        return Point2D(
            keep * self.x + fraction * other.x,
            keep * self.y + fraction * other.y,
        )

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)
