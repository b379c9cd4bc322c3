"""Straight path segment shared by curve flattening and path tracking.

Queries come in two flavours:
- Unclamped: point_at_fraction, point_at_distance (extrapolate past the ends)
- Clamped: closest_point, fraction_of_closest_point (stay on the finite segment)
"""

from dataclasses import dataclass

from .geometry import Point2D


@dataclass(frozen=True)
class Segment:
    """Line segment from ``start`` to ``end`` carrying a target speed.

    Attributes:
        start: Segment start point (meters).
        end: Segment end point (meters).
        max_speed: Target speed while this segment is active (m/s).
    """

    start: Point2D
    end: Point2D
    max_speed: float = 0.0

    @property
    def length(self) -> float:
        """Euclidean length of the segment (meters)."""
        return self.start.distance_to(self.end)

    def point_at_fraction(self, fraction: float) -> Point2D:
        """Point at ``start + fraction * (end - start)``.

        Args:
            fraction: Parametric position. Values outside [0, 1] extrapolate.

        Returns:
            Point on the (infinite) supporting line.
        """
        return self.start.interpolate(self.end, fraction)

    def point_at_distance(self, distance: float) -> Point2D:
        """Point at arclength ``distance`` from ``start`` along the segment direction.

        Distances beyond the segment length (or negative) extrapolate along the
        line.
        A zero-length segment has no direction and returns ``start``.

        Args:
            distance: Arclength from ``start`` (meters).

        Returns:
            Point on the supporting line.
        """
        length = self.length
        if length == 0.0:
            return self.start
        return self.point_at_fraction(distance / length)

    def fraction_of_closest_point(self, point: Point2D) -> float:
        """Parametric position of the projection of ``point``, clamped to [0, 1]."""
        dx = self.end.x - self.start.x
        dy = self.end.y - self.start.y
        length_sq = dx * dx + dy * dy
        if length_sq == 0.0:
            return 0.0
        fraction = ((point.x - self.start.x) * dx + (point.y - self.start.y) * dy) / length_sq
        return max(0.0, min(1.0, fraction))

    def closest_point(self, point: Point2D) -> Point2D:
        """Orthogonal projection of ``point`` onto the finite segment.

        Projections that would fall before ``start`` or past ``end`` are clamped
        to the nearest endpoint, never to the infinite line.
        """
        return self.point_at_fraction(self.fraction_of_closest_point(point))
