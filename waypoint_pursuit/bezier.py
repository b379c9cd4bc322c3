"""Bezier curve flattening into drivable paths.

Each pair of consecutive control points defines a cubic Bezier span:

    A.position -> A.outgoing_tangent -> B.incoming_tangent -> B.position

The span is evaluated with De Casteljau's construction (three levels of
linear interpolation) at evenly spaced parameters, and each sample is
appended to a Path together with a speed interpolated between the two
control point speeds.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from .errors import InsufficientControlPointsError, InvalidStepError
from .geometry import Point2D
from .path import Path
from .segment import Segment


@dataclass(frozen=True)
class ControlPoint:
    """Waypoint with tangent handles.

    Tangent handles are given relative to ``position`` and resolved to absolute
    points on construction.

    Attributes:
        incoming_offset: Handle controlling the curve arriving at this point.
        position: Waypoint position (meters).
        outgoing_offset: Handle controlling the curve leaving this point.
        speed: Target speed at this waypoint (m/s).
        incoming_tangent: Absolute incoming handle point.
        outgoing_tangent: Absolute outgoing handle point.
    """

    incoming_offset: Point2D
    position: Point2D
    outgoing_offset: Point2D
    speed: float
    incoming_tangent: Point2D = field(init=False)
    outgoing_tangent: Point2D = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "incoming_tangent", self.position.translate_by(self.incoming_offset))
        object.__setattr__(self, "outgoing_tangent", self.position.translate_by(self.outgoing_offset))


def sample_fractions(step: float) -> np.ndarray:
    """Curve parameters for one span: k / n for k = 1..n with n = ceil(1 / step).

    Parameters are computed from an integer counter so the last one is exactly
    1.0 regardless of how ``step`` rounds.

    Raises:
        InvalidStepError: If ``step`` is not in (0, 1].
    """
    if not 0.0 < step <= 1.0:
        raise InvalidStepError(f"Flattening step must be in (0, 1], got {step}")
    # round() keeps 1/step values like 10.000000000000002 from adding a sample
    n = max(1, math.ceil(round(1.0 / step, 9)))
    return np.minimum(1.0, np.arange(1, n + 1, dtype=np.float64) / n)


class BezierCurve:
    """Ordered control points flattened into a Path."""

    def __init__(self, *control_points: ControlPoint) -> None:
        self.control_points: List[ControlPoint] = list(control_points)

    def add_points(self, *control_points: ControlPoint) -> None:
        self.control_points.extend(control_points)

    def flatten(self, step: float) -> Path:
        """Flatten the curve into straight segments.

        Args:
            step: Parameter spacing in (0, 1]. Smaller steps give more segments;
                each span produces ceil(1 / step) of them.

        Returns:
            Path starting at the first control point's position and ending
            exactly at the last control point's position.

        Raises:
            InsufficientControlPointsError: If fewer than two control points exist.
            InvalidStepError: If ``step`` is not in (0, 1].
        """
        if len(self.control_points) < 2:
            raise InsufficientControlPointsError(
                f"At least 2 control points are required, got {len(self.control_points)}"
            )
        fractions = sample_fractions(step)

        path = Path(self.control_points[0].position)
        for first, second in zip(self.control_points, self.control_points[1:]):
            _flatten_span(path, first, second, fractions)
        return path


def _flatten_span(path: Path, first: ControlPoint, second: ControlPoint, fractions: Sequence[float]) -> None:
    """Append the samples of one cubic span to ``path``."""
    chord_a = Segment(first.position, first.outgoing_tangent)
    chord_b = Segment(first.outgoing_tangent, second.incoming_tangent)
    chord_c = Segment(second.incoming_tangent, second.position)

    for j in fractions:
        j = float(j)
        p0 = chord_a.point_at_fraction(j)
        p1 = chord_b.point_at_fraction(j)
        p2 = chord_c.point_at_fraction(j)
        q0 = Segment(p0, p1).point_at_fraction(j)
        q1 = Segment(p1, p2).point_at_fraction(j)
        point = Segment(q0, q1).point_at_fraction(j)
        speed = first.speed + (second.speed - first.speed) * j
        path.add_point(point, speed)
