"""Segment path with lookahead tracking for pure pursuit.

A Path is built once from flattened curve samples with add_point() and then
queried every control tick with get_look_ahead_point(). Each query projects
the vehicle onto the active segment, retires segments the vehicle has passed,
and returns the steering target together with the remaining-distance and
speed profile.

Retirement only moves forward: segments are kept in build order and the
active one is tracked with an index cursor plus the consumed arclength.
"""

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import numpy.typing as npt

from .config import MINIMUM_TURNING_RADIUS
from .errors import EmptyPathError
from .geometry import Point2D, Rotation
from .segment import Segment


@dataclass
class DrivingData:
    """Result of one lookahead query.

    Attributes:
        remaining_distance: Arclength from the vehicle's projection to the path end (m).
        max_speed: Target speed of the active segment (m/s).
        look_ahead_point: Steering target.
        closest_point: Projection of the vehicle onto the active segment.
        current_segment_end: End point of the active segment.
        traveled_distance: Arclength covered so far (m).
        progress: traveled_distance / total_distance.
    """

    remaining_distance: float
    max_speed: float
    look_ahead_point: Point2D
    closest_point: Point2D
    current_segment_end: Point2D
    traveled_distance: float = 0.0
    progress: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        """Flatten into plain floats for logging and telemetry."""
        return {
            "remaining_distance": self.remaining_distance,
            "max_speed": self.max_speed,
            "look_ahead_x": self.look_ahead_point.x,
            "look_ahead_y": self.look_ahead_point.y,
            "closest_x": self.closest_point.x,
            "closest_y": self.closest_point.y,
            "segment_end_x": self.current_segment_end.x,
            "segment_end_y": self.current_segment_end.y,
            "traveled_distance": self.traveled_distance,
            "progress": self.progress,
        }


TrackingObserver = Callable[[Point2D, DrivingData], None]
"""Callback invoked with (pose, driving_data) after every lookahead query."""


class Path:
    """Ordered segments with forward-only progress tracking.

    Attributes:
        start: First point of the path.
        last_point: Append cursor; end of the most recently added segment.
        total_distance: Sum of all segment lengths (m).
        finished_distance: Sum of retired segment lengths (m).
    """

    def __init__(self, start: Optional[Point2D] = None) -> None:
        """Create an empty path.

        Args:
            start: Initial point; the first added segment starts here.
                Defaults to the origin.
        """
        self.start: Point2D = start if start is not None else Point2D()
        self.last_point: Point2D = self.start
        self.total_distance: float = 0.0
        self.finished_distance: float = 0.0

        self._segments: List[Segment] = []
        self._front: int = 0  # Index of the active segment
        self._observers: List[TrackingObserver] = []
        self._lock = threading.RLock()

    @classmethod
    def empty(cls) -> "Path":
        return cls(Point2D())

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------

    def add_point(self, point: Point2D, speed: float) -> None:
        """Append a segment from the current last point to ``point``.

        Args:
            point: New end point (meters).
            speed: Target speed for the new segment (m/s).
        """
        with self._lock:
            segment = Segment(self.last_point, point, speed)
            self._segments.append(segment)
            self.total_distance += segment.length
            self.last_point = point

    def is_empty(self) -> bool:
        return not self._segments

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def segments(self) -> Tuple[Segment, ...]:
        """Active segments, front (currently tracked) first."""
        return tuple(self._segments[self._front:])

    @property
    def all_segments(self) -> Tuple[Segment, ...]:
        """Every segment ever added, including retired ones."""
        return tuple(self._segments)

    @property
    def front_index(self) -> int:
        """Index of the active segment within all_segments."""
        return self._front

    @property
    def on_last_segment(self) -> bool:
        """True once the final segment is the active one."""
        return self._front == len(self._segments) - 1

    def waypoints(self) -> npt.NDArray[np.float64]:
        """Every vertex of the path as an (N + 1, 2) array, start point first."""
        points = [self.start.as_tuple()]
        points.extend(segment.end.as_tuple() for segment in self._segments)
        return np.array(points, dtype=np.float64)

    def describe(self) -> None:
        """Log every vertex of the path at DEBUG level."""
        with self._lock:
            for x, y in self.waypoints():
                logging.debug(f"{x:.4f}    {y:.4f}")

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(self, observer: TrackingObserver) -> None:
        """Register a callback receiving (pose, driving_data) after each query."""
        self._observers.append(observer)

    def remove_observer(self, observer: TrackingObserver) -> None:
        self._observers.remove(observer)

    # ------------------------------------------------------------------
    # Tracking phase
    # ------------------------------------------------------------------

    def get_look_ahead_point(self, pose: Point2D, look_ahead_distance: float) -> DrivingData:
        """Compute the steering target and progress for the current pose.

        Algorithm:
        1. Project the pose onto the active segment.
        2. While another segment follows and the pose is strictly closer to it,
           retire the active segment.
        3. Remaining distance = rest of the active segment + all later segments.
        4. Inflate the lookahead by the pose's distance from the path, then walk
           it forward along the segments. The final segment extrapolates past
           its end rather than clamping.

        Args:
            pose: Current vehicle position (meters). Heading is not used.
            look_ahead_distance: Desired arclength ahead of the projection (meters).

        Returns:
            DrivingData for this tick.

        Raises:
            EmptyPathError: If no segments have been added.
        """
        with self._lock:
            if self.is_empty():
                raise EmptyPathError("Cannot compute lookahead on an empty path")

            segments = self._segments
            last_index = len(segments) - 1

            closest = segments[self._front].closest_point(pose)
            off_path = pose.distance_to(closest)

            # Retire segments the vehicle has moved past. A tie counts only when
            # the pose projects onto the very end of the active segment.
            while self._front < last_index:
                next_closest = segments[self._front + 1].closest_point(pose)
                next_off_path = pose.distance_to(next_closest)
                passed_end = (
                    next_off_path == off_path
                    and segments[self._front].fraction_of_closest_point(pose) >= 1.0
                )
                if next_off_path < off_path or passed_end:
                    retired = segments[self._front]
                    self.finished_distance += retired.length
                    self._front += 1
                    closest = next_closest
                    off_path = next_off_path
                    logging.debug(
                        f"Retired segment {self._front - 1} "
                        f"(finished {self.finished_distance:.3f}m of {self.total_distance:.3f}m)"
                    )
                else:
                    break

            front = segments[self._front]
            traveled = self.finished_distance + front.fraction_of_closest_point(pose) * front.length
            progress = traveled / self.total_distance if self.total_distance > 0.0 else 1.0

            remaining_on_segment = closest.distance_to(front.end)
            later = self.total_distance - self.finished_distance - front.length
            remaining = remaining_on_segment + max(0.0, later)

            budget = look_ahead_distance + off_path
            if budget > remaining_on_segment and self._front < last_index:
                budget -= remaining_on_segment
                for index in range(self._front + 1, last_index + 1):
                    segment = segments[index]
                    if budget > segment.length and index != last_index:
                        budget -= segment.length
                    else:
                        look_ahead = segment.point_at_distance(budget)
                        break
            else:
                look_ahead = front.point_at_distance(front.length - remaining_on_segment + budget)

            data = DrivingData(
                remaining_distance=remaining,
                max_speed=front.max_speed,
                look_ahead_point=look_ahead,
                closest_point=closest,
                current_segment_end=front.end,
                traveled_distance=traveled,
                progress=progress,
            )

        for observer in tuple(self._observers):
            observer(pose, data)
        return data


def with_end_heading(
    path: Path, heading: Rotation, turning_radius: float = MINIMUM_TURNING_RADIUS
) -> Path:
    """Return a copy of ``path`` biased to arrive at ``heading``.

    The last segment is replaced by an approach that first reaches a point
    ``turning_radius`` behind the final waypoint along ``heading``. When the
    requested heading turns back more than 90° from the last segment, an extra
    point offset sideways by another ``turning_radius`` is inserted first.
    This is best-effort: the vehicle is steered towards the heading, not
    guaranteed to achieve it.

    Args:
        path: Source path. Not modified.
        heading: Desired final heading.
        turning_radius: Offset of the auxiliary points (meters).

    Returns:
        New path in the building state.

    Raises:
        EmptyPathError: If ``path`` has no segments.
    """
    segments = path.all_segments
    if not segments:
        raise EmptyPathError("Cannot set end heading on an empty path")

    last = segments[-1]
    speed = last.max_speed
    relative = last.start.angle_to(last.end).inverse().rotate_by(heading)
    rotate_left = relative.sin > 0

    final_offset = Point2D(turning_radius, 0.0).rotate_by(heading.flip())
    side_offset = final_offset.rotate_by(Rotation.from_degrees(90.0 if rotate_left else -90.0))
    final_start = final_offset.translate_by(last.end)
    side_start = side_offset.translate_by(final_start)

    shaped = Path(path.start)
    for segment in segments[:-1]:
        shaped.add_point(segment.end, segment.max_speed)
    if relative.cos < 0:
        shaped.add_point(side_start, speed)
    shaped.add_point(final_start, speed)
    shaped.add_point(last.end, speed)

    logging.debug(
        f"End heading {heading.degrees:.1f}° added "
        f"{len(shaped.all_segments) - len(segments)} auxiliary segment(s)"
    )
    return shaped
