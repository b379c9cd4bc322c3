"""Tests for Bezier curve flattening."""

from __future__ import annotations

import math

import numpy as np
import pytest

from waypoint_pursuit.bezier import BezierCurve, ControlPoint, sample_fractions
from waypoint_pursuit.errors import InsufficientControlPointsError, InvalidStepError, PathError
from waypoint_pursuit.geometry import Point2D


def two_point_curve(start_speed: float = 1.0, end_speed: float = 0.5) -> BezierCurve:
    return BezierCurve(
        ControlPoint(Point2D(0.0, 0.0), Point2D(0.0, 0.0), Point2D(2.0, 0.0), start_speed),
        ControlPoint(Point2D(0.0, -2.0), Point2D(4.0, 3.0), Point2D(0.0, 0.0), end_speed),
    )


def cubic(p0, p1, p2, p3, t):
    """Closed-form cubic Bezier for comparison."""
    u = 1.0 - t
    return (
        u**3 * p0[0] + 3 * u**2 * t * p1[0] + 3 * u * t**2 * p2[0] + t**3 * p3[0],
        u**3 * p0[1] + 3 * u**2 * t * p1[1] + 3 * u * t**2 * p2[1] + t**3 * p3[1],
    )


class TestControlPoint:
    def test_tangent_offsets_resolved_to_absolute_points(self):
        cp = ControlPoint(Point2D(-1.0, 0.0), Point2D(2.0, 3.0), Point2D(1.0, 1.0), 1.0)
        assert cp.incoming_tangent == Point2D(1.0, 3.0)
        assert cp.outgoing_tangent == Point2D(3.0, 4.0)
        assert cp.position == Point2D(2.0, 3.0)


class TestSampleFractions:
    def test_last_fraction_is_exactly_one(self):
        for step in (0.1, 0.05, 0.01, 0.07, 0.3):
            fractions = sample_fractions(step)
            assert fractions[-1] == 1.0

    def test_sample_count_is_ceil_of_inverse_step(self):
        assert len(sample_fractions(0.1)) == 10
        assert len(sample_fractions(0.05)) == 20
        assert len(sample_fractions(0.01)) == 100
        assert len(sample_fractions(1.0)) == 1
        np.testing.assert_allclose(sample_fractions(0.3), [0.25, 0.5, 0.75, 1.0])

    def test_fractions_strictly_increasing(self):
        fractions = sample_fractions(0.03)
        assert np.all(np.diff(fractions) > 0)

    @pytest.mark.parametrize("step", [0.0, -0.1, 1.5, float("nan")])
    def test_invalid_step_raises(self, step):
        with pytest.raises(InvalidStepError):
            sample_fractions(step)


class TestFlatten:
    @pytest.mark.parametrize("step", [0.1, 0.05, 0.01])
    def test_endpoints_are_exact(self, step):
        path = two_point_curve().flatten(step)
        assert path.start == Point2D(0.0, 0.0)
        assert path.last_point == Point2D(4.0, 3.0)
        assert path.all_segments[0].start == Point2D(0.0, 0.0)

    @pytest.mark.parametrize("step", [0.1, 0.05, 0.01])
    def test_arclength_strictly_increasing(self, step):
        path = two_point_curve().flatten(step)
        lengths = np.array([segment.length for segment in path.all_segments])
        assert np.all(lengths > 0.0)
        assert np.all(np.diff(np.cumsum(lengths)) > 0.0)

    def test_segment_count_per_span(self, s_curve):
        assert len(s_curve.flatten(0.1).all_segments) == 20
        assert len(s_curve.flatten(1.0).all_segments) == 2

    def test_consecutive_spans_are_continuous(self, s_curve):
        path = s_curve.flatten(0.1)
        segments = path.all_segments
        # Last sample of the first span lands on the middle control point
        assert segments[9].end == Point2D(4.0, 3.0)
        for previous, current in zip(segments, segments[1:]):
            assert previous.end == current.start

    def test_samples_lie_on_cubic_curve(self):
        path = two_point_curve().flatten(0.25)
        p0, p1, p2, p3 = (0.0, 0.0), (2.0, 0.0), (4.0, 1.0), (4.0, 3.0)
        for k, segment in enumerate(path.all_segments, start=1):
            expected = cubic(p0, p1, p2, p3, k / 4)
            assert segment.end.x == pytest.approx(expected[0])
            assert segment.end.y == pytest.approx(expected[1])

    def test_speed_interpolated_between_control_points(self):
        path = two_point_curve(start_speed=1.0, end_speed=0.5).flatten(0.5)
        speeds = [segment.max_speed for segment in path.all_segments]
        assert speeds == pytest.approx([0.75, 0.5])

    def test_total_distance_matches_segment_sum(self, s_curve):
        path = s_curve.flatten(0.05)
        total = math.fsum(segment.length for segment in path.all_segments)
        assert path.total_distance == pytest.approx(total, abs=1e-9)

    def test_add_points_extends_curve(self):
        curve = BezierCurve(ControlPoint(Point2D(), Point2D(0.0, 0.0), Point2D(1.0, 0.0), 1.0))
        curve.add_points(ControlPoint(Point2D(-1.0, 0.0), Point2D(3.0, 0.0), Point2D(), 1.0))
        path = curve.flatten(0.5)
        assert path.last_point == Point2D(3.0, 0.0)
        assert path.total_distance == pytest.approx(3.0)


class TestFlattenErrors:
    def test_single_control_point_raises(self):
        curve = BezierCurve(ControlPoint(Point2D(), Point2D(1.0, 1.0), Point2D(), 1.0))
        with pytest.raises(InsufficientControlPointsError):
            curve.flatten(0.1)

    def test_no_control_points_raises(self):
        with pytest.raises(InsufficientControlPointsError):
            BezierCurve().flatten(0.1)

    @pytest.mark.parametrize("step", [0.0, -0.5, 1.01])
    def test_invalid_step_raises(self, step):
        with pytest.raises(InvalidStepError):
            two_point_curve().flatten(step)

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidStepError, PathError)
        assert issubclass(InsufficientControlPointsError, ValueError)
