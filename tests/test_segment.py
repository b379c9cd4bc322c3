"""Tests for Segment point queries and projections."""

from __future__ import annotations

import dataclasses

import pytest

from waypoint_pursuit.geometry import Point2D
from waypoint_pursuit.segment import Segment


@pytest.fixture
def x_axis_segment() -> Segment:
    return Segment(Point2D(0.0, 0.0), Point2D(10.0, 0.0), 2.5)


class TestSegmentBasics:
    def test_length(self):
        assert Segment(Point2D(0.0, 0.0), Point2D(3.0, 4.0)).length == pytest.approx(5.0)

    def test_max_speed(self, x_axis_segment):
        assert x_axis_segment.max_speed == 2.5

    def test_is_immutable(self, x_axis_segment):
        with pytest.raises(dataclasses.FrozenInstanceError):
            x_axis_segment.max_speed = 1.0  # type: ignore[misc]


class TestUnclampedQueries:
    def test_point_at_fraction_inside(self, x_axis_segment):
        assert x_axis_segment.point_at_fraction(0.25) == Point2D(2.5, 0.0)

    def test_point_at_fraction_extrapolates(self, x_axis_segment):
        assert x_axis_segment.point_at_fraction(1.2).x == pytest.approx(12.0)
        assert x_axis_segment.point_at_fraction(-0.5).x == pytest.approx(-5.0)

    def test_point_at_distance_inside(self):
        seg = Segment(Point2D(0.0, 0.0), Point2D(3.0, 4.0))
        p = seg.point_at_distance(2.5)
        assert p.x == pytest.approx(1.5)
        assert p.y == pytest.approx(2.0)

    def test_point_at_distance_past_end_extrapolates(self, x_axis_segment):
        p = x_axis_segment.point_at_distance(15.0)
        assert p.x == pytest.approx(15.0)
        assert p.y == pytest.approx(0.0)

    def test_point_at_negative_distance_extrapolates_backwards(self, x_axis_segment):
        assert x_axis_segment.point_at_distance(-2.0).x == pytest.approx(-2.0)


class TestClampedQueries:
    def test_closest_point_orthogonal_projection(self, x_axis_segment):
        p = x_axis_segment.closest_point(Point2D(5.0, 5.0))
        assert p.x == pytest.approx(5.0)
        assert p.y == pytest.approx(0.0)

    def test_closest_point_clamped_before_start(self, x_axis_segment):
        p = x_axis_segment.closest_point(Point2D(-3.0, 1.0))
        assert p.x == pytest.approx(0.0)
        assert p.y == pytest.approx(0.0)

    def test_closest_point_clamped_past_end(self, x_axis_segment):
        p = x_axis_segment.closest_point(Point2D(15.0, -2.0))
        assert p.x == pytest.approx(10.0)
        assert p.y == pytest.approx(0.0)

    def test_fraction_of_closest_point(self, x_axis_segment):
        assert x_axis_segment.fraction_of_closest_point(Point2D(2.5, 3.0)) == pytest.approx(0.25)
        assert x_axis_segment.fraction_of_closest_point(Point2D(-3.0, 1.0)) == 0.0
        assert x_axis_segment.fraction_of_closest_point(Point2D(15.0, 0.0)) == 1.0

    def test_diagonal_projection(self):
        seg = Segment(Point2D(0.0, 0.0), Point2D(4.0, 4.0))
        p = seg.closest_point(Point2D(4.0, 0.0))
        assert p.x == pytest.approx(2.0)
        assert p.y == pytest.approx(2.0)


class TestZeroLengthSegment:
    def test_queries_fall_back_to_start(self):
        point = Point2D(1.0, 1.0)
        seg = Segment(point, point, 1.0)
        assert seg.length == 0.0
        assert seg.point_at_distance(3.0) == point
        assert seg.fraction_of_closest_point(Point2D(5.0, 5.0)) == 0.0
        assert seg.closest_point(Point2D(5.0, 5.0)) == point
