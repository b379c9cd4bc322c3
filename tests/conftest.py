"""Shared fixtures for waypoint_pursuit tests."""

from __future__ import annotations

import contextlib
from types import SimpleNamespace

import matplotlib
import pytest

from waypoint_pursuit import telemetry
from waypoint_pursuit.bezier import BezierCurve, ControlPoint
from waypoint_pursuit.geometry import Point2D
from waypoint_pursuit.path import Path

matplotlib.use("Agg")


def make_straight_path(lengths=(10.0, 10.0, 10.0), speeds=(1.0, 2.0, 3.0)) -> Path:
    """Path along +x starting at the origin with the given segment lengths."""
    path = Path(Point2D(0.0, 0.0))
    x = 0.0
    for length, speed in zip(lengths, speeds):
        x += length
        path.add_point(Point2D(x, 0.0), speed)
    return path


def make_s_curve() -> BezierCurve:
    """Three control points forming an S-shaped curve ending heading +x."""
    return BezierCurve(
        ControlPoint(Point2D(0.0, 0.0), Point2D(0.0, 0.0), Point2D(2.0, 0.0), 1.0),
        ControlPoint(Point2D(-1.5, -1.0), Point2D(4.0, 3.0), Point2D(1.5, 1.0), 1.2),
        ControlPoint(Point2D(-2.0, 0.0), Point2D(8.0, 3.0), Point2D(0.0, 0.0), 0.6),
    )


@pytest.fixture
def straight_path() -> Path:
    return make_straight_path()


@pytest.fixture
def s_curve() -> BezierCurve:
    return make_s_curve()


@pytest.fixture
def definition_dict() -> dict:
    return {
        "step": 0.1,
        "points": [
            {"position": [0.0, 0.0], "outgoing": [2.0, 0.0], "speed": 1.0},
            {"position": [4.0, 3.0], "incoming": [-1.5, -1.0], "outgoing": [1.5, 1.0], "speed": 1.2},
            {"position": [8.0, 3.0], "incoming": [-2.0, 0.0], "speed": 0.6},
        ],
    }


class FakeServer:
    """In-memory stand-in for a websockets server.

    The first ``failures`` connection attempts and the first ``send_failures``
    sends raise; ``on_send`` runs after every delivered frame.
    """

    def __init__(self, failures: int = 0, send_failures: int = 0, on_send=None):
        self.failures = failures
        self.send_failures = send_failures
        self.attempts = 0
        self.sent = []
        self.on_send = on_send

    @contextlib.asynccontextmanager
    async def connect(self, uri):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise OSError("connection refused")
        yield self

    async def send(self, message):
        if self.send_failures > 0:
            self.send_failures -= 1
            raise ConnectionError("connection closed")
        self.sent.append(message)
        if self.on_send is not None:
            self.on_send(self)


@pytest.fixture
def fake_server(monkeypatch):
    """Factory installing a FakeServer as the telemetry websockets client."""

    def install(**kwargs):
        server = FakeServer(**kwargs)
        monkeypatch.setattr(telemetry, "websockets", SimpleNamespace(connect=server.connect))
        return server

    return install
