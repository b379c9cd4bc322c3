"""Waypoint Pursuit - Bezier Path Planning and Lookahead Tracking for Ground Vehicles

Turns a handful of user-supplied waypoints into a smooth drivable route and,
while the vehicle moves, computes a steering target ("lookahead point") and a
remaining-distance/speed profile from its current position.

## Architecture Overview

### Layer 1: Geometry (geometry.py, segment.py)
Immutable planar primitives shared by planning and tracking.
- Point2D / Rotation value types
- Segment: unclamped point queries (extrapolation) and clamped projections

### Layer 2: Curve Flattening (bezier.py)
Converts tangent-handle control points into straight segments.
- Cubic Bezier spans evaluated by De Casteljau (nested lerps)
- Fixed sample count per span, last sample exactly on the next control point
- Speed interpolated between control point speeds

### Layer 3: Path Tracking (path.py)
Stateful lookahead computation, called once per control tick.
- Projects the pose onto the active segment
- Retires passed segments (forward only)
- Inflates the lookahead by the off-path distance and extrapolates past the end
- Optional end-heading transform and tracking observers

### Layer 4: Following and Simulation (follower.py, model.py, simulation.py)
Pure pursuit on top of the path's DrivingData, driven against a differential
drive kinematic model.

## Supporting Modules

- **config.py**: Centralized configuration parameters
- **errors.py**: Input validation errors
- **loader.py**: JSON path definitions
- **data_collector.py**: CSV logging of waypoints and tracking samples
- **telemetry.py**: WebSocket streaming of tracking frames
- **visualization.py**: matplotlib plots of paths and runs
- **cli.py**: `python -m waypoint_pursuit` entry point

## Usage

```python
from waypoint_pursuit import BezierCurve, ControlPoint, Point2D

curve = BezierCurve(
    ControlPoint(Point2D(), Point2D(0, 0), Point2D(2, 0), speed=1.0),
    ControlPoint(Point2D(0, -2), Point2D(4, 4), Point2D(), speed=0.5),
)
path = curve.flatten(step=0.05)
data = path.get_look_ahead_point(Point2D(0.1, 0.0), look_ahead_distance=0.8)
```
"""

from .bezier import BezierCurve, ControlPoint
from .errors import (
    EmptyPathError,
    InsufficientControlPointsError,
    InvalidStepError,
    PathDefinitionError,
    PathError,
)
from .follower import PurePursuitFollower
from .geometry import Point2D, Rotation
from .loader import PathDefinition, load_definition, parse_definition
from .path import DrivingData, Path, with_end_heading
from .segment import Segment
from .simulation import SimulationResult, simulate

__version__ = "0.1.0"

__all__ = [
    "BezierCurve",
    "ControlPoint",
    "DrivingData",
    "EmptyPathError",
    "InsufficientControlPointsError",
    "InvalidStepError",
    "Path",
    "PathDefinition",
    "PathDefinitionError",
    "PathError",
    "Point2D",
    "PurePursuitFollower",
    "Rotation",
    "Segment",
    "SimulationResult",
    "load_definition",
    "parse_definition",
    "simulate",
    "with_end_heading",
]
