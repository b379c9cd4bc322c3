"""Path definition loading from JSON.

A path definition lists Bezier control points and flattening options:

    {
        "step": 0.05,
        "end_heading_deg": 90.0,
        "points": [
            {"position": [0, 0], "outgoing": [2, 0], "speed": 1.0},
            {"position": [5, 5], "incoming": [0, -2], "speed": 0.5}
        ]
    }

"incoming" and "outgoing" are tangent handle offsets relative to "position"
and default to [0, 0]. "step" defaults to DEFAULT_FLATTEN_STEP and
"end_heading_deg" is optional.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path as FilePath
from typing import Any, Dict, List, Optional, Union

from .bezier import BezierCurve, ControlPoint
from .config import DEFAULT_FLATTEN_STEP, MINIMUM_TURNING_RADIUS
from .errors import PathDefinitionError
from .geometry import Point2D, Rotation
from .path import Path, with_end_heading


@dataclass
class PathDefinition:
    """Parsed path definition.

    Attributes:
        control_points: Ordered Bezier control points.
        step: Flattening step in (0, 1].
        end_heading: Optional final heading for the end-heading transform.
    """

    control_points: List[ControlPoint]
    step: float = DEFAULT_FLATTEN_STEP
    end_heading: Optional[Rotation] = None

    def build_path(self, turning_radius: float = MINIMUM_TURNING_RADIUS) -> Path:
        """Flatten the control points and apply the end heading if one is set."""
        path = BezierCurve(*self.control_points).flatten(self.step)
        if self.end_heading is not None:
            path = with_end_heading(path, self.end_heading, turning_radius)
        logging.debug(
            f"Built path: {len(path.all_segments)} segments, {path.total_distance:.3f}m"
        )
        return path


def _parse_point(value: Any, name: str) -> Point2D:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise PathDefinitionError(f"'{name}' must be a [x, y] pair, got {value!r}")
    try:
        x, y = float(value[0]), float(value[1])
    except (TypeError, ValueError) as e:
        raise PathDefinitionError(f"'{name}' must contain numbers: {e}") from e
    if not (math.isfinite(x) and math.isfinite(y)):
        raise PathDefinitionError(f"'{name}' must be finite, got {value!r}")
    return Point2D(x, y)


def _parse_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise PathDefinitionError(f"'{name}' must be a number, got {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise PathDefinitionError(f"'{name}' must be a number, got {value!r}") from e
    if not math.isfinite(result):
        raise PathDefinitionError(f"'{name}' must be finite, got {value!r}")
    return result


def parse_control_point(data: Dict[str, Any]) -> ControlPoint:
    """Build a ControlPoint from a mapping with position/incoming/outgoing/speed keys.

    Raises:
        PathDefinitionError: On missing or malformed fields.
    """
    if not isinstance(data, dict):
        raise PathDefinitionError(f"Control point must be an object, got {type(data).__name__}")
    if "position" not in data:
        raise PathDefinitionError("Control point is missing 'position'")
    if "speed" not in data:
        raise PathDefinitionError("Control point is missing 'speed'")

    return ControlPoint(
        incoming_offset=_parse_point(data.get("incoming", [0.0, 0.0]), "incoming"),
        position=_parse_point(data["position"], "position"),
        outgoing_offset=_parse_point(data.get("outgoing", [0.0, 0.0]), "outgoing"),
        speed=_parse_float(data["speed"], "speed"),
    )


def parse_definition(data: Dict[str, Any]) -> PathDefinition:
    """Build a PathDefinition from an already-decoded JSON object.

    Only the structure is checked here. Step range and control point count are
    validated by BezierCurve.flatten().

    Raises:
        PathDefinitionError: On missing or malformed fields.
    """
    if not isinstance(data, dict):
        raise PathDefinitionError(f"Path definition must be an object, got {type(data).__name__}")

    points = data.get("points")
    if not isinstance(points, list):
        raise PathDefinitionError("Path definition needs a 'points' list")

    control_points = [parse_control_point(point) for point in points]
    step = _parse_float(data.get("step", DEFAULT_FLATTEN_STEP), "step")

    end_heading = None
    if data.get("end_heading_deg") is not None:
        end_heading = Rotation.from_degrees(_parse_float(data["end_heading_deg"], "end_heading_deg"))

    return PathDefinition(control_points=control_points, step=step, end_heading=end_heading)


def load_definition(filepath: Union[str, FilePath]) -> PathDefinition:
    """Load a path definition JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        PathDefinitionError: If the file is not valid JSON or is malformed.
    """
    filepath = FilePath(filepath)
    with open(filepath, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PathDefinitionError(f"Invalid JSON in {filepath}: {e}") from e

    definition = parse_definition(data)
    logging.debug(f"Loaded {len(definition.control_points)} control points from {filepath}")
    return definition
