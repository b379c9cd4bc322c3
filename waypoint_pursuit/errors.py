"""Exceptions raised by waypoint pursuit components.

All errors are input-validation failures raised at the boundary of the
component that detects them.
"""


class PathError(ValueError):
    """Base class for path planning and tracking errors."""


class InsufficientControlPointsError(PathError):
    """A curve needs at least two control points to be flattened."""


class InvalidStepError(PathError):
    """Flattening step outside (0, 1]."""


class EmptyPathError(PathError):
    """Tracking query on a path with no segments."""


class PathDefinitionError(PathError):
    """Malformed path definition file or mapping."""
