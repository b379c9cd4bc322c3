"""Pure Pursuit path follower.

This module turns the lookahead data produced by a Path into motion commands:
- Chooses a velocity-adaptive lookahead distance
- Queries the path for the lookahead point and speed profile
- Computes linear and angular velocity commands
"""

import math
from typing import Dict, Optional, Tuple

from .config import (
    A_MAX,
    FOLLOWER_BASE_LOOKAHEAD,
    FOLLOWER_GOAL_TOLERANCE,
    FOLLOWER_LOOKAHEAD_OFFSET,
    FOLLOWER_LOOKAHEAD_TIME,
    FOLLOWER_MAX_LOOKAHEAD,
    FOLLOWER_MIN_LOOKAHEAD,
)
from .geometry import Point2D
from .path import DrivingData, Path


class PurePursuitFollower:
    """Pure Pursuit path follower driven by Path lookahead queries.

    Uses state estimates (position, heading, velocity) to query the path
    and steer towards the returned lookahead point.
    """

    def __init__(
        self,
        lookahead_distance: float = FOLLOWER_BASE_LOOKAHEAD,
        adaptive: bool = True,
        lookahead_time: float = FOLLOWER_LOOKAHEAD_TIME,
        lookahead_offset: float = FOLLOWER_LOOKAHEAD_OFFSET,
        min_lookahead: float = FOLLOWER_MIN_LOOKAHEAD,
        max_lookahead: float = FOLLOWER_MAX_LOOKAHEAD,
        max_deceleration: float = A_MAX,
        goal_tolerance: float = FOLLOWER_GOAL_TOLERANCE,
    ):
        """Initialize the pure pursuit controller.

        Args:
            lookahead_distance: Base distance ahead on path to target (meters).
                Used if adaptive=False.
            adaptive: If True, use velocity-adaptive lookahead. Default: True.
            lookahead_time: Time-based lookahead gain (seconds).
                Lookahead = lookahead_time * |v| + lookahead_offset
            lookahead_offset: Minimum base lookahead (meters).
            min_lookahead: Minimum lookahead distance (meters).
            max_lookahead: Maximum lookahead distance (meters).
            max_deceleration: Deceleration used for the approach speed profile (m/s²).
            goal_tolerance: Remaining distance treated as arrival (meters).
        """
        self.base_lookahead_distance = lookahead_distance
        self.adaptive = adaptive
        self.lookahead_time = lookahead_time
        self.lookahead_offset = lookahead_offset
        self.min_lookahead = min_lookahead
        self.max_lookahead = max_lookahead
        self.max_deceleration = max_deceleration
        self.goal_tolerance = goal_tolerance
        self.lookahead_distance = lookahead_distance  # Updated each tick if adaptive
        self.last_data: Optional[DrivingData] = None

    def compute_adaptive_lookahead(self, velocity: float) -> float:
        """Compute velocity-adaptive lookahead distance.

        Higher speeds → longer lookahead for smoother tracking
        Lower speeds → shorter lookahead for tighter control

        Args:
            velocity: Current velocity (m/s)

        Returns:
            Adaptive lookahead distance (meters), clamped to [min, max]
        """
        if not self.adaptive:
            return self.base_lookahead_distance

        lookahead = self.lookahead_time * abs(velocity) + self.lookahead_offset
        return max(self.min_lookahead, min(self.max_lookahead, lookahead))

    def compute_speed(self, data: DrivingData) -> float:
        """Speed command from the segment speed and a constant-deceleration stop profile."""
        stopping_speed = math.sqrt(2.0 * self.max_deceleration * max(0.0, data.remaining_distance))
        return min(data.max_speed, stopping_speed)

    def is_goal_reached(self, path: Path, data: DrivingData) -> bool:
        """True once the final segment is active and within goal tolerance of its end."""
        return path.on_last_segment and data.remaining_distance <= self.goal_tolerance

    def compute_control(self, state: Dict[str, float], path: Path) -> Tuple[float, float, DrivingData]:
        """Compute velocity commands using the pure pursuit algorithm.

        Args:
            state: Dictionary containing:
                - x: Current x position (m)
                - y: Current y position (m)
                - theta: Current heading angle (rad)
                - v: Current forward velocity (m/s), optional
            path: Path to track. Retires segments as a side effect.

        Returns:
            Tuple of (v_cmd, omega_cmd, data) where:
                v_cmd: Linear velocity command (m/s)
                omega_cmd: Angular velocity command (rad/s)
                data: DrivingData returned by the path
        """
        current_x = state["x"]
        current_y = state["y"]
        current_theta = state["theta"]

        self.lookahead_distance = self.compute_adaptive_lookahead(state.get("v", 0.0))
        data = path.get_look_ahead_point(Point2D(current_x, current_y), self.lookahead_distance)
        self.last_data = data

        if self.is_goal_reached(path, data):
            return 0.0, 0.0, data

        v_cmd = self.compute_speed(data)

        target = data.look_ahead_point
        angle_to_goal = math.atan2(target.y - current_y, target.x - current_x)

        # Heading error normalized to [-pi, pi]
        alpha = angle_to_goal - current_theta
        alpha = math.atan2(math.sin(alpha), math.cos(alpha))

        actual_distance = math.hypot(target.x - current_x, target.y - current_y)

        if actual_distance > 0.01:  # Avoid division by zero
            # Curvature formula: kappa = 2*sin(alpha)/L
            curvature = 2.0 * math.sin(alpha) / actual_distance
            omega_cmd = v_cmd * curvature
        else:
            omega_cmd = 0.0

        return v_cmd, omega_cmd, data
