"""
Differential drive kinematic model.

Converts between body velocities (v, omega) and wheel velocities, and
integrates the vehicle pose for the closed-loop simulation.
"""

import math
from typing import Dict

from .config import V_MAX, V_MIN, WHEELBASE


def inverse_kinematics(v_cmd: float, omega_cmd: float) -> tuple[float, float]:
    """
    Compute wheel velocities from desired linear and angular velocities.

    For a differential drive vehicle:
        v_left = v - (L/2) * omega
        v_right = v + (L/2) * omega

    where L is the wheelbase (distance between wheels).

    Args:
        v_cmd: Desired linear velocity of the vehicle center (m/s)
        omega_cmd: Desired angular velocity (rad/s), positive is counter-clockwise

    Returns:
        tuple[float, float]: (v_left, v_right) wheel velocities in m/s,
                            clamped to the range [V_MIN, V_MAX]

    Example:
        >>> v_left, v_right = inverse_kinematics(1.0, 0.5)
        >>> # Vehicle moves forward at 1 m/s while turning left
    """
    v_left = v_cmd - (WHEELBASE / 2.0) * omega_cmd
    v_right = v_cmd + (WHEELBASE / 2.0) * omega_cmd

    # Clamp velocities to respect actuator limits
    v_left = max(V_MIN, min(V_MAX, v_left))
    v_right = max(V_MIN, min(V_MAX, v_right))

    return v_left, v_right


def forward_kinematics(v_left: float, v_right: float) -> tuple[float, float]:
    """Recover body velocities (v, omega) from wheel velocities."""
    v = (v_left + v_right) / 2.0
    omega = (v_right - v_left) / WHEELBASE
    return v, omega


def integrate_pose(state: Dict[str, float], v_left: float, v_right: float, dt: float) -> Dict[str, float]:
    """Advance the vehicle state by one tick.

    Uses exact arc integration for constant wheel speeds over ``dt``; straight
    motion is handled separately when omega is negligible.

    Args:
        state: Dictionary with 'x', 'y', 'theta' (and optionally 'v').
        v_left: Left wheel velocity (m/s).
        v_right: Right wheel velocity (m/s).
        dt: Time step (seconds).

    Returns:
        New state dictionary with 'x', 'y', 'theta', 'v', 'omega'.
    """
    v, omega = forward_kinematics(v_left, v_right)
    x, y, theta = state["x"], state["y"], state["theta"]

    if abs(omega) < 1e-9:
        x += v * math.cos(theta) * dt
        y += v * math.sin(theta) * dt
    else:
        radius = v / omega
        new_theta = theta + omega * dt
        x += radius * (math.sin(new_theta) - math.sin(theta))
        y -= radius * (math.cos(new_theta) - math.cos(theta))
        theta = new_theta

    # Keep heading in [-pi, pi]
    theta = math.atan2(math.sin(theta), math.cos(theta))

    return {"x": x, "y": y, "theta": theta, "v": v, "omega": omega}
