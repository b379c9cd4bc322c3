"""Closed-loop tracking simulation.

Runs the pure pursuit follower against the differential drive model:

    state -> follower.compute_control(path) -> inverse_kinematics -> integrate_pose

until the follower reports the goal reached or the step limit is hit. Each
tick can optionally be forwarded to a callback (for CSV logging).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import numpy as np
import numpy.typing as npt

from .config import SIM_DT, SIM_MAX_STEPS, TERM_BLUE, TERM_RESET
from .follower import PurePursuitFollower
from .model import integrate_pose, inverse_kinematics
from .path import DrivingData, Path

TickCallback = Callable[[int, float, Dict[str, float], DrivingData, float, float], None]
"""Called with (tick, time, state, data, v_cmd, omega_cmd) once per simulation tick."""


@dataclass
class SimulationResult:
    """Per-tick record of a simulated tracking run.

    All arrays have one row per tick; ``trajectory`` and ``look_ahead`` are (N, 2).
    """

    time: npt.NDArray[np.float64]
    trajectory: npt.NDArray[np.float64]
    heading: npt.NDArray[np.float64]
    look_ahead: npt.NDArray[np.float64]
    remaining_distance: npt.NDArray[np.float64]
    progress: npt.NDArray[np.float64]
    v_cmd: npt.NDArray[np.float64]
    omega_cmd: npt.NDArray[np.float64]
    reached_goal: bool = False

    @property
    def steps(self) -> int:
        return len(self.time)

    @property
    def duration(self) -> float:
        return float(self.time[-1]) if len(self.time) else 0.0


@dataclass
class _Recorder:
    time: List[float] = field(default_factory=list)
    trajectory: List[tuple] = field(default_factory=list)
    heading: List[float] = field(default_factory=list)
    look_ahead: List[tuple] = field(default_factory=list)
    remaining_distance: List[float] = field(default_factory=list)
    progress: List[float] = field(default_factory=list)
    v_cmd: List[float] = field(default_factory=list)
    omega_cmd: List[float] = field(default_factory=list)

    def to_result(self, reached_goal: bool) -> SimulationResult:
        return SimulationResult(
            time=np.array(self.time, dtype=np.float64),
            trajectory=np.array(self.trajectory, dtype=np.float64).reshape(-1, 2),
            heading=np.array(self.heading, dtype=np.float64),
            look_ahead=np.array(self.look_ahead, dtype=np.float64).reshape(-1, 2),
            remaining_distance=np.array(self.remaining_distance, dtype=np.float64),
            progress=np.array(self.progress, dtype=np.float64),
            v_cmd=np.array(self.v_cmd, dtype=np.float64),
            omega_cmd=np.array(self.omega_cmd, dtype=np.float64),
            reached_goal=reached_goal,
        )


def initial_state_for(path: Path) -> Dict[str, float]:
    """Vehicle state at the path start, facing along the first segment."""
    state = {"x": path.start.x, "y": path.start.y, "theta": 0.0, "v": 0.0, "omega": 0.0}
    for segment in path.all_segments:
        if segment.length > 0.0:
            state["theta"] = segment.start.angle_to(segment.end).radians
            break
    return state


def check_settings(dt: float, max_steps: int) -> None:
    """Raise ValueError unless ``dt`` and ``max_steps`` are both positive."""
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if max_steps <= 0:
        raise ValueError(f"max_steps must be positive, got {max_steps}")


def simulate(
    path: Path,
    follower: Optional[PurePursuitFollower] = None,
    initial_state: Optional[Dict[str, float]] = None,
    dt: float = SIM_DT,
    max_steps: int = SIM_MAX_STEPS,
    on_tick: Optional[TickCallback] = None,
) -> SimulationResult:
    """Drive the kinematic model along ``path`` with pure pursuit.

    Args:
        path: Path to track. It is consumed (segments are retired).
        follower: Follower to use. Defaults to PurePursuitFollower().
        initial_state: Starting state; defaults to initial_state_for(path).
        dt: Control tick (seconds).
        max_steps: Maximum number of ticks before giving up.
        on_tick: Optional per-tick callback.

    Returns:
        SimulationResult with per-tick arrays.

    Raises:
        EmptyPathError: If ``path`` has no segments.
        ValueError: If ``dt`` or ``max_steps`` is not positive.
    """
    check_settings(dt, max_steps)

    follower = follower or PurePursuitFollower()
    state = dict(initial_state) if initial_state is not None else initial_state_for(path)
    state.setdefault("v", 0.0)

    recorder = _Recorder()
    reached_goal = False

    for tick in range(max_steps):
        current_time = tick * dt
        v_cmd, omega_cmd, data = follower.compute_control(state, path)

        recorder.time.append(current_time)
        recorder.trajectory.append((state["x"], state["y"]))
        recorder.heading.append(state["theta"])
        recorder.look_ahead.append(data.look_ahead_point.as_tuple())
        recorder.remaining_distance.append(data.remaining_distance)
        recorder.progress.append(data.progress)
        recorder.v_cmd.append(v_cmd)
        recorder.omega_cmd.append(omega_cmd)

        if on_tick is not None:
            on_tick(tick, current_time, state, data, v_cmd, omega_cmd)

        if follower.is_goal_reached(path, data):
            reached_goal = True
            logging.info(
                f"{TERM_BLUE}✓ Goal reached after {current_time:.2f}s ({tick + 1} ticks){TERM_RESET}"
            )
            break

        v_left, v_right = inverse_kinematics(v_cmd, omega_cmd)
        state = integrate_pose(state, v_left, v_right, dt)
    else:
        logging.warning(
            f"Goal not reached after {max_steps} ticks "
            f"(remaining {recorder.remaining_distance[-1]:.3f}m)"
        )

    return recorder.to_result(reached_goal)
