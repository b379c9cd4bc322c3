"""Data collection and CSV logging for path tracking runs.

This module provides CSV data logging for:
- Flattened waypoints (the planned path)
- Tracking samples (pose, lookahead point, progress, commands) per tick
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .config import TERM_BLUE, TERM_RESET
from .path import DrivingData
from .path import Path as SegmentPath

TRACKING_HEADER = [
    "tick",
    "time",
    "x",
    "y",
    "theta",
    "look_ahead_x",
    "look_ahead_y",
    "closest_x",
    "closest_y",
    "remaining_distance",
    "max_speed",
    "progress",
    "v_cmd",
    "omega_cmd",
]

WAYPOINT_HEADER = ["index", "x", "y", "max_speed"]


def write_waypoints(path: SegmentPath, output_path: Path) -> None:
    """Write every vertex of ``path`` to a CSV file.

    The start vertex gets the first segment's speed; every later vertex gets
    the speed of the segment ending there.
    """
    segments = path.all_segments
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(WAYPOINT_HEADER)
        start_speed = segments[0].max_speed if segments else 0.0
        writer.writerow([0, path.start.x, path.start.y, start_speed])
        for index, segment in enumerate(segments, start=1):
            writer.writerow([index, segment.end.x, segment.end.y, segment.max_speed])


class DataCollector:
    """Manages CSV file creation and logging for a tracking run.

    Attributes:
        run_dir: Directory path for this run's output files.
        tracking_csv_file: File handle for tracking samples CSV.
        waypoints_output_path: Path of the waypoints CSV.
        tracking_output_path: Path of the tracking samples CSV.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory. Can also be set via RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.tracking_csv_file: Optional[TextIO] = None
        self.tracking_csv_writer: Any = None

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # Create timestamped directory: results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / "results" / f"run_{timestamp}"

        self.waypoints_output_path: Path = self.run_dir / "waypoints.csv"
        self.tracking_output_path: Path = self.run_dir / "tracking.csv"

    def setup(self) -> None:
        """Create the run directory and open the tracking CSV with its header.

        Must be called before writing data.
        """
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.tracking_csv_file = open(self.tracking_output_path, "w", newline="")
        self.tracking_csv_writer = csv.writer(self.tracking_csv_file)
        self.tracking_csv_writer.writerow(TRACKING_HEADER)
        self.tracking_csv_file.flush()

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}{TERM_RESET}")

    def log_waypoints(self, path: SegmentPath) -> None:
        """Log the planned path vertices to waypoints.csv."""
        write_waypoints(path, self.waypoints_output_path)

    def log_tracking(
        self,
        tick: int,
        timestamp: float,
        state: Dict[str, float],
        data: DrivingData,
        v_cmd: float,
        omega_cmd: float,
    ) -> None:
        """Log one tracking sample to CSV.

        Signature matches the simulation tick callback.

        Args:
            tick: Tick index.
            timestamp: Simulation time (seconds).
            state: Vehicle state with 'x', 'y', 'theta'.
            data: Lookahead result for this tick.
            v_cmd: Linear velocity command (m/s).
            omega_cmd: Angular velocity command (rad/s).
        """
        self.tracking_csv_writer.writerow(
            [
                tick,
                timestamp,
                state["x"],
                state["y"],
                state["theta"],
                data.look_ahead_point.x,
                data.look_ahead_point.y,
                data.closest_point.x,
                data.closest_point.y,
                data.remaining_distance,
                data.max_speed,
                data.progress,
                v_cmd,
                omega_cmd,
            ]
        )
        if self.tracking_csv_file:
            self.tracking_csv_file.flush()

    def cleanup(self) -> None:
        """Close the CSV file and log the output location."""
        if self.tracking_csv_file:
            self.tracking_csv_file.close()
            self.tracking_csv_file = None

        logging.info(f"{TERM_BLUE}✓ Saved tracking data to {self.run_dir}{TERM_RESET}")

    def __enter__(self) -> "DataCollector":
        """Context manager entry point.

        Returns:
            Self reference for use in with statement.
        """
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit point - ensures cleanup is called."""
        self.cleanup()
