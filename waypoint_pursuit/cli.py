"""Command line interface for path flattening and tracking simulation.

Commands:
- flatten:  load a path definition, flatten it, write the waypoints CSV
- simulate: flatten a path definition and drive it with pure pursuit
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    DEFAULT_FLATTEN_STEP,
    FOLLOWER_BASE_LOOKAHEAD,
    SIM_DT,
    SIM_MAX_STEPS,
    TERM_BLUE,
    TERM_RESET,
)
from .data_collector import DataCollector, write_waypoints
from .errors import PathError
from .follower import PurePursuitFollower
from .loader import load_definition
from .path import Path as SegmentPath
from .simulation import SimulationResult, check_settings, simulate
from .telemetry import TelemetryPublisher


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    INFO messages are shown bare for clean console output; WARNING, ERROR and
    DEBUG keep the timestamp and level.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="waypoint_pursuit",
        description="Bezier path flattening and pure pursuit tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Flatten a path definition to CSV
  python -m waypoint_pursuit flatten paths/s_curve.json --output waypoints.csv

  # Simulate tracking and plot the run
  python -m waypoint_pursuit simulate paths/s_curve.json --plot

  # Stream tracking telemetry to a WebSocket server
  python -m waypoint_pursuit simulate paths/s_curve.json --telemetry ws://localhost:8765
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    flatten_parser = subparsers.add_parser("flatten", help="Flatten a path definition to waypoints")
    flatten_parser.add_argument("definition", type=str, help="Path definition JSON file")
    flatten_parser.add_argument(
        "--step",
        type=float,
        default=None,
        help=f"Flattening step in (0, 1] (default: from file, else {DEFAULT_FLATTEN_STEP})",
    )
    flatten_parser.add_argument(
        "--output", type=str, default="waypoints.csv", help="Output CSV (default: waypoints.csv)"
    )
    flatten_parser.add_argument("--plot", action="store_true", help="Show the flattened path")
    flatten_parser.add_argument("--save", type=str, default=None, help="Save the path plot as PNG")

    sim_parser = subparsers.add_parser("simulate", help="Simulate pure pursuit tracking")
    sim_parser.add_argument("definition", type=str, help="Path definition JSON file")
    sim_parser.add_argument(
        "--lookahead",
        type=float,
        default=FOLLOWER_BASE_LOOKAHEAD,
        help=f"Base lookahead distance in meters (default: {FOLLOWER_BASE_LOOKAHEAD})",
    )
    sim_parser.add_argument(
        "--fixed-lookahead", action="store_true", help="Disable velocity-adaptive lookahead"
    )
    sim_parser.add_argument(
        "--dt", type=float, default=SIM_DT, help=f"Control tick in seconds (default: {SIM_DT})"
    )
    sim_parser.add_argument(
        "--max-steps",
        type=int,
        default=SIM_MAX_STEPS,
        help=f"Maximum number of ticks (default: {SIM_MAX_STEPS})",
    )
    sim_parser.add_argument(
        "--output-dir", type=str, default=".", help="Base directory for results (default: .)"
    )
    sim_parser.add_argument("--plot", action="store_true", help="Plot the tracking run")
    sim_parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (plots are still saved to the run directory)",
    )
    sim_parser.add_argument(
        "--telemetry", type=str, default=None, help="WebSocket URI to stream tracking frames to"
    )
    return parser


def run_flatten(args: argparse.Namespace) -> None:
    definition = load_definition(args.definition)
    if args.step is not None:
        definition.step = args.step
    path = definition.build_path()

    output_path = Path(args.output)
    write_waypoints(path, output_path)
    logging.info(
        f"{TERM_BLUE}✓ Flattened {len(definition.control_points)} control points into "
        f"{len(path.all_segments)} segments ({path.total_distance:.3f}m) -> {output_path}{TERM_RESET}"
    )
    path.describe()

    if args.plot or args.save:
        import matplotlib.pyplot as plt

        from .visualization import plot_path

        plot_path(path, definition.control_points, save_path=Path(args.save) if args.save else None)
        if args.plot:
            plt.show()


async def _simulate_with_telemetry(
    path: SegmentPath,
    follower: PurePursuitFollower,
    publisher: TelemetryPublisher,
    args: argparse.Namespace,
    collector: DataCollector,
) -> SimulationResult:
    path.add_observer(publisher)
    sender = asyncio.create_task(publisher.run())
    try:
        return await asyncio.to_thread(
            simulate,
            path,
            follower,
            dt=args.dt,
            max_steps=args.max_steps,
            on_tick=collector.log_tracking,
        )
    finally:
        publisher.stop()
        await sender
        path.remove_observer(publisher)


def run_simulate(args: argparse.Namespace) -> SimulationResult:
    definition = load_definition(args.definition)
    path = definition.build_path()
    follower = PurePursuitFollower(lookahead_distance=args.lookahead, adaptive=not args.fixed_lookahead)
    check_settings(args.dt, args.max_steps)
    publisher = TelemetryPublisher(args.telemetry) if args.telemetry else None

    logging.info(
        f"{TERM_BLUE}Tracking {path.total_distance:.3f}m path "
        f"({len(path.all_segments)} segments){TERM_RESET}"
    )

    with DataCollector(output_dir=args.output_dir) as collector:
        collector.log_waypoints(path)
        if publisher is not None:
            result = asyncio.run(_simulate_with_telemetry(path, follower, publisher, args, collector))
        else:
            result = simulate(
                path, follower, dt=args.dt, max_steps=args.max_steps, on_tick=collector.log_tracking
            )
        run_dir = collector.run_dir

    if result.reached_goal:
        logging.info(f"{TERM_BLUE}\033[1m→ Completed in {result.duration:.2f}s{TERM_RESET}")
    else:
        logging.warning(f"Stopped after {result.duration:.2f}s without reaching the goal")

    if args.plot:
        import matplotlib.pyplot as plt

        from .visualization import plot_tracking_run

        plot_tracking_run(path, result, title=Path(args.definition).stem, save_path=run_dir / "tracking.png")
        if not args.no_show:
            plt.show()

    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "flatten":
            run_flatten(args)
        else:
            run_simulate(args)
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        return 1
    except PathError as e:
        logging.error(f"Invalid path: {e}")
        return 1
    except ValueError as e:
        logging.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
