"""Configuration parameters for the waypoint pursuit system.

This module centralizes all configuration parameters including:
- Curve flattening and path shaping parameters
- Vehicle limits used by the kinematic model
- Pure pursuit follower gains
- Simulation settings
- Telemetry (WebSocket) parameters
- Visualization settings

All parameters are documented with their purpose and valid ranges.
"""

# ============================================================================
# Path Planning Parameters
# ============================================================================

DEFAULT_FLATTEN_STEP = 0.05
"""Default Bezier flattening step (range: (0, 1]).

Each control-point pair produces ceil(1 / step) samples.
0.05 gives 20 segments per curve span, fine enough for pure pursuit at
lookahead distances above ~0.5m.
"""

MINIMUM_TURNING_RADIUS = 0.5
"""Radius used by the end-heading transform to place auxiliary points (meters).

The approach segment ends this far behind the final waypoint along the
requested heading.
"""


# ============================================================================
# Vehicle Parameters (Differential Drive)
# ============================================================================

WHEELBASE = 0.5
"""Distance between left and right wheels (meters)."""

V_MIN = -2.0
"""Minimum wheel velocity (m/s). Hardware limit."""

V_MAX = 2.0
"""Maximum wheel velocity (m/s). Hardware limit."""

A_MAX = 1.0
"""Maximum deceleration used to shape the approach speed profile (m/s²).

v_cmd = min(segment max speed, sqrt(2 * A_MAX * remaining_distance))
"""


# ============================================================================
# Path Following Parameters (Pure Pursuit)
# ============================================================================

FOLLOWER_BASE_LOOKAHEAD = 0.8
"""Base lookahead distance for pure pursuit (meters).

Used when adaptive lookahead is disabled.

- Too small (<0.5m) = oscillations and unstable tracking
- Too large (>1.5m) = cuts corners, poor path following
"""

FOLLOWER_LOOKAHEAD_TIME = 0.8
"""Time-based lookahead gain for adaptive mode (seconds).

Lookahead distance = FOLLOWER_LOOKAHEAD_TIME * |v| + FOLLOWER_LOOKAHEAD_OFFSET
"""

FOLLOWER_LOOKAHEAD_OFFSET = 0.3
"""Minimum base lookahead offset (meters).

Ensures a non-zero lookahead at standstill.
"""

FOLLOWER_MIN_LOOKAHEAD = 0.5
"""Minimum adaptive lookahead distance (meters)."""

FOLLOWER_MAX_LOOKAHEAD = 2.0
"""Maximum adaptive lookahead distance (meters)."""

FOLLOWER_GOAL_TOLERANCE = 0.05
"""Remaining distance below which the goal counts as reached (meters).

Only checked once the tracker is on the final segment.
"""


# ============================================================================
# Simulation Parameters
# ============================================================================

SIM_DT = 0.05
"""Control tick of the closed-loop simulation (seconds). 20 Hz."""

SIM_MAX_STEPS = 4000
"""Upper bound on simulation ticks (200 seconds at SIM_DT)."""


# ============================================================================
# Visualization Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary color - driven trajectory and measurements."""

PLOT_BLUE = "#2374f7"
"""Secondary color - reference path."""

PLOT_CREAM = "#fffdee"
"""Light color for text and labels on dark backgrounds."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides, grids, and secondary elements."""

PLOT_YELLOW_ORANGE = "#ffa726"
"""Accent color for lookahead points and control handles."""

PLOT_DARK_BLUE = "#0d1b2a"
"""Dark background color."""

# Terminal color codes (ANSI escape sequences)
TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# Telemetry Configuration
# ============================================================================

WS_URI = "ws://localhost:8765"
"""Default WebSocket URI for tracking telemetry."""

WS_RETRY_DELAY_SECONDS = 1
"""Initial retry delay for failed WebSocket connections (seconds)."""

WS_MAX_RETRY_DELAY_SECONDS = 60
"""Maximum retry delay with exponential backoff (seconds)."""

WS_POLL_INTERVAL_SECONDS = 0.02
"""Sleep between checks for pending telemetry frames (seconds).

Also bounds how long a retry wait takes to notice stop().
"""

WS_QUEUE_SIZE = 256
"""Maximum number of pending telemetry frames. Oldest frames are dropped."""
