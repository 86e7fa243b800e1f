"""Configuration parameters for the path tracking controller.

This module centralizes all configuration parameters including:
- PID speed regulator constants
- Pure pursuit steering constants
- Default tunables (overridable at runtime through the ParameterStore)
- Coordinate frame defaults
- Visualization and terminal colors
- WebSocket connection parameters

Values marked as defaults seed the initial ControllerConfig; the remaining
constants are fixed design values.
"""

# ============================================================================
# PID Speed Regulator
# ============================================================================

PID_DT = 0.1
"""Fixed PID integration interval (seconds).

Used for both the integral and derivative terms regardless of the actual
time elapsed between control cycles. The interval is not measured, so the
effective gains drift if path updates arrive at a different rate.
"""

PID_OUTPUT_MIN = -1.0
"""Lower bound of the linear speed command (m/s)."""

PID_OUTPUT_MAX = 1.0
"""Upper bound of the linear speed command (m/s)."""


# ============================================================================
# Pure Pursuit Steering
# ============================================================================

DEFAULT_LOOKAHEAD_DISTANCE = 1.5
"""Default pure pursuit lookahead distance (meters).

The first path point at least this far from the robot becomes the steering
target. Must be strictly positive.
"""

HEADING_GAIN = 1.9
"""Proportional gain applied to the heading error (1/s).

angular_rate = HEADING_GAIN * heading_error

Not part of the tunable configuration: there is no integral or derivative
term on heading.
"""


# ============================================================================
# Default Tunables
# ============================================================================

DEFAULT_TARGET_SPEED = 0.5
"""Default forward speed setpoint (m/s). Must be non-negative."""

DEFAULT_KP = 0.5
"""Default proportional gain of the speed loop."""

DEFAULT_KI = 0.2
"""Default integral gain of the speed loop."""

DEFAULT_KD = 0.2
"""Default derivative gain of the speed loop."""


# ============================================================================
# Coordinate Frames
# ============================================================================

DEFAULT_WORLD_FRAME = "world"
"""World frame id assumed until the first odometry message arrives."""

DEFAULT_ROBOT_FRAME = "base_link"
"""Robot body frame id assumed until the first odometry message arrives."""


# ============================================================================
# Visualization Colors
# ============================================================================

TRACKER_ORANGE = "#f74823"
"""Primary color - measured data and actual trajectory."""

TRACKER_BLUE = "#2374f7"
"""Secondary color - setpoints, targets and the planned path."""

TRACKER_TAUPE = "#686a5f"
"""Neutral color for guides and grids."""

# Terminal color codes (ANSI escape sequences)
TERM_ORANGE = "\033[38;2;247;72;35m"
"""Terminal color code for orange (RGB: 247, 72, 35)."""

TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# WebSocket Configuration
# ============================================================================

WS_URI = "ws://localhost:8765"
"""WebSocket server URI carrying odometry, path and configuration events."""

WS_RETRY_DELAY_SECONDS = 1
"""Initial retry delay for failed WebSocket connections (seconds)."""

WS_MAX_RETRY_DELAY_SECONDS = 60
"""Maximum retry delay with exponential backoff (seconds)."""

WS_TIMEOUT_SECONDS = 5.0
"""Timeout for WebSocket message reception (seconds)."""
