"""Path Tracker - Closed-Loop Path Following for Mobile Robots

Turns a continuously updated planned path and the robot's live pose/velocity
into a stream of velocity commands.

## Architecture Overview

### Speed Loop (pid.py)
PID regulator on forward speed with a fixed integration interval.
- Setpoint: target speed from the live configuration
- Measurement: norm of the odometry linear velocity
- Output: linear speed, clamped to [-1.0, 1.0]

### Steering Loop (follower.py)
Pure pursuit target selection.
- First path point at least the lookahead distance away (else the last point)
- Heading error towards that point, normalized to [-pi, pi)
- Output: angular rate = 1.9 * heading error

### Orchestration (controller.py)
Caches the latest odometry and runs one control cycle per path update.
Pending configuration pushed to the ParameterStore (parameters.py) is applied
at the start of the next cycle.

## Modules

- `config.py` - Design constants and defaults
- `model.py` - Pose, velocity, path and command types
- `errors.py` - Exception hierarchy
- `messages.py` - JSON wire format
- `client.py` - WebSocket client and main loop
- `data_collector.py` - CSV run logging
- `plot_results.py` - CLI for run visualization

## Quick Start

```python
from path_tracker import PathTrackingController, PathPoint, Pose2D, Velocity

controller = PathTrackingController()
controller.on_odometry_update(Pose2D(), Velocity(), "world", "base_link")
command = controller.on_path_update([PathPoint(1.0, 0.0), PathPoint(2.0, 0.0)])
```

Or connect to a WebSocket event source:
```bash
python -m path_tracker --uri ws://localhost:8765
```
"""

__version__ = "0.1.0"

from .controller import PathTrackingController
from .errors import EmptyPathError, InvalidConfigError, PathTrackerError
from .follower import heading_error, select_target
from .model import PathPoint, Pose2D, Velocity, VelocityCommand, normalize_angle
from .parameters import ControllerConfig, ParameterStore
from .pid import PIDController

__all__ = [
    "PathTrackingController",
    "PIDController",
    "ParameterStore",
    "ControllerConfig",
    "select_target",
    "heading_error",
    "normalize_angle",
    "Pose2D",
    "Velocity",
    "PathPoint",
    "VelocityCommand",
    "PathTrackerError",
    "EmptyPathError",
    "InvalidConfigError",
]
