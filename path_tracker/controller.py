"""Path tracking controller combining PID speed control and pure pursuit steering.

This module provides the orchestration layer that sits between a path planner
and an actuation interface:
- Odometry updates refresh the cached robot state and produce no output
- Each path update runs one control cycle and yields one VelocityCommand
- Pending parameter updates are applied at the start of the next cycle

The controller is reactive and has no timers or threads of its own. Callers
must deliver events one at a time.
"""

import logging
from typing import Dict, Optional

from .config import DEFAULT_ROBOT_FRAME, DEFAULT_WORLD_FRAME, HEADING_GAIN
from .errors import EmptyPathError
from .follower import heading_error, select_target
from .model import Path, PathPoint, Pose2D, Velocity, VelocityCommand
from .parameters import ControllerConfig, ParameterStore
from .pid import PIDController


class PathTrackingController:
    """Closed-loop path tracker producing one velocity command per path update.

    Attributes:
        pose: Latest cached robot pose (neutral pose until odometry arrives)
        velocity: Latest cached robot velocity (zero until odometry arrives)
        world_frame_id: Frame of the cached pose, stored for collaborators
        robot_frame_id: Robot body frame, stored for collaborators
        pid: Speed regulator, persists for the controller's lifetime
        parameters: Store holding live-tunable configuration
        heading_gain: Proportional gain on the heading error
        target_speed: Speed setpoint applied from the last taken configuration
        lookahead_distance: Lookahead applied from the last taken configuration
        last_target: Target point selected by the most recent cycle
        last_heading_error: Heading error of the most recent cycle
    """

    def __init__(
        self,
        parameters: Optional[ParameterStore] = None,
        pid: Optional[PIDController] = None,
        heading_gain: float = HEADING_GAIN,
    ) -> None:
        """Initialize the controller.

        Args:
            parameters: Parameter store to read tunables from. A store seeded
                with the default ControllerConfig is created if omitted.
            pid: Speed regulator. A PIDController with the default interval
                and output bounds is created if omitted.
            heading_gain: Heading error gain. Default: 1.9
        """
        self.parameters = parameters if parameters is not None else ParameterStore()

        config = self.parameters.current
        self.pid = pid if pid is not None else PIDController(kp=config.kp, ki=config.ki, kd=config.kd)
        self.heading_gain = heading_gain

        # Local copies of the non-PID tunables
        self.target_speed: float = config.target_speed
        self.lookahead_distance: float = config.lookahead_distance

        # Neutral robot state until the first odometry update
        self.pose = Pose2D()
        self.velocity = Velocity()
        self.world_frame_id: str = DEFAULT_WORLD_FRAME
        self.robot_frame_id: str = DEFAULT_ROBOT_FRAME

        self.last_target: Optional[PathPoint] = None
        self.last_heading_error: float = 0.0

    def on_odometry_update(
        self,
        pose: Pose2D,
        velocity: Velocity,
        world_frame_id: str,
        robot_frame_id: str,
    ) -> None:
        """Cache the latest robot state. Frame ids are stored, not interpreted."""
        self.pose = pose
        self.velocity = velocity
        self.world_frame_id = world_frame_id
        self.robot_frame_id = robot_frame_id

    def apply_pending_parameters(self) -> Optional[ControllerConfig]:
        """Apply a pending configuration, if any.

        Returns:
            The configuration that was applied, or None
        """
        config = self.parameters.take_pending()
        if config is None:
            return None

        self.pid.update_settings(config.kp, config.ki, config.kd)
        self.target_speed = config.target_speed
        self.lookahead_distance = config.lookahead_distance
        logging.debug(
            f"Applied parameters: target_speed={config.target_speed:.3f}, "
            f"Kp={config.kp:.3f}, Ki={config.ki:.3f}, Kd={config.kd:.3f}, "
            f"lookahead={config.lookahead_distance:.3f}"
        )
        return config

    def on_path_update(self, path: Path) -> VelocityCommand:
        """Run one control cycle against the just-received path.

        Args:
            path: Ordered path points, front-to-back

        Returns:
            The velocity command for this path update

        Raises:
            EmptyPathError: If the path has no points. No state is changed
                and no command is produced.
        """
        if len(path) == 0:
            raise EmptyPathError()

        self.apply_pending_parameters()

        # Speed loop
        current_speed = self.velocity.speed
        linear_speed = self.pid.calculate(self.target_speed, current_speed)

        # Steering loop
        position = self.pose.position
        target = select_target(position, path, self.lookahead_distance)
        yaw_error = heading_error(position, self.pose.yaw, target)
        angular_rate = self.heading_gain * yaw_error

        self.last_target = target
        self.last_heading_error = yaw_error

        return VelocityCommand(linear_speed=linear_speed, angular_rate=angular_rate)

    def diagnostics(self) -> Dict[str, float]:
        """Get diagnostic information about the most recent control cycle.

        Returns:
            Dictionary with speed loop state, the selected target and the
            heading error. Target coordinates are NaN before the first cycle.
        """
        target = self.last_target
        data = {
            "target_speed": self.target_speed,
            "current_speed": self.velocity.speed,
            "lookahead_distance": self.lookahead_distance,
            "target_x": target.x if target is not None else float("nan"),
            "target_y": target.y if target is not None else float("nan"),
            "heading_error": self.last_heading_error,
        }
        data.update(self.pid.get_diagnostics())
        return data
