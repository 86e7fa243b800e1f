"""Data collection and CSV logging for path tracker runs.

This module provides CSV data logging for:
- Odometry (cached robot pose and velocity)
- Velocity commands with the selected lookahead target
- PID diagnostics (gains, integral, previous error, output)
- Configuration updates accepted or rejected by the ParameterStore
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .config import TERM_BLUE, TERM_RESET
from .model import Pose2D, Velocity, VelocityCommand
from .parameters import ControllerConfig

ODOMETRY_HEADER = ["timestamp", "x", "y", "z", "yaw", "v_x", "v_y", "v_z", "speed"]
COMMAND_HEADER = [
    "timestamp",
    "path_length",
    "target_x",
    "target_y",
    "heading_error",
    "target_speed",
    "current_speed",
    "linear_speed",
    "angular_rate",
]
PID_HEADER = ["timestamp", "kp", "ki", "kd", "integral", "prev_error", "output"]
CONFIG_HEADER = [
    "timestamp",
    "target_speed",
    "kp",
    "ki",
    "kd",
    "lookahead_distance",
    "accepted",
]


class DataCollector:
    """Manages CSV file creation and logging for path tracker data.

    Attributes:
        run_dir: Directory path for this run's output files.
        odometry_output_path: Path of the odometry CSV.
        command_output_path: Path of the velocity command CSV.
        pid_output_path: Path of the PID diagnostics CSV.
        config_output_path: Path of the configuration update CSV.
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

        self._files: Dict[str, TextIO] = {}
        self._writers: Dict[str, Any] = {}

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # Create timestamped directory: results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / "results" / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.odometry_output_path: Path = self.run_dir / "odometry_data.csv"
        self.command_output_path: Path = self.run_dir / "command_data.csv"
        self.pid_output_path: Path = self.run_dir / "pid_diagnostics.csv"
        self.config_output_path: Path = self.run_dir / "config_updates.csv"

    def setup(self) -> None:
        """Initialize CSV files with headers.

        Must be called before writing data.
        """
        self._open("odometry", self.odometry_output_path, ODOMETRY_HEADER)
        self._open("command", self.command_output_path, COMMAND_HEADER)
        self._open("pid", self.pid_output_path, PID_HEADER)
        self._open("config", self.config_output_path, CONFIG_HEADER)

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}/{TERM_RESET}")

    def _open(self, key: str, path: Path, header: list) -> None:
        csv_file = open(path, "w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(header)
        csv_file.flush()
        self._files[key] = csv_file
        self._writers[key] = writer

    def _write(self, key: str, row: list) -> None:
        writer = self._writers.get(key)
        if writer is None:
            raise RuntimeError("DataCollector.setup() must be called before logging")
        writer.writerow(row)
        self._files[key].flush()

    def log_odometry(self, timestamp: float, pose: Pose2D, velocity: Velocity) -> None:
        """Log a cached odometry sample.

        Args:
            timestamp: Current time (seconds).
            pose: Robot pose.
            velocity: Robot linear velocity.
        """
        self._write(
            "odometry",
            [
                timestamp,
                pose.x,
                pose.y,
                pose.z,
                pose.yaw,
                velocity.vx,
                velocity.vy,
                velocity.vz,
                velocity.speed,
            ],
        )

    def log_command(
        self,
        timestamp: float,
        path_length: int,
        command: VelocityCommand,
        diagnostics: Dict[str, float],
    ) -> None:
        """Log one control cycle.

        Args:
            timestamp: Current time (seconds).
            path_length: Number of points in the path that triggered the cycle.
            command: Emitted velocity command.
            diagnostics: PathTrackingController.diagnostics() for the cycle,
                with keys 'target_x', 'target_y', 'heading_error',
                'target_speed', 'current_speed'.
        """
        self._write(
            "command",
            [
                timestamp,
                path_length,
                diagnostics["target_x"],
                diagnostics["target_y"],
                diagnostics["heading_error"],
                diagnostics["target_speed"],
                diagnostics["current_speed"],
                command.linear_speed,
                command.angular_rate,
            ],
        )

    def log_pid_diagnostics(self, timestamp: float, diagnostics: Dict[str, float]) -> None:
        """Log PID state after a control cycle.

        Args:
            timestamp: Current time (seconds).
            diagnostics: PIDController.get_diagnostics() output.
        """
        self._write(
            "pid",
            [
                timestamp,
                diagnostics["kp"],
                diagnostics["ki"],
                diagnostics["kd"],
                diagnostics["integral"],
                diagnostics["prev_error"],
                diagnostics["output"],
            ],
        )

    def log_config(self, timestamp: float, config: ControllerConfig, accepted: bool) -> None:
        """Log a configuration update and whether it was accepted.

        Args:
            timestamp: Current time (seconds).
            config: Configuration received from the configuration channel.
            accepted: False if the ParameterStore rejected it.
        """
        self._write(
            "config",
            [
                timestamp,
                config.target_speed,
                config.kp,
                config.ki,
                config.kd,
                config.lookahead_distance,
                int(accepted),
            ],
        )

    def cleanup(self) -> None:
        """Close all CSV files and log final output location."""
        for csv_file in self._files.values():
            csv_file.close()
        self._files.clear()
        self._writers.clear()

        logging.info(f"{TERM_BLUE}✓ Saved run data to {self.run_dir}/{TERM_RESET}")

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
