"""
Robot state and command types for the path tracking controller.

This module provides the value types exchanged between the controller and its
collaborators, plus the orientation helpers needed to turn an odometry
quaternion into a heading.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple


def normalize_angle(angle: float) -> float:
    """
    Wrap an angle into the half-open interval [-pi, pi).

    Args:
        angle: Angle in radians, any magnitude

    Returns:
        float: Equivalent angle in [-pi, pi)

    Example:
        >>> normalize_angle(math.pi)
        -3.141592653589793
    """
    wrapped = (angle + math.pi) % (2.0 * math.pi) - math.pi
    # Float rounding can land exactly on +pi for tiny negative inputs
    if wrapped >= math.pi:
        wrapped -= 2.0 * math.pi
    return wrapped


def quaternion_to_rpy(qx: float, qy: float, qz: float, qw: float) -> Tuple[float, float, float]:
    """
    Convert an orientation quaternion into roll, pitch and yaw.

    Uses the fixed-axis (x-y-z) convention, matching the odometry source.

    Args:
        qx, qy, qz, qw: Quaternion components

    Returns:
        tuple[float, float, float]: (roll, pitch, yaw) in radians
    """
    sinr_cosp = 2.0 * (qw * qx + qy * qz)
    cosr_cosp = 1.0 - 2.0 * (qx * qx + qy * qy)
    roll = math.atan2(sinr_cosp, cosr_cosp)

    sinp = 2.0 * (qw * qy - qz * qx)
    pitch = math.asin(max(-1.0, min(1.0, sinp)))

    siny_cosp = 2.0 * (qw * qz + qx * qy)
    cosy_cosp = 1.0 - 2.0 * (qy * qy + qz * qz)
    yaw = math.atan2(siny_cosp, cosy_cosp)

    return roll, pitch, yaw


@dataclass(frozen=True)
class Pose2D:
    """Robot pose snapshot. Only x, y, z and yaw are used for control."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    @classmethod
    def from_quaternion(
        cls, x: float, y: float, z: float, qx: float, qy: float, qz: float, qw: float
    ) -> "Pose2D":
        """Build a pose from a position and an orientation quaternion."""
        roll, pitch, yaw = quaternion_to_rpy(qx, qy, qz, qw)
        return cls(x=x, y=y, z=z, roll=roll, pitch=pitch, yaw=yaw)

    @property
    def position(self) -> "PathPoint":
        return PathPoint(self.x, self.y, self.z)


@dataclass(frozen=True)
class Velocity:
    """Linear velocity vector of the robot (m/s)."""

    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0

    @property
    def speed(self) -> float:
        """Euclidean norm of the linear components (m/s)."""
        return math.sqrt(self.vx**2 + self.vy**2 + self.vz**2)


@dataclass(frozen=True)
class PathPoint:
    """A single 3D path position. Orientation is not carried."""

    x: float
    y: float
    z: float = 0.0

    def distance_to(self, other: "PathPoint") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )


Path = Sequence[PathPoint]
"""Ordered path points, front-to-back in the direction of travel."""


@dataclass(frozen=True)
class VelocityCommand:
    """Controller output: forward speed (m/s) and turn rate (rad/s)."""

    linear_speed: float = 0.0
    angular_rate: float = 0.0
