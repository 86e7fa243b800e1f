"""JSON wire format for the path tracker WebSocket channel.

Incoming messages are JSON objects keyed by ``message_type``:

- ``"odometry"``: shaped like nav_msgs/Odometry::

    {"message_type": "odometry",
     "header": {"frame_id": "world"},
     "child_frame_id": "base_link",
     "pose": {"position": {"x": 0, "y": 0, "z": 0},
              "orientation": {"x": 0, "y": 0, "z": 0, "w": 1}},
     "twist": {"linear": {"x": 0, "y": 0, "z": 0}}}

- ``"path"``: shaped like nav_msgs/Path; each element of ``poses`` holds a
  ``position`` directly or inside a ``pose`` wrapper.
- ``"config"``: ``speed_target``, ``PID_Kp``, ``PID_Ki``, ``PID_Kd`` and
  ``lookahead_distance``; missing keys keep their current value.

The single outgoing message is ``"cmd_vel"``, shaped like geometry_msgs/Twist.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from .config import DEFAULT_ROBOT_FRAME, DEFAULT_WORLD_FRAME
from .errors import PathTrackerError
from .model import PathPoint, Pose2D, Velocity, VelocityCommand
from .parameters import ControllerConfig

ODOMETRY = "odometry"
PATH = "path"
CONFIG = "config"
CMD_VEL = "cmd_vel"

# Wire key -> ControllerConfig field
CONFIG_KEYS = {
    "speed_target": "target_speed",
    "PID_Kp": "kp",
    "PID_Ki": "ki",
    "PID_Kd": "kd",
    "lookahead_distance": "lookahead_distance",
}


class MessageError(PathTrackerError, ValueError):
    """Raised for messages that do not match the wire format."""


@dataclass(frozen=True)
class OdometryMessage:
    pose: Pose2D
    velocity: Velocity
    world_frame_id: str
    robot_frame_id: str


def _vector(data: Mapping[str, Any], keys: str = "xyz") -> List[float]:
    if not isinstance(data, Mapping):
        raise MessageError(f"Expected an object with keys {list(keys)}, got {type(data).__name__}")
    return [float(data.get(k, 0.0)) for k in keys]


def decode(message: Any) -> Dict[str, Any]:
    """Decode a raw str/bytes message into a dict.

    Raises:
        MessageError: If the payload is not a JSON object with a message_type
    """
    if isinstance(message, bytes):
        message = message.decode("utf-8")
    try:
        data = json.loads(message)
    except json.JSONDecodeError as e:
        raise MessageError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict) or "message_type" not in data:
        raise MessageError("Message must be a JSON object with a 'message_type'")
    return data


def parse_odometry(data: Mapping[str, Any]) -> OdometryMessage:
    """Extract pose, linear velocity and frame ids from an odometry message."""
    try:
        pose_data = data["pose"]
        x, y, z = _vector(pose_data["position"])
        qx, qy, qz, qw = _vector(pose_data.get("orientation", {"w": 1.0}), "xyzw")
        vx, vy, vz = _vector(data.get("twist", {}).get("linear", {}))
    except (KeyError, TypeError, AttributeError) as e:
        raise MessageError(f"Malformed odometry message: {e}") from e

    header = data.get("header") or {}
    return OdometryMessage(
        pose=Pose2D.from_quaternion(x, y, z, qx, qy, qz, qw),
        velocity=Velocity(vx, vy, vz),
        world_frame_id=str(header.get("frame_id") or DEFAULT_WORLD_FRAME),
        robot_frame_id=str(data.get("child_frame_id") or DEFAULT_ROBOT_FRAME),
    )


def parse_path(data: Mapping[str, Any]) -> List[PathPoint]:
    """Extract the ordered path points from a path message.

    An empty ``poses`` list is returned as an empty path; rejecting it is the
    controller's job.
    """
    poses = data.get("poses")
    if not isinstance(poses, list):
        raise MessageError("Path message must carry a 'poses' list")

    points = []
    for pose in poses:
        try:
            if "pose" in pose:
                pose = pose["pose"]
            x, y, z = _vector(pose["position"])
        except (KeyError, TypeError) as e:
            raise MessageError(f"Malformed path pose: {e}") from e
        points.append(PathPoint(x, y, z))
    return points


def parse_config(data: Mapping[str, Any], current: ControllerConfig) -> ControllerConfig:
    """Build a complete ControllerConfig from a config message.

    Keys absent from the message keep the value of ``current``. The result is
    not validated here; ParameterStore.push does that.
    """
    values = {
        "target_speed": current.target_speed,
        "kp": current.kp,
        "ki": current.ki,
        "kd": current.kd,
        "lookahead_distance": current.lookahead_distance,
    }
    try:
        for wire_key, field_name in CONFIG_KEYS.items():
            if wire_key in data:
                values[field_name] = float(data[wire_key])
    except (TypeError, ValueError) as e:
        raise MessageError(f"Malformed config message: {e}") from e
    return ControllerConfig(**values)


def encode_command(command: VelocityCommand) -> str:
    """Encode a velocity command as a cmd_vel JSON message."""
    return json.dumps(
        {
            "message_type": CMD_VEL,
            "linear": {"x": command.linear_speed, "y": 0.0, "z": 0.0},
            "angular": {"x": 0.0, "y": 0.0, "z": command.angular_rate},
        }
    )
