"""Pure pursuit target selection for the path tracking controller.

This module implements the steering half of the controller:
- Picks a lookahead target point on the path
- Computes the normalized heading error towards that target
"""

import math

import numpy as np

from .errors import EmptyPathError
from .model import Path, PathPoint, normalize_angle


def select_target(
    current_position: PathPoint, path: Path, lookahead_distance: float
) -> PathPoint:
    """Find the lookahead target point on the path.

    Scans the path in traversal order and returns the first point whose
    Euclidean distance from the current position is at least the lookahead
    distance. This is a linear scan, not a nearest-point projection: a path
    that folds back towards the robot can yield an earlier far point instead
    of a geometrically closer later one.

    Args:
        current_position: Current robot position
        path: Ordered path points, front-to-back
        lookahead_distance: Minimum target distance (meters)

    Returns:
        The selected path point, or the last point if every point lies
        within the lookahead distance

    Raises:
        EmptyPathError: If the path has no points
    """
    if len(path) == 0:
        raise EmptyPathError()

    points = np.array([(p.x, p.y, p.z) for p in path], dtype=float)
    origin = np.array([current_position.x, current_position.y, current_position.z])
    distances = np.linalg.norm(points - origin, axis=1)

    # First index at or beyond the lookahead distance
    reached = np.flatnonzero(distances >= lookahead_distance)
    if reached.size:
        return path[int(reached[0])]

    # If we reach end of path, return last point
    return path[-1]


def heading_error(position: PathPoint, yaw: float, target: PathPoint) -> float:
    """Compute the heading error towards a target point.

    Args:
        position: Current robot position
        yaw: Current robot heading (rad)
        target: Steering target point

    Returns:
        Bearing to the target minus the heading, normalized to [-pi, pi).
        Zero when the target coincides with the position in the plane.
    """
    dx = target.x - position.x
    dy = target.y - position.y
    if dx == 0.0 and dy == 0.0:
        return 0.0

    bearing = math.atan2(dy, dx)
    return normalize_angle(bearing - yaw)
