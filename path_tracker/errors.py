"""Exceptions raised by the path tracking controller."""


class PathTrackerError(Exception):
    """Base class for all path tracker errors."""


class EmptyPathError(PathTrackerError):
    """Raised when a control cycle is requested on a path with no points."""

    def __init__(self, message: str = "Path contains no points") -> None:
        super().__init__(message)


class InvalidConfigError(PathTrackerError, ValueError):
    """Raised when a pushed ControllerConfig violates its constraints.

    The ParameterStore keeps the previously accepted configuration when this
    is raised.
    """
