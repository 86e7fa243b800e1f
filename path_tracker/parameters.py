"""Live-tunable controller parameters.

Any configuration channel (command-line flags, a ``config`` WebSocket message,
a polling loop) hands a complete ControllerConfig to ParameterStore.push. The
controller picks up the pending configuration at the start of its next control
cycle.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Optional

from .config import (
    DEFAULT_KD,
    DEFAULT_KI,
    DEFAULT_KP,
    DEFAULT_LOOKAHEAD_DISTANCE,
    DEFAULT_TARGET_SPEED,
)
from .errors import InvalidConfigError


@dataclass(frozen=True)
class ControllerConfig:
    """Complete set of tunables, replaced wholesale on every update."""

    target_speed: float = DEFAULT_TARGET_SPEED
    kp: float = DEFAULT_KP
    ki: float = DEFAULT_KI
    kd: float = DEFAULT_KD
    lookahead_distance: float = DEFAULT_LOOKAHEAD_DISTANCE

    def validate(self) -> None:
        """Check the configuration constraints.

        Raises:
            InvalidConfigError: On a non-finite field, a negative target speed
                or a non-positive lookahead distance
        """
        for name in ("target_speed", "kp", "ki", "kd", "lookahead_distance"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidConfigError(f"{name} must be finite, got {value}")
        if self.target_speed < 0:
            raise InvalidConfigError(
                f"target_speed must be non-negative, got {self.target_speed}"
            )
        if self.lookahead_distance <= 0:
            raise InvalidConfigError(
                f"lookahead_distance must be positive, got {self.lookahead_distance}"
            )


class ParameterStore:
    """Holds the latest accepted ControllerConfig and a pending-update flag.

    Pushes between two control cycles coalesce: only the latest survives.

    Attributes:
        current: Latest accepted configuration
        has_pending: True while an accepted push has not been taken yet
    """

    def __init__(self, initial: Optional[ControllerConfig] = None) -> None:
        """Initialize the store.

        Args:
            initial: Starting configuration. Defaults to ControllerConfig().
                It is validated and marked pending so the first control cycle
                applies it.

        Raises:
            InvalidConfigError: If the initial configuration is invalid
        """
        if initial is None:
            initial = ControllerConfig()
        initial.validate()

        self._lock = threading.Lock()
        self._current: ControllerConfig = initial
        self._dirty: bool = True

    @property
    def current(self) -> ControllerConfig:
        with self._lock:
            return self._current

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._dirty

    def push(self, config: ControllerConfig) -> None:
        """Store a new configuration and mark it pending.

        Raises:
            InvalidConfigError: If the configuration is invalid. The previous
                configuration and pending state are kept.
        """
        config.validate()
        with self._lock:
            self._current = config
            self._dirty = True
        logging.debug(f"Accepted configuration update: {config}")

    def take_pending(self) -> Optional[ControllerConfig]:
        """Return and clear the pending configuration, or None if none."""
        with self._lock:
            if not self._dirty:
                return None
            self._dirty = False
            return self._current
