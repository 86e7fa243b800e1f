"""PID speed regulator for the path tracking controller.

This module provides the feedback controller that turns the difference between
the target forward speed and the measured speed into a clamped linear speed
command.
"""

from typing import Dict

from .config import PID_DT, PID_OUTPUT_MAX, PID_OUTPUT_MIN


class PIDController:
    """Scalar PID feedback controller with a fixed integration interval.

    Control law:
        error = setpoint - measurement
        integral += error * dt
        derivative = (error - previous_error) / dt
        output = clamp(kp * error + ki * integral + kd * derivative, min, max)

    The interval ``dt`` is fixed at construction and is not measured between
    calls. Gain updates keep the integral and previous error, so the new gains
    act on the existing state from the next call.

    Attributes:
        dt: Integration interval (seconds)
        output_min: Lower output bound
        output_max: Upper output bound
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        integral: Accumulated error integral
        prev_error: Error seen by the previous calculate call
    """

    def __init__(
        self,
        dt: float = PID_DT,
        output_max: float = PID_OUTPUT_MAX,
        output_min: float = PID_OUTPUT_MIN,
        kp: float = 0.0,
        ki: float = 0.0,
        kd: float = 0.0,
    ):
        """Initialize the PID controller.

        Args:
            dt: Fixed integration interval (seconds). Must be positive.
                Default: 0.1
            output_max: Upper clamp of the output. Default: 1.0
            output_min: Lower clamp of the output. Default: -1.0
            kp: Proportional gain. Default: 0.0
            ki: Integral gain. Default: 0.0
            kd: Derivative gain. Default: 0.0
        """
        self.dt = dt
        self.output_max = output_max
        self.output_min = output_min

        self.kp = kp
        self.ki = ki
        self.kd = kd

        # Integral state (accumulated error)
        self.integral: float = 0.0

        # Previous error for derivative computation
        self.prev_error: float = 0.0

        # Last clamped output, kept for diagnostics
        self.last_output: float = 0.0

    def calculate(self, setpoint: float, measurement: float) -> float:
        """Compute the clamped controller output for one step.

        Args:
            setpoint: Desired value (target speed, m/s)
            measurement: Measured value (current speed, m/s)

        Returns:
            Controller output clamped to [output_min, output_max]
        """
        error = setpoint - measurement

        self.integral += error * self.dt
        derivative = (error - self.prev_error) / self.dt

        output = self.kp * error + self.ki * self.integral + self.kd * derivative
        output = max(self.output_min, min(self.output_max, output))

        self.prev_error = error
        self.last_output = output
        return output

    def update_settings(self, kp: float, ki: float, kd: float) -> None:
        """Replace all three gains at once.

        Integral and previous error are intentionally left untouched.
        """
        self.kp, self.ki, self.kd = kp, ki, kd

    def reset(self) -> None:
        """Reset integral and derivative states to zero.

        Never called by gain updates; use it when starting a new control
        session.
        """
        self.integral = 0.0
        self.prev_error = 0.0
        self.last_output = 0.0

    def get_diagnostics(self) -> Dict[str, float]:
        """Get diagnostic information for logging and debugging.

        Returns:
            Dictionary with the current gains, integral, previous error and
            last output
        """
        return {
            "kp": self.kp,
            "ki": self.ki,
            "kd": self.kd,
            "integral": self.integral,
            "prev_error": self.prev_error,
            "output": self.last_output,
        }
