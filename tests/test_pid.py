import unittest

from path_tracker.pid import PIDController


class TestPIDController(unittest.TestCase):
    def test_defaults(self):
        pid = PIDController()
        self.assertAlmostEqual(pid.dt, 0.1)
        self.assertEqual(pid.output_min, -1.0)
        self.assertEqual(pid.output_max, 1.0)
        self.assertEqual(pid.integral, 0.0)
        self.assertEqual(pid.prev_error, 0.0)

    def test_proportional_only_ignores_history(self):
        """With Ki = Kd = 0 the output is clamp(Kp * error) regardless of earlier calls"""
        pid = PIDController(kp=0.5)
        for setpoint, measurement in [(3.0, -2.0), (-1.0, 4.0), (0.2, 0.9)]:
            pid.calculate(setpoint, measurement)

        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.5)
        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.5)
        self.assertAlmostEqual(pid.calculate(0.4, 0.0), 0.2)

    def test_output_is_clamped(self):
        pid = PIDController(kp=5.0)
        self.assertEqual(pid.calculate(1.0, 0.0), 1.0)
        self.assertEqual(pid.calculate(0.0, 1.0), -1.0)

    def test_custom_bounds(self):
        pid = PIDController(output_max=2.0, output_min=0.0, kp=1.0)
        self.assertEqual(pid.calculate(5.0, 0.0), 2.0)
        self.assertEqual(pid.calculate(0.0, 5.0), 0.0)

    def test_zero_error_stays_zero(self):
        pid = PIDController(kp=1.0, ki=1.0, kd=1.0)
        for _ in range(50):
            self.assertEqual(pid.calculate(0.7, 0.7), 0.0)
        self.assertEqual(pid.integral, 0.0)

    def test_integral_accumulates_with_fixed_dt(self):
        pid = PIDController(ki=1.0)
        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.1)
        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.2)
        self.assertAlmostEqual(pid.integral, 0.2)

    def test_derivative_uses_previous_error(self):
        pid = PIDController(kd=0.01)
        # First call: previous error starts at 0, derivative = 1 / 0.1
        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.1)
        # Unchanged error: derivative is zero
        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.0)
        self.assertAlmostEqual(pid.prev_error, 1.0)

    def test_update_settings_keeps_state(self):
        pid = PIDController(ki=1.0)
        pid.calculate(1.0, 0.0)
        pid.update_settings(0.0, 2.0, 0.0)

        self.assertAlmostEqual(pid.integral, 0.1)
        self.assertAlmostEqual(pid.prev_error, 1.0)
        # integral becomes 0.2, output = 2.0 * 0.2
        self.assertAlmostEqual(pid.calculate(1.0, 0.0), 0.4)

    def test_reset(self):
        pid = PIDController(kp=0.3, ki=1.0)
        pid.calculate(1.0, 0.0)
        pid.reset()
        self.assertEqual(pid.integral, 0.0)
        self.assertEqual(pid.prev_error, 0.0)
        self.assertEqual(pid.kp, 0.3)

    def test_diagnostics(self):
        pid = PIDController(kp=0.5)
        pid.calculate(1.0, 0.0)
        diagnostics = pid.get_diagnostics()
        self.assertEqual(
            set(diagnostics), {"kp", "ki", "kd", "integral", "prev_error", "output"}
        )
        self.assertAlmostEqual(diagnostics["output"], 0.5)


if __name__ == "__main__":
    unittest.main()
