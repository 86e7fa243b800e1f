import csv
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from path_tracker.data_collector import COMMAND_HEADER, CONFIG_HEADER, ODOMETRY_HEADER, DataCollector
from path_tracker.model import Pose2D, Velocity, VelocityCommand
from path_tracker.parameters import ControllerConfig


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


class TestDataCollector(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.run_dir = Path(self.tmp.name) / "run_test"

    def tearDown(self):
        self.tmp.cleanup()

    def test_setup_writes_headers(self):
        with DataCollector(run_dir=str(self.run_dir)) as collector:
            pass

        self.assertEqual(read_rows(collector.odometry_output_path), [ODOMETRY_HEADER])
        self.assertEqual(read_rows(collector.command_output_path), [COMMAND_HEADER])
        self.assertEqual(read_rows(collector.config_output_path), [CONFIG_HEADER])
        self.assertTrue(collector.pid_output_path.exists())

    def test_logs_rows(self):
        with DataCollector(run_dir=str(self.run_dir)) as collector:
            collector.log_odometry(1.0, Pose2D(x=1.0, y=2.0, yaw=0.5), Velocity(3.0, 4.0))
            collector.log_command(
                1.1,
                3,
                VelocityCommand(0.5, 0.2),
                {
                    "target_x": 2.0,
                    "target_y": 0.0,
                    "heading_error": 0.1,
                    "target_speed": 1.0,
                    "current_speed": 5.0,
                },
            )
            collector.log_config(1.2, ControllerConfig(lookahead_distance=-1.0), accepted=False)

        odom_rows = read_rows(collector.odometry_output_path)
        self.assertEqual(len(odom_rows), 2)
        self.assertEqual(float(odom_rows[1][-1]), 5.0)

        cmd_rows = read_rows(collector.command_output_path)
        self.assertEqual(cmd_rows[1][1], "3")
        self.assertEqual(float(cmd_rows[1][-2]), 0.5)

        config_rows = read_rows(collector.config_output_path)
        self.assertEqual(config_rows[1][-1], "0")

    def test_logging_before_setup(self):
        collector = DataCollector(run_dir=str(self.run_dir))
        with self.assertRaises(RuntimeError):
            collector.log_odometry(0.0, Pose2D(), Velocity())

    def test_output_dir_must_be_directory(self):
        file_path = Path(self.tmp.name) / "not_a_dir"
        file_path.write_text("x")
        with self.assertRaises(ValueError):
            DataCollector(output_dir=str(file_path))

    def test_run_dir_from_environment(self):
        env_dir = Path(self.tmp.name) / "from_env"
        with patch.dict(os.environ, {"RUN_DIR": str(env_dir)}):
            collector = DataCollector(output_dir=self.tmp.name)
        self.assertEqual(collector.run_dir, env_dir)
        self.assertTrue(env_dir.is_dir())

    def test_timestamped_run_dir(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("RUN_DIR", None)
            collector = DataCollector(output_dir=self.tmp.name)
        self.assertEqual(collector.run_dir.parent, Path(self.tmp.name) / "results")
        self.assertTrue(collector.run_dir.name.startswith("run_"))


if __name__ == "__main__":
    unittest.main()
