import tempfile
import time
import unittest
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from path_tracker.controller import PathTrackingController  # noqa: E402
from path_tracker.data_collector import DataCollector  # noqa: E402
from path_tracker.model import PathPoint, Pose2D, Velocity  # noqa: E402
from path_tracker.plot_results import (  # noqa: E402
    find_latest_run,
    load_csv_to_dict,
    load_run,
    plot_run_summary,
)


def record_run(run_dir: Path) -> None:
    """Drive a controller along a straight line and log every cycle."""
    controller = PathTrackingController()
    path = [PathPoint(0.5 * i, 0.2) for i in range(20)]
    x, speed = 0.0, 0.0
    with DataCollector(run_dir=str(run_dir)) as collector:
        for step in range(10):
            now = time.time() + 0.1 * step
            pose, velocity = Pose2D(x=x), Velocity(speed)
            controller.on_odometry_update(pose, velocity, "world", "base_link")
            collector.log_odometry(now, pose, velocity)

            command = controller.on_path_update(path)
            collector.log_command(now, len(path), command, controller.diagnostics())

            speed = command.linear_speed
            x += 0.1 * speed


class TestPlotResults(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.results_dir = Path(self.tmp.name) / "results"
        self.run_dir = self.results_dir / "run_20261018_120000"
        record_run(self.run_dir)

    def tearDown(self):
        plt.close("all")
        self.tmp.cleanup()

    def test_load_run(self):
        run = load_run(self.run_dir)
        self.assertEqual(run["odometry"]["x"].shape, (10,))
        self.assertEqual(run["command"]["linear_speed"].shape, (10,))

    def test_plot_run_summary_saves_figure(self):
        fig = plot_run_summary(self.run_dir, save_plots=True, show_plots=False)
        self.assertEqual(len(fig.axes), 3)
        self.assertTrue((self.run_dir / "run_summary.png").exists())

    def test_find_latest_run(self):
        (self.results_dir / "run_20251231_235959").mkdir()
        (self.results_dir / "notes").mkdir()
        self.assertEqual(find_latest_run(self.results_dir), self.run_dir)

    def test_missing_files(self):
        with self.assertRaises(FileNotFoundError):
            load_csv_to_dict(self.run_dir / "missing.csv")
        with self.assertRaises(FileNotFoundError):
            find_latest_run(Path(self.tmp.name) / "nowhere")


if __name__ == "__main__":
    unittest.main()
