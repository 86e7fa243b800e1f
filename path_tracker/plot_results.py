#!/usr/bin/env python3
"""
Standalone script to visualize path tracker runs.

This script loads the odometry and velocity command logs from a run directory
and plots the driven trajectory with the selected lookahead targets, the speed
loop response and the steering response.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .config import TERM_BLUE, TERM_RESET, TRACKER_BLUE, TRACKER_ORANGE, TRACKER_TAUPE


def load_csv_to_dict(csv_path: Path) -> Dict[str, np.ndarray]:
    """Load CSV file into dictionary of numpy arrays.

    Non-numeric or empty values become NaN.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    data: Dict[str, List[float]] = {}
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for name in reader.fieldnames or []:
            data[name] = []
        for row in reader:
            for key, value in row.items():
                try:
                    data[key].append(float(value))
                except (ValueError, TypeError):
                    data[key].append(np.nan)

    return {key: np.array(values) for key, values in data.items()}


def load_run(run_dir: Path) -> Dict[str, Dict[str, np.ndarray]]:
    """Load the odometry and command logs of a run.

    Returns:
        Dictionary with keys 'odometry' and 'command', each a column dict
    """
    return {
        "odometry": load_csv_to_dict(run_dir / "odometry_data.csv"),
        "command": load_csv_to_dict(run_dir / "command_data.csv"),
    }


def _relative_time(t: np.ndarray, t0: float) -> np.ndarray:
    return t - t0 if t.size else t


def _style_axis(ax: Axes, title: str, xlabel: str, ylabel: str) -> None:
    ax.set_title(title, fontweight="bold")
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3, linestyle="--", linewidth=0.5)


def plot_run_summary(
    run_dir: Path, save_plots: bool = False, show_plots: bool = True
) -> Figure:
    """Plot trajectory, speed tracking and steering for one run.

    Args:
        run_dir: Run directory holding odometry_data.csv and command_data.csv.
        save_plots: Save the figure as run_summary.png in the run directory.
        show_plots: Display the figure interactively.

    Returns:
        The created figure.

    Raises:
        FileNotFoundError: If a log file is missing.
    """
    run = load_run(run_dir)
    odom = run["odometry"]
    cmd = run["command"]

    starts = [a[0] for a in (odom.get("timestamp"), cmd.get("timestamp")) if a is not None and a.size]
    t0 = min(starts) if starts else 0.0

    fig, axes = plt.subplots(1, 3, figsize=(16, 5))
    fig.suptitle(f"Path Tracker Run: {run_dir.name}", fontweight="bold")

    # Trajectory with lookahead targets
    ax = axes[0]
    ax.plot(odom["x"], odom["y"], color=TRACKER_ORANGE, linewidth=2, label="Robot")
    ax.scatter(cmd["target_x"], cmd["target_y"], color=TRACKER_BLUE, s=12, label="Lookahead target")
    ax.set_aspect("equal", adjustable="datalim")
    _style_axis(ax, "Trajectory", "X (m)", "Y (m)")
    ax.legend(loc="best")

    # Speed loop
    ax = axes[1]
    t_cmd = _relative_time(cmd["timestamp"], t0)
    ax.plot(t_cmd, cmd["target_speed"], color=TRACKER_BLUE, linestyle="--", label="Target speed")
    ax.plot(t_cmd, cmd["current_speed"], color=TRACKER_ORANGE, label="Measured speed")
    ax.plot(t_cmd, cmd["linear_speed"], color=TRACKER_TAUPE, label="Commanded speed")
    _style_axis(ax, "Speed Tracking", "Time (s)", "Speed (m/s)")
    ax.legend(loc="best")

    # Steering loop
    ax = axes[2]
    ax.plot(t_cmd, np.degrees(cmd["heading_error"]), color=TRACKER_ORANGE, label="Heading error (deg)")
    ax.plot(t_cmd, cmd["angular_rate"], color=TRACKER_BLUE, label="Angular rate (rad/s)")
    ax.axhline(0.0, color=TRACKER_TAUPE, linewidth=0.8)
    _style_axis(ax, "Steering", "Time (s)", "")
    ax.legend(loc="best")

    fig.tight_layout()

    if save_plots:
        fig.savefig(run_dir / "run_summary.png", dpi=150)
    if show_plots:
        plt.show()

    return fig


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = sorted(d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_"))
    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def list_available_runs(results_dir: Path) -> None:
    """List all available run directories."""
    if not results_dir.exists():
        logging.error(f"Results directory not found: {results_dir}")
        return

    run_dirs = sorted(d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_"))
    if not run_dirs:
        logging.info(f"No run directories found in {results_dir}")
        return

    logging.info("Available runs:")
    for i, run_dir in enumerate(run_dirs, 1):
        logging.info(f"  {i}. {run_dir.name}")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize logged path tracker runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m path_tracker.plot_results

  # Plot a specific run and save the figure without showing it
  python -m path_tracker.plot_results --run run_20261018_120000 --save --no-show
        """,
    )
    parser.add_argument("--run", default=None, help="Run directory name (default: most recent)")
    parser.add_argument("--results-dir", default="results", help="Results directory (default: results)")
    parser.add_argument("--save", action="store_true", help="Save the figure in the run directory")
    parser.add_argument("--no-show", action="store_true", help="Do not display plots interactively")
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")
    args = parser.parse_args(argv)

    results_dir = Path(args.results_dir)

    if args.list:
        list_available_runs(results_dir)
        return

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            list_available_runs(results_dir)
            sys.exit(1)
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir.name}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            sys.exit(1)

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        logging.info(f"Make sure {run_dir} contains odometry_data.csv and command_data.csv")
        sys.exit(1)

    if args.save:
        logging.info(f"{TERM_BLUE}✓ Saved plot to {run_dir}/run_summary.png{TERM_RESET}")


if __name__ == "__main__":
    main()
