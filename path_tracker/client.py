#!/usr/bin/env python3
"""
WebSocket Client for the Path Tracking Controller

This module connects the PathTrackingController to a WebSocket server that
publishes odometry, path and configuration events. Every path event is answered
with one cmd_vel message. Odometry only refreshes the cached robot state, and
configuration events are pushed to the controller's ParameterStore.
"""

import argparse
import asyncio
import logging
import signal
import sys
import time
from typing import Any, List, Optional, Union

import websockets

from path_tracker import messages
from path_tracker.config import (
    DEFAULT_KD,
    DEFAULT_KI,
    DEFAULT_KP,
    DEFAULT_LOOKAHEAD_DISTANCE,
    DEFAULT_TARGET_SPEED,
    # Terminal colors
    TERM_BLUE,
    TERM_ORANGE,
    TERM_RESET,
    WS_MAX_RETRY_DELAY_SECONDS,
    WS_RETRY_DELAY_SECONDS,
    WS_TIMEOUT_SECONDS,
    # WebSocket configuration
    WS_URI,
)
from path_tracker.controller import PathTrackingController
from path_tracker.data_collector import DataCollector
from path_tracker.errors import EmptyPathError, InvalidConfigError, PathTrackerError
from path_tracker.parameters import ControllerConfig, ParameterStore


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    This formatter provides clean console output by showing INFO messages without
    timestamps while preserving full context for WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


class PathTrackerClient:
    """Path tracker with WebSocket communication and optional data logging.

    Attributes:
        uri: WebSocket URI to connect to.
        controller: Path tracking controller driven by incoming events.
        data_collector: Optional CSV logger for odometry, commands and configs.
        should_stop: Flag indicating whether to stop the control loop.
        commands_sent: Number of velocity commands produced so far.
    """

    def __init__(
        self,
        uri: str,
        controller: Optional[PathTrackingController] = None,
        data_collector: Optional[DataCollector] = None,
    ) -> None:
        """Initialize the client.

        Args:
            uri: WebSocket URI to connect to (must start with ws:// or wss://).
            controller: Controller to drive. A default controller is created if omitted.
            data_collector: CSV logger, or None to disable run logging.

        Raises:
            ValueError: If URI format is invalid.
        """
        if not uri or not uri.startswith(("ws://", "wss://")):
            raise ValueError(f"Invalid WebSocket URI: {uri}. Must start with 'ws://' or 'wss://'")

        self.uri: str = uri
        self.controller = controller if controller is not None else PathTrackingController()
        self.data_collector = data_collector
        self.should_stop: bool = False
        self.commands_sent: int = 0

    def process_odometry_message(self, data: dict) -> None:
        """Cache robot pose, velocity and frame ids from an odometry message."""
        odom = messages.parse_odometry(data)
        self.controller.on_odometry_update(
            odom.pose, odom.velocity, odom.world_frame_id, odom.robot_frame_id
        )
        if self.data_collector:
            self.data_collector.log_odometry(time.time(), odom.pose, odom.velocity)

    def process_path_message(self, data: dict) -> str:
        """Run one control cycle for a path message.

        Returns:
            Encoded cmd_vel message to send back.

        Raises:
            EmptyPathError: If the path carries no poses.
        """
        path = messages.parse_path(data)
        command = self.controller.on_path_update(path)

        if self.data_collector:
            now = time.time()
            diagnostics = self.controller.diagnostics()
            self.data_collector.log_command(now, len(path), command, diagnostics)
            self.data_collector.log_pid_diagnostics(now, self.controller.pid.get_diagnostics())

        self.commands_sent += 1
        logging.debug(
            f"cmd_vel: linear={command.linear_speed:.3f}, angular={command.angular_rate:.3f}"
        )
        return messages.encode_command(command)

    def process_config_message(self, data: dict) -> None:
        """Push a configuration update to the controller's parameter store.

        Raises:
            InvalidConfigError: If the update is rejected.
        """
        store = self.controller.parameters
        config = messages.parse_config(data, store.current)
        try:
            store.push(config)
        except InvalidConfigError:
            if self.data_collector:
                self.data_collector.log_config(time.time(), config, accepted=False)
            raise

        if self.data_collector:
            self.data_collector.log_config(time.time(), config, accepted=True)
        logging.info(
            f"{TERM_BLUE}Parameters updated: speed_target={config.target_speed:.2f}, "
            f"Kp={config.kp:.2f}, Ki={config.ki:.2f}, Kd={config.kd:.2f}, "
            f"lookahead={config.lookahead_distance:.2f}{TERM_RESET}"
        )

    def handle_message(self, message: Union[str, bytes]) -> Optional[str]:
        """Parse an incoming message and route it to the appropriate handler.

        Args:
            message: Raw JSON message string or bytes from WebSocket.

        Returns:
            Encoded reply to send (cmd_vel for path messages), or None.
        """
        try:
            data = messages.decode(message)
            message_type = data.get("message_type")

            if message_type == messages.ODOMETRY:
                self.process_odometry_message(data)
            elif message_type == messages.PATH:
                return self.process_path_message(data)
            elif message_type == messages.CONFIG:
                self.process_config_message(data)
            else:
                logging.debug(f"Ignoring unknown message type: {message_type}")

        except EmptyPathError as e:
            logging.warning(f"Skipping control cycle: {e}")
        except InvalidConfigError as e:
            logging.warning(f"Rejected configuration update: {e}")
        except PathTrackerError as e:
            logging.error(f"Error processing message: {e}")
        except (KeyError, TypeError, ValueError) as e:
            logging.error(f"Error processing message data: {e}")
        return None

    async def run_control_loop(self) -> None:
        """Connect to WebSocket and run the control loop.

        Maintains a connection to the WebSocket server with automatic retry logic
        and exponential backoff. Continues running until should_stop is set.
        """
        retry_delay = WS_RETRY_DELAY_SECONDS

        while not self.should_stop:
            try:
                async with websockets.connect(self.uri) as websocket:
                    logging.info(f"{TERM_BLUE}✓ Connected to {self.uri}{TERM_RESET}")
                    retry_delay = WS_RETRY_DELAY_SECONDS
                    await self.serve(websocket)

            except (OSError, websockets.exceptions.WebSocketException) as e:
                if self.should_stop:
                    break
                logging.error(f"Connection error: {e}")
                logging.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay = min(retry_delay * 2, WS_MAX_RETRY_DELAY_SECONDS)

    async def serve(self, websocket: Any) -> None:
        """Process messages from an open connection until it closes or stop() is called."""
        control_started = False
        while not self.should_stop:
            try:
                message = await asyncio.wait_for(websocket.recv(), timeout=WS_TIMEOUT_SECONDS)
            except asyncio.TimeoutError:
                # No message received in timeout period, continue
                continue
            except websockets.exceptions.ConnectionClosed:
                logging.warning("Connection closed by server")
                break

            reply = self.handle_message(message)
            if reply is not None:
                await websocket.send(reply)
                if not control_started:
                    logging.info(f"{TERM_BLUE}✓ Running path tracking control{TERM_RESET}")
                    control_started = True

    def stop(self) -> None:
        """Signal the client to stop."""
        self.should_stop = True

    def __enter__(self) -> "PathTrackerClient":
        if self.data_collector:
            self.data_collector.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.data_collector:
            self.data_collector.cleanup()


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for the client."""
    parser = argparse.ArgumentParser(
        description="WebSocket client running the PID + pure pursuit path tracker"
    )
    parser.add_argument("--uri", default=WS_URI, help=f"WebSocket server URI (default: {WS_URI})")
    parser.add_argument(
        "--speed-target",
        type=float,
        default=DEFAULT_TARGET_SPEED,
        help=f"Initial target speed in m/s (default: {DEFAULT_TARGET_SPEED})",
    )
    parser.add_argument("--kp", type=float, default=DEFAULT_KP, help="Initial PID Kp")
    parser.add_argument("--ki", type=float, default=DEFAULT_KI, help="Initial PID Ki")
    parser.add_argument("--kd", type=float, default=DEFAULT_KD, help="Initial PID Kd")
    parser.add_argument(
        "--lookahead",
        type=float,
        default=DEFAULT_LOOKAHEAD_DISTANCE,
        help=f"Initial lookahead distance in m (default: {DEFAULT_LOOKAHEAD_DISTANCE})",
    )
    parser.add_argument(
        "--output-dir", default=".", help="Base directory for run logs (default: current directory)"
    )
    parser.add_argument("--no-log", action="store_true", help="Disable CSV run logging")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ControllerConfig:
    """Build the initial ControllerConfig from parsed command-line flags."""
    return ControllerConfig(
        target_speed=args.speed_target,
        kp=args.kp,
        ki=args.ki,
        kd=args.kd,
        lookahead_distance=args.lookahead,
    )


async def main(
    uri: str = WS_URI,
    initial_config: Optional[ControllerConfig] = None,
    output_dir: str = ".",
    log_data: bool = True,
) -> None:
    """Main entry point for the WebSocket client.

    Args:
        uri: WebSocket server URI.
        initial_config: Starting tunables; defaults to ControllerConfig().
        output_dir: Base directory for run logs.
        log_data: Whether to write CSV run logs.
    """
    controller = PathTrackingController(ParameterStore(initial_config))
    collector = DataCollector(output_dir=output_dir) if log_data else None

    with PathTrackerClient(uri, controller=controller, data_collector=collector) as client:
        loop = asyncio.get_running_loop()

        def signal_handler() -> None:
            logging.info("\nShutdown signal received...")
            client.stop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, signal_handler)

        await client.run_control_loop()
        logging.info(f"{TERM_ORANGE}Sent {client.commands_sent} velocity commands{TERM_RESET}")


def run(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, configure logging and run the client until interrupted."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        initial_config = config_from_args(args)
        initial_config.validate()
    except InvalidConfigError as e:
        logging.error(f"Invalid initial configuration: {e}")
        sys.exit(2)

    try:
        asyncio.run(
            main(
                uri=args.uri,
                initial_config=initial_config,
                output_dir=args.output_dir,
                log_data=not args.no_log,
            )
        )
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)


if __name__ == "__main__":
    run()
