"""Command-line interface for Redial Controller."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from redial_controller.config import Config
from redial_controller.core.controller import SessionController
from redial_controller.core.session_state import SessionView
from redial_controller.remote import RedialRemote

COMMANDS = ("monitor", "status", "redial", "dial", "configure-wifi", "auto-redial")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Enable debug logging if True
    """
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(level=level, format=format_str)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="redial-controller",
        description="Redial Controller - remote control for a Wi-Fi redial headset",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="monitor",
        help="Action to perform (default: monitor)",
    )

    parser.add_argument(
        "values",
        nargs="*",
        help="Command values: number for dial, SSID and password for "
        "configure-wifi, on/off for auto-redial",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (YAML)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Device address (overrides config)",
    )

    parser.add_argument(
        "--page-host",
        type=str,
        default=None,
        help="Address the controller was reached through (overrides config)",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Status polling interval in seconds (overrides config)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (overrides config)",
    )

    parser.add_argument(
        "--period",
        type=str,
        default=None,
        help="Redial period in seconds for auto-redial",
    )

    parser.add_argument(
        "--random-delay",
        type=str,
        default=None,
        help="Extra random redial delay in seconds for auto-redial",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    parsed = parser.parse_args(args)
    _validate_values(parser, parsed)
    return parsed


def _validate_values(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Check that each command got the values it needs."""
    if args.command == "dial" and not args.values:
        parser.error("dial requires a number")
    if args.command == "configure-wifi" and not 1 <= len(args.values) <= 2:
        parser.error("configure-wifi requires SSID and optional password")
    if args.command == "auto-redial" and (
        len(args.values) != 1 or args.values[0].lower() not in ("on", "off")
    ):
        parser.error("auto-redial requires 'on' or 'off'")
    if args.command in ("monitor", "status", "redial") and args.values:
        parser.error(f"{args.command} takes no values")


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration from file and apply CLI overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        Configuration object
    """
    # Load base configuration
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Configuration file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        config = Config.from_yaml(config_path)
    else:
        default_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".config" / "redial-controller" / "config.yaml",
        ]
        config = None
        for path in default_paths:
            if path.exists():
                config = Config.from_yaml(path)
                break
        if config is None:
            config = Config.default()

    # Apply CLI overrides
    if args.host:
        config.device.host = args.host
    if args.page_host:
        config.device.page_host = args.page_host
    if args.interval:
        config.poller.interval_seconds = args.interval
    if args.timeout:
        config.transport.timeout = args.timeout

    return config


async def run_command(controller: SessionController, args: argparse.Namespace) -> SessionView:
    """Run a one-shot command against the device.

    Status is refreshed first so the session follows the device to its
    self-reported address before the command is sent.

    Args:
        controller: Session controller to drive
        args: Parsed command-line arguments

    Returns:
        The session view after the command completed
    """
    await controller.refresh_status()

    if args.command == "redial":
        await controller.redial()
    elif args.command == "dial":
        await controller.dial(" ".join(args.values))
    elif args.command == "configure-wifi":
        password = args.values[1] if len(args.values) > 1 else ""
        await controller.configure_wifi(args.values[0], password)
    elif args.command == "auto-redial":
        if args.period is not None:
            await controller.set_redial_period(args.period)
        if args.random_delay is not None:
            await controller.set_random_delay(args.random_delay)
        await controller.set_auto_redial(args.values[0].lower() == "on")

    return controller.view()


def format_view(view: SessionView) -> str:
    """Render a session view as plain text."""
    return "\n".join([
        f"Device address:   {view.target_address}",
        f"Connected:        {'yes' if view.connected else 'no'}",
        f"Wi-Fi mode:       {view.wifi_mode.value}",
        f"Bluetooth:        {'connected' if view.bluetooth_connected else 'disconnected'}",
        f"Auto redial:      {'on' if view.auto_redial_enabled else 'off'}"
        f" every {view.redial_period_seconds}s"
        f" (+{view.redial_random_delay_seconds}s random,"
        f" last {view.last_random_delay_seconds}s)",
        f"Status:           {view.status_message}",
    ])


async def run_monitor(remote: RedialRemote) -> None:
    """Poll the device and log every status change until interrupted.

    Args:
        remote: Remote to run
    """
    last_message: Optional[str] = None

    def on_change(view: SessionView) -> None:
        nonlocal last_message
        if view.status_message != last_message:
            last_message = view.status_message
            logging.info(f"[{view.target_address}] {view.status_message}")

    remote.controller.set_change_handler(on_change)

    try:
        await remote.start()
        await asyncio.Event().wait()
    finally:
        await remote.stop()


async def run(config: Config, args: argparse.Namespace) -> None:
    """Run the requested command with the given configuration.

    Args:
        config: Remote configuration
        args: Parsed command-line arguments
    """
    remote = RedialRemote(config=config)

    if args.command == "monitor":
        await run_monitor(remote)
        return

    view = await run_command(remote.controller, args)
    print(format_view(view))


def main(args: list[str] | None = None) -> None:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv)
    """
    parsed_args = parse_args(args)
    setup_logging(verbose=parsed_args.verbose)

    config = load_config(parsed_args)

    try:
        asyncio.run(run(config, parsed_args))
    except KeyboardInterrupt:
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
