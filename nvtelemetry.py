#!/usr/bin/env python3
"""NvTelemetry - NVIDIA telemetry task and service controller.

Entry point for the command-line interface.
"""

import argparse
import json
import sys
from pathlib import Path

from src.actions.transitions import TransitionEngine
from src.core.config import Config, load_config, save_config
from src.core.logging_config import get_log_level, get_logger, setup_logging
from src.core.models import TelemetryService, TelemetryTask
from src.discovery.services import PowerShellServiceDirectory
from src.discovery.tasks import PowerShellTaskDirectory
from src.discovery.telemetry import TelemetryDiscovery

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_UNAVAILABLE = 2


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="nvtelemetry",
        description="Enable or disable NVIDIA telemetry tasks and services on Windows",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Enable debug logging",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress console log output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    status_parser = subparsers.add_parser("status", help="Show telemetry component state")
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )

    for name, help_text in (
        ("disable", "Disable telemetry tasks and services"),
        ("enable", "Enable telemetry tasks and services"),
    ):
        action_parser = subparsers.add_parser(name, help=help_text)
        action_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without changing anything",
        )

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser


def build_components(
    config: Config,
    dry_run: bool = False,
) -> tuple[TelemetryDiscovery, TransitionEngine]:
    """Create discovery and the transition engine sharing one set of adapters."""
    task_directory = PowerShellTaskDirectory(
        command_timeout=config.control.command_timeout_seconds,
    )
    service_directory = PowerShellServiceDirectory(
        command_timeout=config.control.command_timeout_seconds,
        wait_timeout=config.control.service_wait_timeout_seconds,
    )

    discovery = TelemetryDiscovery(
        task_directory,
        service_directory,
        logger=get_logger("discovery"),
    )
    engine = TransitionEngine(
        task_directory,
        service_directory,
        logger=get_logger("actions"),
        dry_run=dry_run or config.control.dry_run,
    )
    return discovery, engine


def print_status(tasks: list[TelemetryTask], services: list[TelemetryService]) -> None:
    """Print the enablement state of found components."""
    if not tasks and not services:
        print("No NVIDIA telemetry components found.")
        return

    for task in tasks:
        print(f"  [task]    {task.path}: {task.state_label}")
    for service in services:
        print(
            f"  [service] {service.label}: {service.state_label} "
            f"({service.run_state.value}, {service.start_mode.value})"
        )


def run_status(args: argparse.Namespace, discovery: TelemetryDiscovery) -> int:
    """Execute the status command."""
    tasks = discovery.get_telemetry_tasks(log=not args.json)
    services = discovery.get_telemetry_services(log=not args.json)

    if args.json:
        output = {
            "tasks": [t.to_dict() for t in tasks],
            "services": [s.to_dict() for s in services],
        }
        print(json.dumps(output, indent=2))
    else:
        print("\nTelemetry components:")
        print_status(tasks, services)

    return EXIT_OK


def run_transition(
    args: argparse.Namespace,
    discovery: TelemetryDiscovery,
    engine: TransitionEngine,
) -> int:
    """Execute the enable or disable command."""
    logger = get_logger("main")

    tasks = discovery.get_telemetry_tasks(log=True)
    services = discovery.get_telemetry_services(log=True)

    if args.command == "disable":
        logger.info("Disabling telemetry...")
        engine.disable_telemetry_tasks(tasks)
        engine.disable_telemetry_services(services)
    else:
        logger.info("Enabling telemetry...")
        engine.enable_telemetry_services(services)
        engine.enable_telemetry_tasks(tasks)

    # Re-read so the summary shows what actually happened
    print("\nResulting state:")
    print_status(discovery.get_telemetry_tasks(), discovery.get_telemetry_services())

    return EXIT_OK


def run_config(args: argparse.Namespace, config: Config) -> int:
    """Execute the config command."""
    if args.init:
        path = save_config(config, args.config)
        print(f"Configuration saved to {path}")
        return EXIT_OK

    if args.show:
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_OK

    print("Use --init to create config or --show to display current config")
    return EXIT_USAGE


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    config.ensure_directories()
    setup_logging(
        config.logs_dir,
        log_level=get_log_level(args.verbose, config.log_level),
        console_output=not args.quiet,
    )

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    if args.command == "config":
        return run_config(args, config)

    discovery, engine = build_components(config, dry_run=getattr(args, "dry_run", False))

    if not discovery.task_directory.is_available():
        print("Telemetry control is only available on Windows", file=sys.stderr)
        return EXIT_UNAVAILABLE

    if args.command == "status":
        return run_status(args, discovery)
    return run_transition(args, discovery, engine)


if __name__ == "__main__":
    sys.exit(main())
