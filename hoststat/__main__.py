"""
Entry point for Hoststat.

Usage:
    python -m hoststat /path/to/config.conf
    python -m hoststat --once /path/to/config.conf
    python -m hoststat --help
"""

import argparse
import asyncio
import sys
from pathlib import Path

from . import __version__
from .app import run_app, run_once
from .config.loader import ConfigError, ConfigLoader
from .const import DEFAULT_CONFIG_PATH
from .logging import LogConfig, get_logger, setup_logging

logger = get_logger("main")


def validate_config(config_path: str) -> int:
    """Validate configuration file and print warnings."""
    loader = ConfigLoader()
    try:
        config = loader.load_file(config_path)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    warnings = loader.validate(config)
    if warnings:
        print(f"Configuration warnings ({len(warnings)}):")
        for warning in warnings:
            print(f"  - {warning}")

    print("\nConfiguration summary:")
    print(f"  Default interval: {config.defaults.interval}s")
    print(f"  Queue size: {config.output.queue_size}")
    print(f"  Logging level: {config.logging.level}")
    if config.logging.file:
        print(f"  Log file: {config.logging.file}")
    for sys_config in config.system:
        interval = sys_config.interval_seconds or config.defaults.interval
        users = "on" if sys_config.collect_user_number else "off"
        print(f"  system: every {interval}s, user count {users}")

    print("\nConfiguration is valid!")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoststat",
        description="Sample host load, CPU count, uptime and logged-in users",
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable INFO logging")
    verbosity.add_argument("-d", "--debug", action="store_true", help="Enable DEBUG logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument("--log-file", metavar="PATH", help="Write logs to file")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--validate", action="store_true", help="Validate configuration and exit")
    mode.add_argument("--once", action="store_true", help="Gather once, print samples and exit")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def log_config_from_args(args: argparse.Namespace) -> LogConfig:
    log_config = LogConfig()

    if args.debug:
        log_config.console_level = "debug"
    elif args.verbose:
        log_config.console_level = "info"
    elif args.quiet:
        log_config.console_level = "error"
    else:
        log_config.console_level = "warning"

    if args.no_color:
        log_config.console_colors = False

    if args.log_file:
        log_config.file_enabled = True
        log_config.file_path = args.log_file

    return log_config


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Configuration file not found: {config_path}", file=sys.stderr)
        return 1

    # Reconfigured once the config file is loaded
    log_config = log_config_from_args(args)
    setup_logging(log_config)

    if args.validate:
        return validate_config(str(config_path))

    try:
        if args.once:
            return 0 if asyncio.run(run_once(str(config_path), cli_log_config=log_config)) else 1
        asyncio.run(run_app(str(config_path), cli_log_config=log_config))
        return 0
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
