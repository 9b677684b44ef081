"""
Entry point for hostpoll.

Usage:
    python -m hostpoll [/path/to/config.conf]
    python -m hostpoll --help
"""

import argparse
import asyncio
import sys
from pathlib import Path

from . import __version__
from .app import run_app
from .config.loader import ConfigError, ConfigLoader
from .config.schema import Config, port_number
from .logging import LogConfig, get_logger, setup_logging
from .server import ServerError


logger = get_logger("main")


def port_argument(value: str) -> int:
    try:
        return port_number(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostpoll",
        description="Host utilization poller exposing Prometheus metrics",
    )

    parser.add_argument(
        "config",
        nargs="?",
        help="Path to configuration file (built-in defaults if omitted)",
    )
    parser.add_argument(
        "-p", "--port",
        type=port_argument,
        help="Listening port (overrides the configuration file)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only errors)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to file",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def build_log_config(config: Config, args: argparse.Namespace) -> LogConfig:
    """File settings from the config file; command line flags win."""
    log_config = LogConfig(
        console_level=config.logging.level,
        console_colors=config.logging.colors,
        file_enabled=config.logging.file is not None,
        file_level=config.logging.file_level,
        file_max_bytes=config.logging.file_max_size * 1024 * 1024,
        file_backup_count=config.logging.file_keep,
        format=config.logging.format,
    )
    if config.logging.file:
        log_config.file_path = config.logging.file

    if args.debug:
        log_config.console_level = "debug"
    elif args.verbose:
        log_config.console_level = "info"
    elif args.quiet:
        log_config.console_level = "error"

    if args.no_color:
        log_config.console_colors = False

    if args.log_file:
        log_config.file_enabled = True
        log_config.file_path = args.log_file

    return log_config


def print_summary(config: Config, warnings: list[str]) -> None:
    if warnings:
        print(f"Configuration warnings ({len(warnings)}):")
        for warning in warnings:
            print(f"  - {warning}")

    def interval(section) -> str:
        return f"every {section.update_interval:g}s" if section.enabled else "disabled"

    print("\nConfiguration summary:")
    print(f"  Listen: {config.exporter.bind}:{config.exporter.port}")
    print(f"  Metric prefix: {config.exporter.prefix or '(none)'}")
    print(f"  Logging level: {config.logging.level}")
    print(f"  System: {interval(config.system)}")
    print(f"  Filesystem: {interval(config.filesystem)}, excluding {', '.join(config.filesystem.exclude)}")
    print(f"  Network: {interval(config.network)}, interfaces {', '.join(config.network.interfaces)}*")
    print(f"  Zpool: {interval(config.zpool)}, command {' '.join(config.zpool.command)!r}")
    print("\nConfiguration is valid!")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    loader = ConfigLoader()
    try:
        if args.config:
            config = loader.load_file(args.config)
        else:
            config = Config()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.port is not None:
        config.exporter.port = args.port

    warnings = loader.validate(config)

    if args.validate:
        print_summary(config, warnings)
        return 0

    setup_logging(build_log_config(config, args))

    if args.config:
        logger.info(f"Loaded configuration from {Path(args.config)}")
    for warning in warnings:
        logger.warning(f"Config warning: {warning}")

    try:
        asyncio.run(run_app(config))
        return 0
    except ServerError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
