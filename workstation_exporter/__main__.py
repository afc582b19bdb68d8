"""
Entry point for Workstation Exporter.

Usage:
    python -m workstation_exporter /path/to/config.conf
    python -m workstation_exporter --once
    python -m workstation_exporter --help
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from . import __version__
from .app import Application, load_app_config, run_app
from .collectors import MODULES, create_modules
from .config.loader import ConfigError, ConfigLoader
from .const import DEFAULT_CONFIG_PATH
from .logging import LogConfig, get_logger, setup_logging


logger = get_logger("main")


def validate_config(config_path: Path | None) -> int:
    """Validate configuration file and print warnings."""
    try:
        loader = ConfigLoader(module_names=MODULES)
        if config_path is None:
            print("No configuration file, checking built-in defaults")
            config = loader.load_string("", "<defaults>")
        else:
            config = loader.load_file(config_path)

        warnings = loader.validate(config)

        if warnings:
            print(f"Configuration warnings ({len(warnings)}):")
            for warning in warnings:
                print(f"  - {warning}")

        print("\nConfiguration summary:")
        print(f"  Listen: {config.server.listen}:{config.server.port}")
        print(f"  Logging level: {config.logging.level}")
        if config.logging.file:
            print(f"  Log file: {config.logging.file}")
        print(f"  Default probe timeout: {config.defaults.timeout}s")
        for module in create_modules(config):
            state = "enabled" if module.enabled else "disabled"
            print(f"  Module {module.name}: {state}")

        print("\nConfiguration is valid!")
        return 0

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1


def resolve_config_path(config: str | None) -> Path | None:
    """
    Pick the configuration file to load.

    An explicit path must exist. Without one, the default path is used if
    present, otherwise built-in defaults apply (None).
    """
    if config is not None:
        return Path(config)
    default = Path(DEFAULT_CONFIG_PATH)
    return default if default.exists() else None


async def collect_once(config_path: Path | None, cli_overrides: dict[str, Any] | None = None) -> str:
    config = load_app_config(config_path, cli_overrides)
    return await Application(config).run_once()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="workstation-exporter",
        description="Hardware sensor exporter for Prometheus",
    )

    parser.add_argument(
        "config",
        nargs="?",
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)",
    )

    parser.add_argument(
        "--listen",
        metavar="ADDRESS",
        help="Listen address (overrides configuration)",
    )

    parser.add_argument(
        "--port",
        type=int,
        help="Listen port (overrides configuration)",
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
        "--once",
        action="store_true",
        help="Run one collection cycle, print the exposition and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    config_path = resolve_config_path(args.config)
    if config_path is not None and not config_path.exists():
        print(f"Configuration file not found: {config_path}", file=sys.stderr)
        return 1

    # Logging fields given on the command line; they win over the
    # `logging` block once the configuration file is loaded
    cli_overrides: dict[str, Any] = {}

    if args.debug:
        cli_overrides["console_level"] = "debug"
    elif args.verbose:
        cli_overrides["console_level"] = "info"
    elif args.quiet:
        cli_overrides["console_level"] = "error"

    if args.no_color:
        cli_overrides["console_colors"] = False

    if args.log_file:
        cli_overrides["file_enabled"] = True
        cli_overrides["file_path"] = args.log_file

    # Initial logging until the configuration file is read
    setup_logging(replace(LogConfig(console_level="warning"), **cli_overrides))

    if args.validate:
        return validate_config(config_path)

    try:
        if args.once:
            sys.stdout.write(asyncio.run(collect_once(config_path, cli_overrides)))
        else:
            asyncio.run(
                run_app(config_path, cli_overrides=cli_overrides, listen=args.listen, port=args.port)
            )
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
