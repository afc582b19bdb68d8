"""
Main application orchestrator.

Handles:
- Configuration loading
- Source module creation
- HTTP endpoint lifecycle
- Graceful shutdown
"""

import asyncio
import signal
from dataclasses import replace
from pathlib import Path
from typing import Any

from aiohttp import web

from .aggregator import Aggregator
from .collectors import MODULES, create_modules
from .config.loader import ConfigLoader
from .config.schema import Config, LoggingConfig
from .const import APP_NAME
from .logging import LogConfig, get_logger, setup_logging
from .registry import MetricRegistry
from .server import create_app


logger = get_logger("app")


class Application:
    """
    Main application class.

    Owns the aggregator and serves it over HTTP until a shutdown signal.
    """

    def __init__(self, config: Config):
        """
        Initialize application.

        Args:
            config: Application configuration
        """
        self.config = config
        self.modules = create_modules(config)
        self.aggregator = Aggregator(self.modules, MetricRegistry())

        self._runner: web.AppRunner | None = None
        self._shutdown_event = asyncio.Event()

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._signal_handler)

    def _signal_handler(self) -> None:
        """Handle shutdown signals."""
        logger.info("Received shutdown signal")
        self._shutdown_event.set()

    async def start(self) -> None:
        """Start serving and block until shutdown."""
        logger.info(f"Starting {APP_NAME}")

        active = [module.name for module in self.aggregator.active_modules]
        logger.info(f"Active modules ({len(active)}): {', '.join(active) or 'none'}")

        self._runner = web.AppRunner(create_app(self.aggregator), handle_signals=False)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.config.server.listen, self.config.server.port)
        await site.start()

        self._setup_signal_handlers()

        logger.info(
            f"Serving metrics on http://{self.config.server.listen}:{self.config.server.port}/metrics"
        )

        await self._shutdown_event.wait()
        await self.stop()

    async def stop(self) -> None:
        """Stop the HTTP endpoint."""
        logger.info(f"Stopping {APP_NAME}")

        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

        logger.info(f"{APP_NAME} stopped")

    async def run(self) -> None:
        """Run the application until shutdown."""
        try:
            await self.start()
        except Exception as e:
            logger.error(f"Application error: {e}")
            raise

    async def run_once(self) -> str:
        """Run a single collection cycle and return the exposition."""
        return await self.aggregator.collect_cycle()


def build_log_config(settings: LoggingConfig, cli_overrides: dict[str, Any] | None = None) -> LogConfig:
    """
    Build the logging setup from the `logging` block.

    cli_overrides holds only the LogConfig fields the command line set
    explicitly (e.g. -d sets console_level); each one replaces the value
    from the configuration file.
    """
    log_config = LogConfig(
        console_level=settings.level,
        console_colors=settings.colors,
        file_enabled=settings.file is not None,
        file_path=settings.file or LogConfig.file_path,
        file_level=settings.file_level,
        file_max_bytes=settings.file_max_size * 1024 * 1024,
        file_backup_count=settings.file_keep,
        format=settings.format,
        module_levels=dict(settings.module_levels) or None,
    )
    return replace(log_config, **(cli_overrides or {}))


def load_app_config(
    config_path: str | Path | None,
    cli_overrides: dict[str, Any] | None = None,
) -> Config:
    """
    Load configuration, set up logging and report validation warnings.

    Args:
        config_path: Path to configuration file (None = built-in defaults)
        cli_overrides: Logging fields set on the command line

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    loader = ConfigLoader(module_names=MODULES)
    config = loader.load_file(config_path) if config_path is not None else Config()

    setup_logging(build_log_config(config.logging, cli_overrides))

    if config_path is not None:
        logger.info(f"Loaded configuration from {config_path}")
    else:
        logger.info("No configuration file, using defaults")

    for warning in loader.validate(config):
        logger.warning(f"Config warning: {warning}")

    return config


async def run_app(
    config_path: str | Path | None,
    cli_overrides: dict[str, Any] | None = None,
    listen: str | None = None,
    port: int | None = None,
) -> None:
    """
    Load configuration and serve until shutdown.

    Args:
        config_path: Path to configuration file (None = built-in defaults)
        cli_overrides: Logging fields set on the command line
        listen: Listen address overriding the configuration
        port: Port overriding the configuration
    """
    config = load_app_config(config_path, cli_overrides)
    if listen is not None:
        config.server.listen = listen
    if port is not None:
        config.server.port = port

    app = Application(config)
    await app.run()
