"""
Logging setup for Workstation Exporter.

All loggers live under the "workstation_exporter" namespace. Console
output goes to stderr so that `--once` can print the exposition on
stdout; an optional rotating file receives its own level.
"""

import logging
import logging.handlers
import sys
from dataclasses import dataclass
from pathlib import Path

ROOT_LOGGER = "workstation_exporter"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class Colors:
    """ANSI escape sequences."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BRIGHT_RED = "\033[91m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.DIM + Colors.CYAN,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.BOLD + Colors.BRIGHT_RED,
}

# First dotted component after the root logger -> color
COMPONENT_COLORS = {
    "config": Colors.MAGENTA,
    "server": Colors.BLUE,
    "collectors": Colors.CYAN,
    "aggregator": Colors.GREEN,
    "app": Colors.GREEN,
}


def _component(name: str) -> str:
    parts = name.split(".")
    if parts[0] == ROOT_LOGGER and len(parts) > 1:
        return parts[1]
    return parts[0]


class ColoredFormatter(logging.Formatter):
    """Colors the level name, the component and the text of warnings and errors."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        original = record.levelname, record.name, record.msg

        record.levelname = f"{LEVEL_COLORS.get(record.levelno, '')}{record.levelname:8}{Colors.RESET}"

        component_color = COMPONENT_COLORS.get(_component(record.name))
        if component_color:
            record.name = f"{component_color}{record.name}{Colors.RESET}"

        if record.levelno >= logging.WARNING:
            text_color = Colors.RED if record.levelno >= logging.ERROR else Colors.YELLOW
            record.msg = f"{text_color}{record.msg}{Colors.RESET}"

        try:
            return super().format(record)
        finally:
            record.levelname, record.name, record.msg = original


class PlainFormatter(logging.Formatter):
    """Fixed-width level names, no escape sequences; used for the log file."""

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        record.levelname = f"{levelname:8}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


@dataclass
class LogConfig:
    """Where log lines go and at which levels."""

    console_level: str = "INFO"
    console_colors: bool = True

    file_enabled: bool = False
    file_path: str = "/var/log/workstation-exporter/workstation-exporter.log"
    file_level: str = "DEBUG"
    file_max_bytes: int = 10 * 1024 * 1024
    file_backup_count: int = 5

    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    # e.g. {"collectors.nvidia_smi": "debug"}
    module_levels: dict[str, str] | None = None


def get_log_level(level_str: str) -> int:
    """Map a level name from configuration to a logging constant (INFO if unknown)."""
    return LEVELS.get(level_str.lower(), logging.INFO)


def setup_logging(config: LogConfig | None = None) -> None:
    """
    (Re)configure the exporter's loggers.

    Safe to call more than once: handlers from a previous call are closed
    and replaced.
    """
    config = config or LogConfig()

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(get_log_level(config.console_level))
    colors = config.console_colors and sys.stderr.isatty()
    console.setFormatter(ColoredFormatter(config.format, config.date_format, use_colors=colors))
    root.addHandler(console)

    if config.file_enabled:
        path = Path(config.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            path, maxBytes=config.file_max_bytes, backupCount=config.file_backup_count
        )
        rotating.setLevel(get_log_level(config.file_level))
        rotating.setFormatter(PlainFormatter(config.format, config.date_format))
        root.addHandler(rotating)

    for name, level in (config.module_levels or {}).items():
        get_logger(name).setLevel(get_log_level(level))

    # One access line per scrape is noise
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, namespaced under workstation_exporter."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
