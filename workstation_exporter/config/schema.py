"""
Configuration schema with dataclasses for validation and type safety.

Defines all configuration sections, their fields and defaults.
"""

from dataclasses import dataclass, field
from typing import Any

from ..const import DEFAULT_LISTEN, DEFAULT_PORT, DEFAULT_PROBE_TIMEOUT
from .parser import Block, ConfigDocument


DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _optional_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


@dataclass
class ServerConfig:
    """HTTP endpoint configuration."""

    listen: str = DEFAULT_LISTEN
    port: int = DEFAULT_PORT

    @classmethod
    def from_block(cls, block: Block | None) -> "ServerConfig":
        """Create ServerConfig from a parsed 'server' block."""
        if block is None:
            return cls()

        return cls(
            listen=str(block.get_value("listen", DEFAULT_LISTEN)),
            port=int(block.get_value("port", DEFAULT_PORT)),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"  # debug, info, warning, error
    file: str | None = None
    file_level: str = "debug"
    file_max_size: int = 10  # MB
    file_keep: int = 5
    colors: bool = True
    format: str = DEFAULT_LOG_FORMAT
    # logger name -> level, from `module_level "collectors.memory" debug;`
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_block(cls, block: Block | None) -> "LoggingConfig":
        """Create LoggingConfig from a parsed 'logging' block."""
        if block is None:
            return cls()

        module_levels = {
            str(directive.values[0]): str(directive.values[1])
            for directive in block.directives
            if directive.name == "module_level" and len(directive.values) >= 2
        }

        return cls(
            level=str(block.get_value("level", "info")),
            file=block.get_value("file"),
            file_level=str(block.get_value("file_level", "debug")),
            file_max_size=int(block.get_value("file_max_size", 10)),
            file_keep=int(block.get_value("file_keep", 5)),
            colors=bool(block.get_value("colors", True)),
            format=block.get_value("format", DEFAULT_LOG_FORMAT),
            module_levels=module_levels,
        )


@dataclass
class DefaultsConfig:
    """Settings applied to every module unless overridden."""

    timeout: float = DEFAULT_PROBE_TIMEOUT

    @classmethod
    def from_block(cls, block: Block | None) -> "DefaultsConfig":
        if block is None:
            return cls()
        return cls(timeout=float(block.get_value("timeout", DEFAULT_PROBE_TIMEOUT)))


@dataclass
class ModuleConfig:
    """
    Per-module settings.

    `enabled` is None when the configuration does not say, in which case
    the module's own default applies. `command` is used by command-based
    modules, `path` by sysfs modules (file, glob pattern or root).
    """

    name: str
    enabled: bool | None = None
    timeout: float = DEFAULT_PROBE_TIMEOUT
    command: str | None = None
    path: str | None = None
    interval: float | None = None

    @classmethod
    def from_block(cls, block: Block, defaults: DefaultsConfig) -> "ModuleConfig":
        """Create ModuleConfig from a parsed 'module' block."""
        return cls(
            name=block.name or "",
            enabled=_optional_bool(block.get_value("enabled")),
            timeout=float(block.get_value("timeout", defaults.timeout)),
            command=block.get_value("command"),
            path=block.get_value("path"),
            interval=_optional_float(block.get_value("interval")),
        )


@dataclass
class Config:
    """Complete application configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    modules: dict[str, ModuleConfig] = field(default_factory=dict)

    def module(self, name: str) -> ModuleConfig:
        """Settings for a module, falling back to defaults if not configured."""
        if name in self.modules:
            return self.modules[name]
        return ModuleConfig(name=name, timeout=self.defaults.timeout)

    @classmethod
    def from_document(cls, doc: ConfigDocument) -> "Config":
        """Create Config from a parsed ConfigDocument."""
        config = cls(
            server=ServerConfig.from_block(doc.get_block("server")),
            logging=LoggingConfig.from_block(doc.get_block("logging")),
            defaults=DefaultsConfig.from_block(doc.get_block("defaults")),
        )

        for block in doc.get_blocks("module"):
            module_config = ModuleConfig.from_block(block, config.defaults)
            config.modules[module_config.name] = module_config

        return config
