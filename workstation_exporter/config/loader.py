"""
Configuration loader with file reading and validation.
"""

from collections.abc import Iterable
from pathlib import Path

from .lexer import LexerError
from .parser import ConfigDocument, ConfigSyntaxError, parse_config, parse_config_file
from .schema import Config


class ConfigError(Exception):
    """Exception raised for configuration errors."""


class ConfigLoader:
    """
    Loads and validates configuration from files or strings.

    Usage:
        loader = ConfigLoader()
        config = loader.load_file("/etc/workstation-exporter/config.conf")
        # or
        config = loader.load_string(config_text)
    """

    # Known directives for each block type
    KNOWN_DIRECTIVES = {
        "server": {"listen", "port"},
        "logging": {
            "level", "file", "file_level", "file_max_size", "file_keep", "colors", "format",
            "module_level",
        },
        "defaults": {"timeout"},
        "module": {"enabled", "timeout", "command", "path", "interval"},
    }

    def __init__(self, module_names: Iterable[str] | None = None):
        """
        Args:
            module_names: Names accepted in `module "<name>"` blocks
                (None skips that check)
        """
        self.module_names = set(module_names) if module_names is not None else None
        self.last_document: ConfigDocument | None = None

    def load_file(self, path: str | Path) -> Config:
        """
        Load configuration from a file.

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.is_file():
            raise ConfigError(f"Not a file: {path}")

        try:
            document = parse_config_file(path)
        except OSError as e:
            raise ConfigError(f"Failed to read configuration: {e}") from e
        except (LexerError, ConfigSyntaxError) as e:
            raise ConfigError(f"Failed to parse configuration: {e}") from e
        return self._build(document)

    def load_string(self, source: str, filename: str = "<string>") -> Config:
        """
        Load configuration from a string.

        Raises:
            ConfigError: If configuration cannot be parsed
        """
        try:
            document = parse_config(source, filename)
        except (LexerError, ConfigSyntaxError) as e:
            raise ConfigError(f"Failed to parse configuration: {e}") from e
        return self._build(document)

    def _build(self, document: ConfigDocument) -> Config:
        self.last_document = document
        try:
            return Config.from_document(document)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value in {document.filename}: {e}") from e

    def validate(self, config: Config) -> list[str]:
        """
        Validate configuration and return list of warnings.

        Args:
            config: Configuration to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if self.last_document:
            warnings.extend(self._check_unknown(self.last_document))

        if not 0 < config.server.port < 65536:
            warnings.append(f"Port {config.server.port} is out of range")

        for name, module in config.modules.items():
            if not name:
                warnings.append("Module block without a name is ignored")
            elif self.module_names is not None and name not in self.module_names:
                warnings.append(f"Unknown module '{name}'")
            if module.timeout <= 0:
                warnings.append(f"Module '{name}' timeout must be positive")
            if module.interval is not None and module.timeout <= module.interval:
                warnings.append(
                    f"Module '{name}' timeout {module.timeout}s does not exceed "
                    f"its sampling interval {module.interval}s"
                )

        return warnings

    def _check_unknown(self, document: ConfigDocument) -> list[str]:
        """Check for unknown blocks and directives in the parsed document."""
        warnings = []

        for directive in document.directives:
            warnings.append(
                f"Unknown top-level directive '{directive.name}' (line {directive.line})"
            )

        for block in document.blocks:
            known = self.KNOWN_DIRECTIVES.get(block.type)
            if known is None:
                warnings.append(f"Unknown block '{block.type}' (line {block.line})")
                continue
            for directive in block.directives:
                if directive.name not in known:
                    warnings.append(
                        f"Unknown directive '{directive.name}' in {block.type} block "
                        f"(line {directive.line})"
                    )
                elif directive.name == "module_level" and len(directive.values) != 2:
                    warnings.append(
                        f"module_level expects a logger name and a level (line {directive.line})"
                    )
            for nested in block.blocks:
                warnings.append(
                    f"Unexpected block '{nested.type}' in {block.type} block (line {nested.line})"
                )

        return warnings


def load_config(path: str | Path) -> Config:
    """Convenience function to load configuration from a file."""
    return ConfigLoader().load_file(path)
