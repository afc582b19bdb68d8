"""
Configuration parsing module with nginx-like syntax support.
"""

from .lexer import Lexer, LexerError, Token, TokenType
from .loader import ConfigError, ConfigLoader, load_config
from .parser import Block, ConfigDocument, ConfigParser, ConfigSyntaxError, Directive
from .schema import Config, DefaultsConfig, LoggingConfig, ModuleConfig, ServerConfig

__all__ = [
    "Lexer",
    "LexerError",
    "Token",
    "TokenType",
    "ConfigParser",
    "ConfigSyntaxError",
    "ConfigDocument",
    "Block",
    "Directive",
    "Config",
    "DefaultsConfig",
    "LoggingConfig",
    "ModuleConfig",
    "ServerConfig",
    "ConfigLoader",
    "ConfigError",
    "load_config",
]
