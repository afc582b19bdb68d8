"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest

from workstation_exporter.collectors import MODULES
from workstation_exporter.config.lexer import LexerError, TokenType, tokenize
from workstation_exporter.config.loader import ConfigError, ConfigLoader
from workstation_exporter.config.parser import ConfigSyntaxError, parse_config
from workstation_exporter.config.schema import Config
from workstation_exporter.const import DEFAULT_PORT


def test_tokenize_values() -> None:
    """Numbers, durations, booleans and strings are tokenized."""
    tokens = tokenize('port 9011; timeout 500ms; enabled off; path "/sys/a b";')

    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.SEMICOLON,
        TokenType.IDENTIFIER, TokenType.DURATION, TokenType.SEMICOLON,
        TokenType.IDENTIFIER, TokenType.BOOLEAN, TokenType.SEMICOLON,
        TokenType.IDENTIFIER, TokenType.STRING, TokenType.SEMICOLON,
        TokenType.EOF,
    ]
    assert tokens[1].value == 9011
    assert tokens[4].value == pytest.approx(0.5)
    assert tokens[7].value is False
    assert tokens[10].value == "/sys/a b"


def test_tokenize_comments_and_positions() -> None:
    """Comments are skipped and line numbers kept."""
    tokens = tokenize("# comment\n  server {\n}")
    assert tokens[0].value == "server"
    assert (tokens[0].line, tokens[0].column) == (2, 3)


def test_tokenize_unterminated_string() -> None:
    """An unterminated string is a lexer error."""
    with pytest.raises(LexerError, match="Unterminated"):
        tokenize('command "sensors -j;')


def test_tokenize_unknown_unit() -> None:
    """An unknown duration unit is a lexer error."""
    with pytest.raises(LexerError):
        tokenize("timeout 5parsecs;")


def test_parse_blocks() -> None:
    """Named and unnamed blocks are parsed with their directives."""
    doc = parse_config("""
        server { port 9100; }
        module "memory" { enabled off; command "free -m"; }
        module "mpstat" { }
    """)

    assert doc.get_block("server").get_value("port") == 9100
    modules = doc.get_blocks("module")
    assert [m.name for m in modules] == ["memory", "mpstat"]
    assert modules[0].get_value("enabled") is False
    assert modules[0].get_value("missing", "fallback") == "fallback"


def test_parse_later_directive_wins() -> None:
    """A repeated directive takes the last value."""
    doc = parse_config("server { port 1; port 2; }")
    assert doc.get_block("server").get_value("port") == 2


@pytest.mark.parametrize(
    "source",
    [
        "server { port 9011 }",
        "server { port 9011;",
        '"server" { }',
        'module "a" "b" { }',
    ],
)
def test_parse_errors(source: str) -> None:
    """Malformed documents raise a syntax error."""
    with pytest.raises(ConfigSyntaxError):
        parse_config(source)


def test_empty_config_uses_defaults() -> None:
    """An empty file yields the built-in defaults."""
    config = ConfigLoader().load_string("")

    assert config.server.port == DEFAULT_PORT
    assert config.server.listen == "0.0.0.0"
    assert config.modules == {}
    assert config.module("powercap").enabled is None


def test_load_string_values() -> None:
    """Directive values land in the schema dataclasses."""
    config = ConfigLoader().load_string("""
        server { listen "127.0.0.1"; port 9100; }
        logging { level debug; colors off; file "/tmp/we.log"; }
        defaults { timeout 4s; }
        module "cpufreq" { path "/tmp/cpu*/scaling_cur_freq"; }
    """)

    assert config.server.listen == "127.0.0.1"
    assert config.server.port == 9100
    assert config.logging.level == "debug"
    assert config.logging.colors is False
    assert config.logging.file == "/tmp/we.log"
    assert config.module("cpufreq").path == "/tmp/cpu*/scaling_cur_freq"
    assert config.module("cpufreq").timeout == 4.0
    assert config.module("memory").timeout == 4.0


def test_load_string_syntax_error() -> None:
    """Syntax errors surface as ConfigError."""
    with pytest.raises(ConfigError):
        ConfigLoader().load_string("server {")


def test_load_string_bad_value() -> None:
    """A value of the wrong type is a ConfigError."""
    with pytest.raises(ConfigError):
        ConfigLoader().load_string("server { port eighty; }")


def test_load_file_missing(tmp_path: Path) -> None:
    """A missing file is a ConfigError."""
    with pytest.raises(ConfigError, match="not found"):
        ConfigLoader().load_file(tmp_path / "nope.conf")


def test_load_example_config(example_config_path: Path) -> None:
    """Test that example config loads without errors."""
    loader = ConfigLoader(module_names=MODULES)
    config = loader.load_file(example_config_path)

    assert isinstance(config, Config)
    assert set(config.modules) == set(MODULES)
    assert config.module("powercap").enabled is False
    assert loader.validate(config) == []


def test_validate_warnings() -> None:
    """validate reports unknown names, bad ports and short timeouts."""
    loader = ConfigLoader(module_names=MODULES)
    config = loader.load_string("""
        mqtt { host "broker"; }
        server { port 70000; bind "x"; }
        module "gpu" { }
        module "powercap" { interval 2s; timeout 1s; }
        stray 1;
    """)

    warnings = loader.validate(config)
    text = "\n".join(warnings)

    assert "Unknown block 'mqtt'" in text
    assert "Unknown directive 'bind'" in text
    assert "Port 70000 is out of range" in text
    assert "Unknown module 'gpu'" in text
    assert "does not exceed its sampling interval" in text
    assert "Unknown top-level directive 'stray'" in text


def test_logging_module_levels() -> None:
    """module_level directives map logger names to levels."""
    loader = ConfigLoader(module_names=MODULES)
    config = loader.load_string("""
        logging {
            level warning;
            module_level "collectors.nvidia_smi" debug;
            module_level "server" error;
        }
    """)

    assert config.logging.module_levels == {"collectors.nvidia_smi": "debug", "server": "error"}
    assert loader.validate(config) == []


def test_logging_module_level_needs_two_values() -> None:
    """A module_level without a level is ignored with a warning."""
    loader = ConfigLoader()
    config = loader.load_string('logging { module_level "server"; }')

    assert config.logging.module_levels == {}
    assert any("module_level expects" in w for w in loader.validate(config))
