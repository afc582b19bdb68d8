"""
Lexer (tokenizer) for the nginx-like configuration syntax.

Supports:
- Identifiers (block types, directive names, bare words like `info`)
- Quoted strings (single or double quotes, backslash escapes)
- Numbers, and durations with a unit suffix (500ms, 10s, 5m, 1h, 1d)
- Booleans: on, off, true, false
- Braces, semicolons and `#` comments
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """Token types for the config syntax."""

    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    DURATION = auto()  # value in seconds
    BOOLEAN = auto()
    LBRACE = auto()
    RBRACE = auto()
    SEMICOLON = auto()
    EOF = auto()


@dataclass
class Token:
    """A single token from the lexer."""

    type: TokenType
    value: str | int | float | bool
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class LexerError(Exception):
    """Exception raised for lexer errors."""

    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"Line {line}, column {column}: {message}")


BOOLEAN_KEYWORDS = {"on": True, "off": False, "true": True, "false": False}

# Duration units in seconds
DURATION_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600, "d": 86400}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}

_TOKEN_RE = re.compile(
    r"""
    (?P<space>[ \t\r\n]+)
  | (?P<comment>\#[^\n]*)
  | (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
  | (?P<number>\d+(?:\.\d+)?)(?P<unit>[A-Za-z]+)?
  | (?P<word>[A-Za-z_][A-Za-z0-9_\-]*)
  | (?P<punct>[{};])
    """,
    re.VERBOSE,
)

_PUNCTUATION = {"{": TokenType.LBRACE, "}": TokenType.RBRACE, ";": TokenType.SEMICOLON}


def _unescape(body: str) -> str:
    return re.sub(r"\\(.)", lambda m: ESCAPES.get(m.group(1), m.group(1)), body)


class Lexer:
    """
    Tokenizer for the configuration syntax.

    Example config:
        server {
            port 9011;
        }

        module "powercap" {
            enabled on;
            interval 1s;
        }
    """

    def __init__(self, source: str, filename: str = "<string>"):
        self.source = source
        self.filename = filename

    def _position(self, offset: int) -> tuple[int, int]:
        line = self.source.count("\n", 0, offset) + 1
        column = offset - (self.source.rfind("\n", 0, offset) + 1) + 1
        return line, column

    def tokenize(self) -> Iterator[Token]:
        """Generate all tokens from the source, ending with EOF."""
        pos = 0
        while pos < len(self.source):
            match = _TOKEN_RE.match(self.source, pos)
            line, column = self._position(pos)

            if match is None:
                char = self.source[pos]
                if char in "\"'":
                    raise LexerError("Unterminated string literal", line, column)
                raise LexerError(f"Unexpected character: {char!r}", line, column)

            pos = match.end()

            if match.group("space") or match.group("comment"):
                continue

            if match.group("string"):
                text = match.group("string")
                yield Token(TokenType.STRING, _unescape(text[1:-1]), line, column)
            elif match.group("number"):
                yield self._number(match.group("number"), match.group("unit"), line, column)
            elif match.group("word"):
                word = match.group("word")
                if word.lower() in BOOLEAN_KEYWORDS:
                    yield Token(TokenType.BOOLEAN, BOOLEAN_KEYWORDS[word.lower()], line, column)
                else:
                    yield Token(TokenType.IDENTIFIER, word, line, column)
            else:
                char = match.group("punct")
                yield Token(_PUNCTUATION[char], char, line, column)

        line, column = self._position(len(self.source))
        yield Token(TokenType.EOF, "", line, column)

    def _number(self, digits: str, unit: str | None, line: int, column: int) -> Token:
        value: int | float = float(digits) if "." in digits else int(digits)
        if unit is None:
            return Token(TokenType.NUMBER, value, line, column)

        unit = unit.lower()
        if unit not in DURATION_UNITS:
            raise LexerError(f"Unknown duration unit: {unit}", line, column)
        return Token(TokenType.DURATION, value * DURATION_UNITS[unit], line, column)

    def __iter__(self) -> Iterator[Token]:
        return self.tokenize()


def tokenize(source: str, filename: str = "<string>") -> list[Token]:
    """Convenience function to tokenize a source string."""
    return list(Lexer(source, filename))
