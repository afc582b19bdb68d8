"""
Recursive descent parser for the nginx-like configuration syntax.

Grammar:
    document    := (block | directive)*
    block       := IDENTIFIER [STRING] '{' (block | directive)* '}'
    directive   := IDENTIFIER value* ';'
    value       := STRING | NUMBER | DURATION | BOOLEAN | IDENTIFIER
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .lexer import Lexer, Token, TokenType

VALUE_TOKENS = (
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.DURATION,
    TokenType.BOOLEAN,
    TokenType.IDENTIFIER,
)


class ConfigSyntaxError(Exception):
    """Exception raised for parser errors."""

    def __init__(self, message: str, token: Token | None = None):
        self.token = token
        if token:
            super().__init__(f"Line {token.line}, column {token.column}: {message}")
        else:
            super().__init__(message)


@dataclass
class Directive:
    """
    A directive with a name and values.

    Examples:
        port 9011;          -> Directive(name="port", values=[9011])
        enabled off;        -> Directive(name="enabled", values=[False])
        timeout 5s;         -> Directive(name="timeout", values=[5])
    """

    name: str
    values: list[Any] = field(default_factory=list)
    line: int = 0

    @property
    def value(self) -> Any:
        """First value or None."""
        return self.values[0] if self.values else None


@dataclass
class Block:
    """
    A block with a type, optional name and contents.

    Examples:
        server { ... }              -> Block(type="server", name=None)
        module "powercap" { ... }   -> Block(type="module", name="powercap")
    """

    type: str
    name: str | None = None
    directives: list[Directive] = field(default_factory=list)
    blocks: list["Block"] = field(default_factory=list)
    line: int = 0

    def __repr__(self) -> str:
        return f"Block({self.type}, {self.name!r}, directives={len(self.directives)})"

    def get_directive(self, name: str) -> Directive | None:
        """Last directive with the given name (later ones override earlier)."""
        for directive in reversed(self.directives):
            if directive.name == name:
                return directive
        return None

    def get_value(self, name: str, default: Any = None) -> Any:
        directive = self.get_directive(name)
        if directive is None or directive.value is None:
            return default
        return directive.value

    def get_blocks(self, type_name: str) -> list["Block"]:
        return [b for b in self.blocks if b.type == type_name]


@dataclass
class ConfigDocument:
    """Root document; behaves like an anonymous top-level block."""

    blocks: list[Block] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    filename: str = "<string>"

    def get_block(self, type_name: str) -> Block | None:
        """Last block of the given type."""
        matches = self.get_blocks(type_name)
        return matches[-1] if matches else None

    def get_blocks(self, type_name: str) -> list[Block]:
        return [b for b in self.blocks if b.type == type_name]


class ConfigParser:
    """Parser over the lexer's token stream with one token of lookahead."""

    def __init__(self, source: str, filename: str = "<string>"):
        self.filename = filename
        self._tokens = iter(Lexer(source, filename))
        self.current: Token = next(self._tokens)

    def _advance(self) -> Token:
        token = self.current
        if token.type != TokenType.EOF:
            self.current = next(self._tokens)
        return token

    def _expect(self, token_type: TokenType, message: str) -> Token:
        if self.current.type != token_type:
            raise ConfigSyntaxError(message, self.current)
        return self._advance()

    def parse(self) -> ConfigDocument:
        """Parse the entire configuration document."""
        doc = ConfigDocument(filename=self.filename)
        self._parse_body(doc.blocks, doc.directives, TokenType.EOF)
        return doc

    def _parse_body(
        self,
        blocks: list[Block],
        directives: list[Directive],
        terminator: TokenType,
    ) -> None:
        while self.current.type != terminator:
            if self.current.type != TokenType.IDENTIFIER:
                where = "end of input" if self.current.type == TokenType.EOF else repr(self.current.value)
                raise ConfigSyntaxError(f"Expected block or directive, got {where}", self.current)

            item = self._parse_statement()
            if isinstance(item, Block):
                blocks.append(item)
            else:
                directives.append(item)

    def _parse_statement(self) -> Block | Directive:
        name_token = self._advance()
        name = str(name_token.value)

        values: list[Any] = []
        while self.current.type in VALUE_TOKENS:
            values.append(self._advance().value)

        if self.current.type == TokenType.SEMICOLON:
            self._advance()
            return Directive(name=name, values=values, line=name_token.line)

        if self.current.type == TokenType.LBRACE:
            if len(values) > 1 or (values and not isinstance(values[0], str)):
                raise ConfigSyntaxError(
                    f"Block '{name}' takes at most one quoted name", self.current
                )
            self._advance()
            block = Block(type=name, name=values[0] if values else None, line=name_token.line)
            self._parse_body(block.blocks, block.directives, TokenType.RBRACE)
            self._expect(TokenType.RBRACE, f"Expected '}}' to close '{name}' block")
            return block

        raise ConfigSyntaxError(f"Expected '{{' or ';' after '{name}'", self.current)


def parse_config(source: str, filename: str = "<string>") -> ConfigDocument:
    """Parse a configuration string."""
    return ConfigParser(source, filename).parse()


def parse_config_file(path: str | Path) -> ConfigDocument:
    """Parse a configuration file."""
    path = Path(path)
    return parse_config(path.read_text(), str(path))
