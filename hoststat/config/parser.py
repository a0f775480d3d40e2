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


class ParseError(Exception):
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

    ``interval 15s;`` parses to ``Directive(name="interval", values=[15])``.
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
    """A block with a type, an optional quoted name and nested contents."""

    type: str
    name: str | None = None
    directives: list[Directive] = field(default_factory=list)
    blocks: list["Block"] = field(default_factory=list)
    line: int = 0

    def get_directive(self, name: str) -> Directive | None:
        """Get the last directive with given name (later ones override)."""
        found = None
        for directive in self.directives:
            if directive.name == name:
                found = directive
        return found

    def get_value(self, name: str, default: Any = None) -> Any:
        directive = self.get_directive(name)
        if directive is None or directive.value is None:
            return default
        return directive.value

    def get_blocks(self, type_name: str) -> list["Block"]:
        return [b for b in self.blocks if b.type == type_name]

    def get_block(self, type_name: str) -> "Block | None":
        blocks = self.get_blocks(type_name)
        return blocks[0] if blocks else None


@dataclass
class ConfigDocument:
    """Root of a parsed file: top-level blocks and directives."""

    blocks: list[Block] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    filename: str = "<string>"

    def get_blocks(self, type_name: str) -> list[Block]:
        return [b for b in self.blocks if b.type == type_name]

    def get_block(self, type_name: str) -> Block | None:
        blocks = self.get_blocks(type_name)
        return blocks[0] if blocks else None


class ConfigParser:
    """Parses a token stream into a :class:`ConfigDocument`."""

    def __init__(self, source: str, filename: str = "<string>"):
        self.filename = filename
        self._tokens = Lexer(source, filename).tokenize()
        self._current: Token = next(self._tokens)

    def _advance(self) -> Token:
        token = self._current
        if token.type != TokenType.EOF:
            self._current = next(self._tokens)
        return token

    def _expect(self, token_type: TokenType, message: str) -> Token:
        if self._current.type != token_type:
            raise ParseError(message, self._current)
        return self._advance()

    def parse(self) -> ConfigDocument:
        """Parse the whole document."""
        doc = ConfigDocument(filename=self.filename)

        while self._current.type != TokenType.EOF:
            if self._current.type != TokenType.IDENTIFIER:
                raise ParseError(
                    f"Expected block or directive, got {self._current.type.name}",
                    self._current,
                )
            item = self._parse_item()
            if isinstance(item, Block):
                doc.blocks.append(item)
            else:
                doc.directives.append(item)

        return doc

    def _parse_item(self) -> Block | Directive:
        name_token = self._advance()
        name = str(name_token.value)

        values: list[Any] = []
        while self._current.type in VALUE_TOKENS:
            values.append(self._advance().value)

        if self._current.type == TokenType.SEMICOLON:
            self._advance()
            return Directive(name=name, values=values, line=name_token.line)

        if self._current.type != TokenType.LBRACE:
            raise ParseError(f"Expected '{{' or ';' after '{name}'", self._current)

        if len(values) > 1 or (values and not isinstance(values[0], str)):
            raise ParseError(f"Block '{name}' accepts at most one quoted name", name_token)

        return self._parse_block_body(name, values[0] if values else None, name_token.line)

    def _parse_block_body(self, type_name: str, name: str | None, line: int) -> Block:
        self._expect(TokenType.LBRACE, f"Expected '{{' to open '{type_name}' block")
        block = Block(type=type_name, name=name, line=line)

        while self._current.type not in (TokenType.RBRACE, TokenType.EOF):
            if self._current.type != TokenType.IDENTIFIER:
                raise ParseError(
                    f"Expected directive or nested block in '{type_name}' block",
                    self._current,
                )
            item = self._parse_item()
            if isinstance(item, Block):
                block.blocks.append(item)
            else:
                block.directives.append(item)

        self._expect(TokenType.RBRACE, f"Expected '}}' to close '{type_name}' block")
        return block


def parse_config(source: str, filename: str = "<string>") -> ConfigDocument:
    """Parse a configuration string."""
    return ConfigParser(source, filename).parse()


def parse_config_file(path: str | Path) -> ConfigDocument:
    """Parse a configuration file."""
    path = Path(path)
    return parse_config(path.read_text(), str(path))
