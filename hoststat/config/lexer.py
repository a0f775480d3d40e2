"""
Tokenizer for the nginx-like configuration syntax.

Recognizes identifiers, quoted strings, numbers, durations (``10s``,
``5m``, ``500ms``), booleans (``on``/``off``/``true``/``false``), braces and
semicolons. ``#`` line comments and ``/* */`` block comments are skipped.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types for the configuration syntax."""

    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    DURATION = auto()  # value already converted to seconds
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
    """Raised on malformed input."""

    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"Line {line}, column {column}: {message}")


BOOLEAN_KEYWORDS = {"on": True, "off": False, "true": True, "false": False}

# Seconds per unit
DURATION_UNITS = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}

_TOKEN_RE = re.compile(
    r"""
      (?P<newline>\n)
    | (?P<space>[ \t\r]+)
    | (?P<line_comment>\#[^\n]*)
    | (?P<block_comment>/\*.*?\*/)
    | (?P<unterminated_comment>/\*)
    | (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
    | (?P<unterminated_string>["'])
    | (?P<number>-?\d+(?:\.\d+)?)(?P<unit>[A-Za-z]+)?
    | (?P<identifier>[A-Za-z_][A-Za-z0-9_\-]*)
    | (?P<punct>[{};])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_ESCAPE_RE = re.compile(r"\\(.)")

_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
}


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def _number(text: str) -> int | float:
    return float(text) if "." in text else int(text)


class Lexer:
    """
    Tokenizer over a configuration source string.

    Example:
        system {
            interval_seconds 30;
            collect_user_number on;
        }
    """

    def __init__(self, source: str, filename: str = "<string>"):
        self.source = source
        self.filename = filename

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens, ending with a single EOF token."""
        pos = 0
        line = 1
        line_start = 0
        length = len(self.source)

        while pos < length:
            match = _TOKEN_RE.match(self.source, pos)
            column = pos - line_start + 1
            if match is None:
                raise LexerError(f"Unexpected character: {self.source[pos]!r}", line, column)

            kind = match.lastgroup
            text = match.group()

            if kind == "unit":
                # lastgroup reports the trailing optional group for durations
                kind = "number"

            if kind == "unterminated_comment":
                raise LexerError("Unterminated multi-line comment", line, column)
            if kind == "unterminated_string":
                raise LexerError("Unterminated string literal", line, column)

            if kind == "string":
                yield Token(TokenType.STRING, _unescape(text[1:-1]), line, column)
            elif kind == "number":
                yield self._number_token(match, line, column)
            elif kind == "identifier":
                lowered = text.lower()
                if lowered in BOOLEAN_KEYWORDS:
                    yield Token(TokenType.BOOLEAN, BOOLEAN_KEYWORDS[lowered], line, column)
                else:
                    yield Token(TokenType.IDENTIFIER, text, line, column)
            elif kind == "punct":
                yield Token(_PUNCTUATION[text], text, line, column)

            newlines = text.count("\n")
            if newlines:
                line += newlines
                line_start = match.start() + text.rfind("\n") + 1
            pos = match.end()

        yield Token(TokenType.EOF, "", line, pos - line_start + 1)

    def _number_token(self, match: re.Match, line: int, column: int) -> Token:
        value = _number(match.group("number"))
        unit = match.group("unit")
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
