"""Token types, positions, and identifier character classes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Punctuation with grammar meaning
    COLON = auto()  # :  by-value marker
    HASH = auto()  # #  by-reference marker
    ARROW = auto()  # => separates parameters from the template
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # Content
    IDENTIFIER = auto()  # (letter | _) (letter | digit | _)*
    NUMBER = auto()  # digit-led run, never valid in the grammar
    STRING = auto()  # "...", escapes resolved
    RAW_STRING = auto()  # """...""", stripped, no escapes
    PUNCT = auto()  # any other single character

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with resolved value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


def is_ident_start(ch: str) -> bool:
    """Return True if ch may begin an identifier."""
    return ch == "_" or ch.isalpha()


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch == "_" or ch.isalnum()


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch in "0123456789abcdefABCDEF"


def describe(tok: Token) -> str:
    """Human-readable name of a token for diagnostics."""
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type == TokenType.IDENTIFIER:
        return f"identifier '{tok.value}'"
    if tok.type in (TokenType.STRING, TokenType.RAW_STRING):
        return "string literal"
    if tok.type == TokenType.NUMBER:
        return f"number '{tok.raw}'"
    return f"'{tok.raw}'"
