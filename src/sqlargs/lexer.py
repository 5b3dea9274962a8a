"""Invocation lexer — converts source text into a flat token stream."""

from __future__ import annotations

import textwrap

from sqlargs.errors import LexError
from sqlargs.tokens import (
    Position,
    Span,
    Token,
    TokenType,
    is_hex_digit,
    is_ident_char,
    is_ident_start,
)

_SINGLE = {
    ":": TokenType.COLON,
    "#": TokenType.HASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

_STRING_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
}


class Lexer:
    """Tokenize invocation source text into a stream of Token objects.

    Whitespace and ``//`` line comments separate tokens and are dropped.
    """

    def __init__(self, source: str, filename: str = "input.sqla") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._lex_next()
        self._emit(TokenType.EOF, "", "")
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_next(self) -> None:
        ch = self._peek()

        if ch == "\0":
            raise self._error("NUL character in source")

        if ch in " \t\r\n":
            self._advance()
            return

        if ch == "/" and self._peek(1) == "/":
            while self._pos < len(self._source) and self._peek() != "\n":
                self._advance()
            return

        if ch in _SINGLE:
            start = self._current_pos()
            self._advance()
            self._emit(_SINGLE[ch], ch, ch, start)
            return

        if ch == "=" and self._peek(1) == ">":
            start = self._current_pos()
            self._advance()
            self._advance()
            self._emit(TokenType.ARROW, "=>", "=>", start)
            return

        if ch == '"':
            self._lex_string_open()
            return

        if is_ident_start(ch):
            self._lex_word(TokenType.IDENTIFIER)
            return

        if ch.isdigit():
            self._lex_word(TokenType.NUMBER)
            return

        start = self._current_pos()
        self._advance()
        self._emit(TokenType.PUNCT, ch, ch, start)

    def _lex_word(self, tt: TokenType) -> None:
        start = self._current_pos()
        chars = [self._advance()]
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        self._emit(tt, text, text, start)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _lex_string_open(self) -> None:
        start = self._current_pos()
        quote_count = 0
        while self._pos < len(self._source) and self._peek() == '"':
            self._advance()
            quote_count += 1

        if quote_count == 1:
            self._lex_string_body(start)
            return

        if quote_count == 2:
            self._emit(TokenType.STRING, "", '""', start)
            return

        self._lex_raw_string(quote_count, start)

    def _lex_string_body(self, start: Position) -> None:
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._peek()
            if ch == '"':
                self._advance()
                raw = self._source[start.offset : self._pos]
                self._emit(TokenType.STRING, "".join(chars), raw, start)
                return
            if ch == "\0":
                raise self._error("NUL character in source")
            if ch == "\\":
                chars.append(self._lex_string_escape())
            else:
                chars.append(self._advance())
        raise self._error("unterminated string literal", start)

    def _lex_string_escape(self) -> str:
        start = self._current_pos()
        self._advance()  # consume backslash

        if self._pos >= len(self._source):
            raise self._error("unexpected end of input in string escape", start)

        ch = self._peek()
        if ch in _STRING_ESCAPES:
            self._advance()
            return _STRING_ESCAPES[ch]
        if ch == "x":
            self._advance()
            return self._lex_hex_escape(2, start)
        if ch == "U":
            self._advance()
            return self._lex_hex_escape(8, start)
        if ch == "u":
            self._advance()
            return self._lex_braced_escape(start)

        raise self._error(f"invalid string escape sequence '\\{ch}'", start)

    def _lex_hex_escape(self, count: int, start: Position) -> str:
        """Read `count` hex digits and return the resolved character."""
        digits = []
        for i in range(count):
            if self._pos >= len(self._source):
                raise self._error(
                    f"incomplete escape: expected {count} hex digits, got {i}", start
                )
            ch = self._peek()
            if not is_hex_digit(ch):
                raise self._error(f"invalid hex digit '{ch}' in escape sequence", start)
            digits.append(self._advance())
        hex_str = "".join(digits)
        codepoint = int(hex_str, 16)
        if codepoint > 0x10FFFF:
            raise self._error(f"Unicode codepoint U+{hex_str} is out of range", start)
        return chr(codepoint)

    def _lex_braced_escape(self, start: Position) -> str:
        """Read ``{H...}`` (1 to 6 hex digits) after ``\\u``."""
        if self._pos >= len(self._source) or self._peek() != "{":
            raise self._error("expected '{' after '\\u' in escape sequence", start)
        self._advance()
        digits = []
        while self._pos < len(self._source) and self._peek() != "}":
            ch = self._peek()
            if not is_hex_digit(ch):
                raise self._error(f"invalid hex digit '{ch}' in escape sequence", start)
            digits.append(self._advance())
        if self._pos >= len(self._source):
            raise self._error("unterminated unicode escape", start)
        self._advance()  # consume '}'
        if not 1 <= len(digits) <= 6:
            raise self._error("unicode escape must have 1 to 6 hex digits", start)
        hex_str = "".join(digits)
        codepoint = int(hex_str, 16)
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            raise self._error(f"invalid Unicode codepoint U+{hex_str.upper()}", start)
        return chr(codepoint)

    def _lex_raw_string(self, delimiter_count: int, start: Position) -> None:
        """Scan for delimiter_count closing quotes and emit RAW_STRING."""
        content_start = self._pos

        while self._pos < len(self._source):
            if self._peek() == '"':
                run_start = self._pos
                run_count = 0
                while self._pos < len(self._source) and self._peek() == '"':
                    self._advance()
                    run_count += 1
                if run_count == delimiter_count:
                    content = self._source[content_start:run_start]
                    raw = self._source[start.offset : self._pos]
                    self._emit(TokenType.RAW_STRING, _strip_raw(content), raw, start)
                    return
            else:
                self._advance()

        raise self._error(
            f"unterminated raw string (expected {delimiter_count} closing quotes)", start
        )


def _strip_raw(content: str) -> str:
    """Drop a blank first and last line, then the common indentation."""
    lines = content.split("\n")
    if len(lines) > 1 and not lines[0].strip(" \t"):
        lines = lines[1:]
    if len(lines) > 1 and not lines[-1].strip(" \t"):
        lines = lines[:-1]
    return textwrap.dedent("\n".join(lines))


def tokenize(source: str, filename: str = "input.sqla") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
