"""Invocation parser — converts a token stream into an AST."""

from __future__ import annotations

import keyword
from enum import Enum, auto

from sqlargs.ast import (
    BindMode,
    Literal,
    MapArgs,
    MapCall,
    Param,
    Placeholder,
    Script,
    Template,
    UppercaseCall,
)
from sqlargs.errors import GrammarError
from sqlargs.lexer import tokenize
from sqlargs.tokens import Position, Span, Token, TokenType, describe

INVOCATIONS = ("map", "to_uppercase")

_LITERALS = (TokenType.STRING, TokenType.RAW_STRING)
_MARKERS = (TokenType.COLON, TokenType.HASH)


class _State(Enum):
    HEADER = auto()  # declared parameter names, up to '=>'
    BODY = auto()  # literal (marker ident)? repeated until the end token


class Parser:
    """Parser for map/to_uppercase invocations.

    The map argument grammar is scanned by an explicit two-state loop so that
    every failure points at the exact token that broke it.
    """

    def __init__(self, tokens: list[Token], source: str, filename: str) -> None:
        self._tokens = tokens
        self._source = source
        self._filename = filename
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _expect(self, tt: TokenType, what: str) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._unexpected(what, tok)
        return self._advance()

    def _expect_ident(self, what: str) -> Token:
        tok = self._peek()
        if tok.type != TokenType.IDENTIFIER:
            raise self._unexpected(what, tok)
        if keyword.iskeyword(tok.value):
            raise self._error(f"expected {what}, found keyword '{tok.value}'", tok.span)
        if not tok.value.isidentifier():
            # e.g. 'x²': lexes as one word but is not a Python name
            raise self._error(
                f"expected {what}, found invalid identifier '{tok.value}'", tok.span
            )
        return self._advance()

    def _prev_end(self) -> Position:
        """End position of the previously consumed token."""
        if self._pos > 0:
            return self._tokens[self._pos - 1].span.end
        return self._tokens[0].span.start

    def _unexpected(self, what: str, tok: Token) -> GrammarError:
        return self._error(f"expected {what}, found {describe(tok)}", tok.span)

    def _error(self, message: str, span: Span) -> GrammarError:
        return GrammarError(message, span, self._source)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> Script:
        start = self._peek().span.start
        invocations: list[MapCall | UppercaseCall] = []

        while not self._at_eof():
            invocations.append(self._parse_invocation())

        end = self._peek().span.end
        return Script(tuple(invocations), Span(start, end))

    def parse_map_args(self) -> MapArgs:
        """Parse a bare ``params => template`` sequence spanning the whole input."""
        return self._parse_map_args(TokenType.EOF)

    def parse_uppercase_arg(self) -> UppercaseCall:
        """Parse input that must be exactly one identifier."""
        start = self._peek().span.start
        tok = self._expect_ident("identifier")
        self._expect(TokenType.EOF, "a single identifier")
        return UppercaseCall(tok.value, tok.span, Span(start, self._prev_end()))

    # ------------------------------------------------------------------
    # Invocations
    # ------------------------------------------------------------------

    def _parse_invocation(self) -> MapCall | UppercaseCall:
        start = self._peek().span.start
        name_tok = self._expect(TokenType.IDENTIFIER, "'map' or 'to_uppercase'")
        name = name_tok.value
        if name not in INVOCATIONS:
            raise self._error(
                f"unknown invocation '{name}' (expected 'map' or 'to_uppercase')",
                name_tok.span,
            )
        self._expect(TokenType.LPAREN, f"'(' after '{name}'")

        if name == "map":
            args = self._parse_map_args(TokenType.RPAREN)
            self._advance()  # consume RPAREN
            return MapCall(args, Span(start, self._prev_end()))

        ident = self._expect_ident("identifier")
        self._expect(TokenType.RPAREN, "')' after identifier")
        return UppercaseCall(ident.value, ident.span, Span(start, self._prev_end()))

    # ------------------------------------------------------------------
    # Map arguments
    # ------------------------------------------------------------------

    def _parse_map_args(self, end: TokenType) -> MapArgs:
        """Scan ``ident* => (literal (marker ident)?)*`` up to the end token.

        The end token itself is left unconsumed.
        """
        start = self._peek().span.start
        or_close = " or ')'" if end == TokenType.RPAREN else ""
        params: list[Param] = []
        segments: list[Literal | Placeholder] = []
        state = _State.HEADER

        while True:
            tok = self._peek()

            if state is _State.HEADER:
                if tok.type == TokenType.ARROW:
                    self._advance()
                    state = _State.BODY
                    continue
                name_tok = self._expect_ident("parameter name or '=>'")
                params.append(Param(name_tok.value, len(params), name_tok.span))
                continue

            # BODY: input may end before any literal or after any segment
            if tok.type == end:
                break
            if tok.type not in _LITERALS:
                raise self._unexpected(f"string literal{or_close}", tok)
            self._advance()
            segments.append(Literal(tok.value, tok.span))

            if self._at(end):
                break
            marker = self._peek()
            if marker.type not in _MARKERS:
                raise self._unexpected(f"':' or '#'{or_close}", marker)
            self._advance()
            name_tok = self._expect_ident(f"parameter name after '{marker.value}'")
            segments.append(
                Placeholder(
                    BindMode(marker.value),
                    name_tok.value,
                    name_tok.span,
                    Span(marker.span.start, name_tok.span.end),
                )
            )

        end_pos = self._prev_end()
        if segments:
            template_span = Span(segments[0].span.start, segments[-1].span.end)
        else:
            template_span = Span(end_pos, end_pos)
        return MapArgs(tuple(params), Template(tuple(segments), template_span), Span(start, end_pos))


def parse(source: str, filename: str = "input.sqla") -> Script:
    """Convenience function: tokenize and parse a script of invocations."""
    tokens = tokenize(source, filename)
    return Parser(tokens, source, filename).parse()


def parse_map_args(source: str, filename: str = "<map>") -> MapArgs:
    """Tokenize and parse the arguments of a single map invocation."""
    tokens = tokenize(source, filename)
    return Parser(tokens, source, filename).parse_map_args()


def parse_uppercase_arg(source: str, filename: str = "<to_uppercase>") -> UppercaseCall:
    """Tokenize and parse the argument of a single to_uppercase invocation."""
    tokens = tokenize(source, filename)
    return Parser(tokens, source, filename).parse_uppercase_arg()
