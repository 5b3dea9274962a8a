"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from sqlargs.ast import MapArgs, MapCall, Script
from sqlargs.lexer import tokenize
from sqlargs.parser import parse, parse_map_args
from sqlargs.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses a script and returns a Script."""

    def _parse(source: str, filename: str = "test.sqla") -> Script:
        return parse(source, filename)

    return _parse


@pytest.fixture
def parse_args():
    """Return a helper that parses bare map arguments."""

    def _parse(source: str) -> MapArgs:
        return parse_map_args(source)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_map(
    node: object,
    declared: tuple[str, ...],
    references: tuple[str, ...],
) -> None:
    """Assert the declared and referenced names of a MapCall node."""
    assert isinstance(node, MapCall), f"Expected MapCall, got {type(node).__name__}"
    assert node.args.declared == declared, f"Expected {declared}, got {node.args.declared}"
    refs = node.args.template.references
    assert refs == references, f"Expected {references}, got {refs}"
