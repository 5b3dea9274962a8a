"""Tests for grammar error messages and positions."""

from __future__ import annotations

import pytest

from sqlargs.errors import GrammarError
from sqlargs.parser import parse, parse_map_args, parse_uppercase_arg
from sqlargs.tokens import Position, Span


class TestHeaderErrors:
    def test_missing_arrow(self):
        with pytest.raises(GrammarError, match="expected parameter name or '=>', found end of input"):
            parse_map_args("a1 a2")

    def test_missing_arrow_in_invocation(self):
        with pytest.raises(GrammarError, match="found '\\)'"):
            parse("map(a1 a2)")

    def test_string_before_arrow(self):
        with pytest.raises(GrammarError, match="found string literal") as exc_info:
            parse_map_args('a "SELECT" => "x"')
        assert exc_info.value.span.start.column == 3

    def test_keyword_param(self):
        with pytest.raises(GrammarError, match="found keyword 'class'"):
            parse_map_args('class => "x"')

    def test_number_param(self):
        with pytest.raises(GrammarError, match="found number '1a'"):
            parse_map_args('1a => "x"')

    def test_empty_input(self):
        with pytest.raises(GrammarError, match="found end of input"):
            parse_map_args("")

    def test_non_python_identifier_param(self):
        with pytest.raises(GrammarError, match="found invalid identifier 'a½'") as exc_info:
            parse_map_args('a½ => "x" :a½')
        assert exc_info.value.span.start.column == 1
        assert exc_info.value.span.end.column == 3

    def test_non_python_identifier_reference(self):
        with pytest.raises(
            GrammarError, match="expected parameter name after ':', found invalid identifier 'a½'"
        ) as exc_info:
            parse_map_args('a => "x" :a½')
        assert exc_info.value.span.start.column == 11


class TestBodyErrors:
    def test_marker_without_identifier(self):
        with pytest.raises(
            GrammarError, match="expected parameter name after ':', found end of input"
        ):
            parse_map_args('a => "x = " :')

    def test_marker_followed_by_string(self):
        with pytest.raises(GrammarError, match="after '#', found string literal"):
            parse_map_args('a => "x IN (" # ")"')

    def test_invalid_marker(self):
        with pytest.raises(GrammarError, match="expected ':' or '#', found '@'") as exc_info:
            parse_map_args('a => "x = " @a')
        err = exc_info.value
        assert err.span.start.line == 1
        assert err.span.start.column == 13

    def test_invalid_marker_in_invocation_mentions_close(self):
        with pytest.raises(GrammarError, match="expected ':' or '#' or '\\)', found '@'"):
            parse('map(a => "x = " @a)')

    def test_adjacent_placeholders(self):
        with pytest.raises(GrammarError, match="expected string literal, found ':'"):
            parse_map_args('a b => "x" :a :b')

    def test_body_starts_with_placeholder(self):
        with pytest.raises(GrammarError, match="expected string literal, found ':'"):
            parse_map_args("a => :a")

    def test_bare_identifier_in_body(self):
        with pytest.raises(GrammarError, match="found identifier 'a'"):
            parse_map_args('a => "x" a')

    def test_keyword_after_marker(self):
        with pytest.raises(GrammarError, match="found keyword 'from'"):
            parse_map_args('a => "x" :from')

    def test_second_arrow(self):
        with pytest.raises(GrammarError, match="found '=>'"):
            parse_map_args('a => "x" => "y"')

    def test_unclosed_map(self):
        with pytest.raises(GrammarError, match="expected string literal or '\\)', found end of input"):
            parse('map(a => "x" :a')


class TestInvocationErrors:
    def test_unknown_invocation(self):
        with pytest.raises(GrammarError, match="unknown invocation 'mapp'"):
            parse('mapp(a => "x")')

    def test_missing_lparen(self):
        with pytest.raises(GrammarError, match="expected '\\(' after 'map'"):
            parse('map a => "x"')

    def test_not_an_invocation(self):
        with pytest.raises(GrammarError, match="expected 'map' or 'to_uppercase', found string literal"):
            parse('"SELECT 1"')

    def test_uppercase_two_identifiers(self):
        with pytest.raises(GrammarError, match="expected '\\)' after identifier, found identifier 'b'"):
            parse("to_uppercase(a b)")

    def test_uppercase_string(self):
        with pytest.raises(GrammarError, match="expected identifier, found string literal"):
            parse('to_uppercase("a")')

    def test_uppercase_non_python_identifier(self):
        with pytest.raises(GrammarError, match="found invalid identifier 'x²'") as exc_info:
            parse("to_uppercase(x²)")
        assert exc_info.value.span.start.column == 14

    def test_uppercase_empty(self):
        with pytest.raises(GrammarError, match="found '\\)'"):
            parse("to_uppercase()")

    def test_bare_uppercase_extra_token(self):
        with pytest.raises(GrammarError, match="expected a single identifier, found ':'"):
            parse_uppercase_arg("a:")

    def test_error_on_later_line(self):
        with pytest.raises(GrammarError) as exc_info:
            parse('map(a => "x" :a)\nmap(b => "y" $b)')
        assert exc_info.value.span.start.line == 2
        assert exc_info.value.span.start.column == 14


class TestErrorFormat:
    def test_format_contains_arrow_and_filename(self):
        with pytest.raises(GrammarError) as exc_info:
            parse('map(a => "x" @a)', "queries.sqla")
        formatted = exc_info.value.format("queries.sqla")
        assert formatted.startswith("error: expected ':' or '#'")
        assert "--> queries.sqla:1:14" in formatted
        assert 'map(a => "x" @a)' in formatted

    def test_format_carets_under_token(self):
        with pytest.raises(GrammarError) as exc_info:
            parse_map_args('a => "x" :class')
        last_line = exc_info.value.format().splitlines()[-1]
        assert last_line.endswith(" " * 10 + "^^^^^")

    def test_format_multiline_span(self):
        err = GrammarError(
            "test error",
            Span(Position(1, 1, 0), Position(2, 5, 10)),
            "first line\nsecond line",
        )
        formatted = err.format("test.sqla")
        assert "error: test error" in formatted
        assert "^" * 10 in formatted

    def test_str_is_formatted(self):
        with pytest.raises(GrammarError) as exc_info:
            parse_map_args("a")
        assert str(exc_info.value).startswith("error:")
