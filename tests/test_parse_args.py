"""Tests for map argument parsing: declared parameters and the template."""

from __future__ import annotations

from sqlargs.ast import BindMode, Literal, Placeholder


class TestHeader:
    def test_single_param(self, parse_args):
        args = parse_args('arg => "SELECT " :arg')
        assert args.declared == ("arg",)

    def test_params_in_order(self, parse_args):
        args = parse_args('id name data => "x"')
        assert args.declared == ("id", "name", "data")
        assert [p.index for p in args.params] == [0, 1, 2]

    def test_no_params(self, parse_args):
        args = parse_args('=> "SELECT 1"')
        assert args.declared == ()

    def test_param_spans(self, parse_args):
        args = parse_args('a1 a2 => "x"')
        assert args.params[1].span.start.column == 4
        assert args.params[1].span.end.column == 6

    def test_params_over_lines(self, parse_args):
        args = parse_args('a1\n  a2\n=> "x"')
        assert args.declared == ("a1", "a2")
        assert args.params[1].span.start.line == 2


class TestBody:
    def test_empty_body(self, parse_args):
        args = parse_args("a =>")
        assert args.template.segments == ()
        assert args.template.references == ()

    def test_literal_only(self, parse_args):
        args = parse_args('a => "SELECT 1"')
        segs = args.template.segments
        assert len(segs) == 1
        assert isinstance(segs[0], Literal)
        assert segs[0].value == "SELECT 1"

    def test_alternating_segments(self, parse_args):
        args = parse_args('a1 a2 => "A " :a1 " B " :a2 " C"')
        kinds = [type(s) for s in args.template.segments]
        assert kinds == [Literal, Placeholder, Literal, Placeholder, Literal]

    def test_ends_with_placeholder(self, parse_args):
        args = parse_args('a1 a2 => "a = " :a1 " AND b = " :a2')
        assert isinstance(args.template.segments[-1], Placeholder)
        assert args.template.references == ("a1", "a2")

    def test_duplicates_and_order_preserved(self, parse_args):
        args = parse_args(
            'id name data => "a" :name "b" :name "c" :data "d" :id "e" :name "f" :id ")"'
        )
        assert args.template.references == ("name", "name", "data", "id", "name", "id")

    def test_raw_string_literal(self, parse_args):
        args = parse_args('a => """SELECT * FROM t WHERE a = """ :a')
        assert args.template.segments[0].value == "SELECT * FROM t WHERE a = "

    def test_empty_literal_between_placeholders(self, parse_args):
        args = parse_args('a b => "" :a "" :b')
        assert args.template.references == ("a", "b")

    def test_undeclared_reference_is_parsed(self, parse_args):
        args = parse_args('a => "x" :zzz')
        assert args.template.references == ("zzz",)


class TestBindModes:
    def test_value_marker(self, parse_args):
        ph = parse_args('a => "x" :a').template.placeholders[0]
        assert ph.mode is BindMode.VALUE

    def test_reference_marker(self, parse_args):
        ph = parse_args('a => "c IN (" #a ")"').template.placeholders[0]
        assert ph.mode is BindMode.REFERENCE
        assert ph.name == "a"

    def test_modes_kept_per_placeholder(self, parse_args):
        args = parse_args('id out_name => "i = " :id " INTO " #out_name')
        modes = [p.mode for p in args.template.placeholders]
        assert modes == [BindMode.VALUE, BindMode.REFERENCE]

    def test_placeholder_spans(self, parse_args):
        ph = parse_args('a => "x" :a').template.placeholders[0]
        assert ph.span.start.column == 10
        assert ph.span.end.column == 12
        assert ph.name_span.start.column == 11

    def test_marker_separated_by_space(self, parse_args):
        args = parse_args('a => "x" : a')
        assert args.template.references == ("a",)


class TestSpans:
    def test_template_span(self, parse_args):
        args = parse_args('a => "x" :a "y"')
        assert args.template.span.start.column == 6
        assert args.template.span.end.column == 16

    def test_args_span(self, parse_args):
        args = parse_args('a => "x"')
        assert args.span.start.column == 1
        assert args.span.end.column == 9
