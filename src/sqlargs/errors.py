"""Error types with formatted source context."""

from __future__ import annotations

from sqlargs.tokens import Position, Span


def _format_diagnostic(
    message: str,
    start: Position,
    underline_len: int,
    source: str,
    filename: str,
) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


def _span_underline(span: Span, source: str) -> int:
    """Underline the full span when on one line, otherwise to end of line."""
    if span.end.line == span.start.line:
        return max(1, span.end.column - span.start.column)
    lines = source.splitlines()
    line_idx = span.start.line - 1
    line_len = len(lines[line_idx]) if 0 <= line_idx < len(lines) else 0
    return max(1, line_len - span.start.column + 1)


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.sqla") -> str:
        return _format_diagnostic(self.message, self.position, 1, self.source, filename)


class GrammarError(Exception):
    """Raised when an invocation does not match the grammar.

    The span points at the offending token; for a premature end of input it
    is the zero-width span at the end of the source.
    """

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.sqla") -> str:
        underline = _span_underline(self.span, self.source)
        return _format_diagnostic(self.message, self.span.start, underline, self.source, filename)


class ValidationError(Exception):
    """Raised by the optional parameter/placeholder cross-check."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.sqla") -> str:
        underline = _span_underline(self.span, self.source)
        return _format_diagnostic(self.message, self.span.start, underline, self.source, filename)


class UnsupportedShapeError(Exception):
    """Raised when asked to emit a mapping decision that does not exist."""
