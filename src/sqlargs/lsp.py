"""Minimal LSP server for sqlargs scripts — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from sqlargs import __version__
from sqlargs.errors import GrammarError, LexError, ValidationError
from sqlargs.expand import expand
from sqlargs.parser import parse
from sqlargs.tokens import Position as SourcePosition
from sqlargs.tokens import Span
from sqlargs.validate import ValidationOptions

server = LanguageServer(
    "sqlargs-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _span_range(span: Span) -> Range:
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _char_span(pos: SourcePosition) -> Span:
    """One-character span starting at pos."""
    return Span(pos, SourcePosition(pos.line, pos.column + 1, pos.offset + 1))


def _diagnostic(message: str, span: Span, severity: DiagnosticSeverity) -> Diagnostic:
    return Diagnostic(
        range=_span_range(span), message=message, severity=severity, source="sqlargs"
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse and expand the document with validation, publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        script = parse(source, filename)
    except LexError as exc:
        diagnostics.append(
            _diagnostic(exc.message, _char_span(exc.position), DiagnosticSeverity.Error)
        )
    except GrammarError as exc:
        diagnostics.append(_diagnostic(exc.message, exc.span, DiagnosticSeverity.Error))
    else:
        try:
            expand(script, source, filename, validation=ValidationOptions())
        except ValidationError as exc:
            diagnostics.append(_diagnostic(exc.message, exc.span, DiagnosticSeverity.Warning))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
