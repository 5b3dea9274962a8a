"""AST node types for parsed invocations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlargs.tokens import Span


class BindMode(Enum):
    """How a placeholder binds its parameter; the value is the marker."""

    VALUE = ":"
    REFERENCE = "#"


@dataclass(frozen=True, slots=True)
class Param:
    """A declared method parameter."""

    name: str
    index: int
    span: Span


@dataclass(frozen=True, slots=True)
class Literal:
    """Opaque template text between placeholders."""

    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A marker plus the parameter it references."""

    mode: BindMode
    name: str
    name_span: Span
    span: Span


@dataclass(frozen=True, slots=True)
class Template:
    """Alternating literal and placeholder segments, as written."""

    segments: tuple[Literal | Placeholder, ...]
    span: Span

    @property
    def placeholders(self) -> tuple[Placeholder, ...]:
        return tuple(s for s in self.segments if isinstance(s, Placeholder))

    @property
    def references(self) -> tuple[str, ...]:
        """Referenced names in template order, duplicates kept."""
        return tuple(p.name for p in self.placeholders)


@dataclass(frozen=True, slots=True)
class MapArgs:
    """Arguments of a map invocation: ``params => template``."""

    params: tuple[Param, ...]
    template: Template
    span: Span

    @property
    def declared(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)


@dataclass(frozen=True, slots=True)
class MapCall:
    """``map(...)``"""

    args: MapArgs
    span: Span


@dataclass(frozen=True, slots=True)
class UppercaseCall:
    """``to_uppercase(ident)``"""

    name: str
    name_span: Span
    span: Span


@dataclass(frozen=True, slots=True)
class Script:
    """Root node: every invocation in a source file."""

    invocations: tuple[MapCall | UppercaseCall, ...]
    span: Span
