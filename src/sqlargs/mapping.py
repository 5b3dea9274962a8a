"""Mapping engine — chooses how parameter values are packaged for binding.

Given the declared parameters of a method and the parameters its query
template references, the values are emitted as one of:

- ``DIRECT``: a single parameter, passed as a bare value;
- ``POSITIONAL``: a tuple of values in declared order, used when the template
  references every parameter exactly once and in declaration order;
- ``POSITIONAL_PAD``: the positional tuple of exactly two values, followed by
  an empty ``()`` that the binder requires for that arity;
- ``NAMED``: a tuple of ``("NAME", value)`` pairs, used whenever references
  repeat, skip or reorder parameters.

The binding mode of a placeholder never affects the decision.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from sqlargs.ast import MapArgs
from sqlargs.errors import UnsupportedShapeError
from sqlargs.names import canonical_name, string_literal

# Empty tuple appended to two-value positional tuples
PAD = "()"


class Shape(Enum):
    DIRECT = "direct"
    POSITIONAL = "positional"
    POSITIONAL_PAD = "positional+pad"
    NAMED = "named"


def classify(declared: Sequence[str], references: Sequence[str]) -> Shape:
    """Pick the output shape for declared parameters vs template references."""
    if len(declared) == 1:
        return Shape.DIRECT
    if list(declared) == list(references):
        return _apply_pad_rule(Shape.POSITIONAL, len(declared))
    return Shape.NAMED


def _apply_pad_rule(shape: Shape, count: int) -> Shape:
    if shape is Shape.POSITIONAL and count == 2:
        return Shape.POSITIONAL_PAD
    return shape


def emit(shape: Shape, declared: Sequence[str]) -> str:
    """Render the Python expression for a shape over the declared names."""
    if shape is Shape.DIRECT:
        (name,) = declared
        return name
    if shape is Shape.POSITIONAL:
        return _tuple(list(declared))
    if shape is Shape.POSITIONAL_PAD:
        return _tuple([*declared, PAD])
    if shape is Shape.NAMED:
        return _tuple([_tuple([string_literal(canonical_name(n)), n]) for n in declared])
    raise UnsupportedShapeError(f"cannot emit mapping shape {shape!r}")


def map_expression(args: MapArgs) -> tuple[Shape, str]:
    """Classify parsed map arguments and emit their expression."""
    declared = args.declared
    shape = classify(declared, args.template.references)
    return shape, emit(shape, declared)


def _tuple(items: list[str]) -> str:
    if len(items) == 1:
        return f"({items[0]},)"
    return "(" + ", ".join(items) + ")"
