"""Expander — turns parsed invocations into Python expressions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlargs.ast import MapArgs, MapCall, Script, UppercaseCall
from sqlargs.errors import UnsupportedShapeError
from sqlargs.mapping import Shape, map_expression
from sqlargs.names import canonical_name, string_literal
from sqlargs.tokens import Span
from sqlargs.validate import ValidationOptions, validate_map_args


@dataclass
class ExpandContext:
    """State carried through expansion."""

    filename: str
    source: str
    validation: ValidationOptions | None = None


@dataclass(frozen=True, slots=True)
class Expansion:
    """The replacement expression for one invocation."""

    invocation: str
    expression: str
    shape: Shape | None
    span: Span


def expand(
    script: Script,
    source: str,
    filename: str = "input.sqla",
    validation: ValidationOptions | None = None,
) -> tuple[Expansion, ...]:
    """Expand every invocation of a script, in source order.

    With ``validation`` set, each map invocation is cross-checked before it
    is mapped; the first ValidationError aborts the whole expansion.
    """
    ctx = ExpandContext(filename=filename, source=source, validation=validation)
    return tuple(_expand_invocation(inv, ctx) for inv in script.invocations)


def _expand_invocation(node: MapCall | UppercaseCall, ctx: ExpandContext) -> Expansion:
    if isinstance(node, MapCall):
        return expand_map(node.args, ctx, node.span)
    return expand_uppercase(node, ctx)


def expand_map(args: MapArgs, ctx: ExpandContext, span: Span | None = None) -> Expansion:
    if ctx.validation is not None:
        validate_map_args(args, ctx.source, ctx.validation)
    shape, expression = map_expression(args)
    return Expansion("map", expression, shape, span if span is not None else args.span)


def expand_uppercase(node: UppercaseCall, ctx: ExpandContext) -> Expansion:
    return Expansion("to_uppercase", string_literal(canonical_name(node.name)), None, node.span)


def evaluate(shape: Shape, declared: Sequence[str], namespace: Mapping[str, Any]) -> Any:
    """Build the value an emitted expression denotes, looking names up in namespace.

    A name the namespace does not provide raises NameError.
    """
    values = [_lookup(namespace, name) for name in declared]
    if shape is Shape.DIRECT:
        (value,) = values
        return value
    if shape is Shape.POSITIONAL:
        return tuple(values)
    if shape is Shape.POSITIONAL_PAD:
        return (*values, ())
    if shape is Shape.NAMED:
        return tuple((canonical_name(n), v) for n, v in zip(declared, values))
    raise UnsupportedShapeError(f"cannot evaluate mapping shape {shape!r}")


def _lookup(namespace: Mapping[str, Any], name: str) -> Any:
    try:
        return namespace[name]
    except KeyError:
        raise NameError(f"name '{name}' is not defined") from None
