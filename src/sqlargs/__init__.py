"""Bind-argument expression generator for SQL-backed methods."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlargs.validate import ValidationOptions

__version__ = "0.1.0"


def compile(
    source: str,
    filename: str = "input.sqla",
    validation: ValidationOptions | None = None,
    fmt: str = "text",
) -> str:
    """Parse and expand a script of invocations, render it as text or JSON."""
    from sqlargs.expand import expand
    from sqlargs.parser import parse
    from sqlargs.render import render, render_json

    script = parse(source, filename)
    expansions = expand(script, source, filename, validation=validation)
    if fmt == "json":
        return render_json(expansions, filename)
    return render(expansions)


def map_expression(args_source: str, validation: ValidationOptions | None = None) -> str:
    """Expression for the arguments of one map invocation.

    >>> map_expression('a1 a2 => "SELECT * FROM t WHERE a = " :a1 " AND b = " :a2')
    '(a1, a2, ())'
    """
    from sqlargs.expand import ExpandContext, expand_map
    from sqlargs.parser import parse_map_args

    args = parse_map_args(args_source)
    ctx = ExpandContext(filename="<map>", source=args_source, validation=validation)
    return expand_map(args, ctx).expression


def map_args(
    args_source: str,
    namespace: Mapping[str, Any],
    validation: ValidationOptions | None = None,
) -> Any:
    """Expand one map invocation and evaluate it against parameter values."""
    from sqlargs.expand import ExpandContext, evaluate, expand_map
    from sqlargs.parser import parse_map_args

    args = parse_map_args(args_source)
    ctx = ExpandContext(filename="<map>", source=args_source, validation=validation)
    expansion = expand_map(args, ctx)
    return evaluate(expansion.shape, args.declared, namespace)


def to_uppercase(ident: str) -> str:
    """Uppercase name of a single identifier, e.g. ``param_name`` -> ``PARAM_NAME``."""
    from sqlargs.names import canonical_name
    from sqlargs.parser import parse_uppercase_arg

    return canonical_name(parse_uppercase_arg(ident).name)
