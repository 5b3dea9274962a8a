"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from sqlargs.ast import Literal, MapArgs, MapCall, Placeholder, Script, UppercaseCall


def dump_ast(script: Script, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Script\n")
    for inv in script.invocations:
        if isinstance(inv, MapCall):
            _dump_map(inv.args, 1, file)
        elif isinstance(inv, UppercaseCall):
            file.write(f"{_indent(1)}UppercaseCall {inv.name}\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_map(args: MapArgs, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}MapCall\n")
    for param in args.params:
        f.write(f"{_indent(depth + 1)}Param {param.index} {param.name}\n")
    f.write(f"{_indent(depth + 1)}Template\n")
    for seg in args.template.segments:
        if isinstance(seg, Literal):
            f.write(f"{_indent(depth + 2)}Literal({seg.value!r})\n")
        elif isinstance(seg, Placeholder):
            f.write(f"{_indent(depth + 2)}Placeholder {seg.mode.value}{seg.name}\n")
