"""Output rendering for expanded invocations."""

from __future__ import annotations

import json
from collections.abc import Sequence

from sqlargs.expand import Expansion

FORMATS = ("text", "json")


def render(expansions: Sequence[Expansion]) -> str:
    """One expression per line, in invocation order."""
    return "".join(f"{e.expression}\n" for e in expansions)


def render_json(expansions: Sequence[Expansion], filename: str = "input.sqla") -> str:
    """A JSON array describing each expansion and where it came from."""
    items = [
        {
            "invocation": e.invocation,
            "shape": e.shape.value if e.shape is not None else None,
            "expression": e.expression,
            "file": filename,
            "line": e.span.start.line,
            "column": e.span.start.column,
        }
        for e in expansions
    ]
    return json.dumps(items, indent=2, ensure_ascii=False) + "\n"
