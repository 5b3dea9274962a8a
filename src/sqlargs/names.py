"""Identifier normalization for name-based binding."""

from __future__ import annotations


def canonical_name(ident: str) -> str:
    """Return the uppercase form of an identifier, e.g. ``out_name`` -> ``OUT_NAME``."""
    return ident.upper()


def string_literal(text: str) -> str:
    """Render text as a double-quoted Python string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
