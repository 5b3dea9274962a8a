"""Optional cross-check of declared parameters against template references.

Mapping never depends on this pass; it only turns mismatches that would
otherwise surface as name errors (or silently unused values) into
diagnostics pointing at the offending parameter or placeholder.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlargs.ast import MapArgs
from sqlargs.errors import ValidationError


@dataclass(frozen=True, slots=True)
class ValidationOptions:
    """Which mismatches to report. Duplicate parameters are always reported."""

    unreferenced: bool = True
    undeclared: bool = True


def validate_map_args(
    args: MapArgs,
    source: str,
    options: ValidationOptions | None = None,
) -> None:
    """Raise ValidationError on the first mismatch found."""
    if options is None:
        options = ValidationOptions()

    seen: set[str] = set()
    for param in args.params:
        if param.name in seen:
            raise ValidationError(f"duplicate parameter '{param.name}'", param.span, source)
        seen.add(param.name)

    if options.undeclared:
        for placeholder in args.template.placeholders:
            if placeholder.name not in seen:
                raise ValidationError(
                    f"placeholder '{placeholder.mode.value}{placeholder.name}' "
                    f"references undeclared parameter '{placeholder.name}'",
                    placeholder.name_span,
                    source,
                )

    if options.unreferenced:
        referenced = set(args.template.references)
        for param in args.params:
            if param.name not in referenced:
                raise ValidationError(
                    f"parameter '{param.name}' is not referenced by the template",
                    param.span,
                    source,
                )
