"""Command-line interface for sqlargs."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlargs.errors import GrammarError, LexError, ValidationError
from sqlargs.render import FORMATS
from sqlargs.validate import ValidationOptions


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    output_format: str
    validation: ValidationOptions | None
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="sqlargs",
        description="Expand map/to_uppercase invocations into Python bind-argument expressions",
    )
    p.add_argument("input", help="Input .sqla file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--validate",
        action="store_true",
        default=None,
        help="Cross-check declared parameters against placeholders",
    )
    p.add_argument(
        "--allow-unreferenced",
        action="store_true",
        help="With --validate, accept parameters the template never references",
    )
    p.add_argument(
        "--allow-undeclared",
        action="store_true",
        help="With --validate, accept placeholders naming undeclared parameters",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover sqlargs.toml)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-expand")
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "sqlargs.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_bool(table: dict[str, Any], key: str, default: bool) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise argparse.ArgumentTypeError(f"config key '{key}' must be true or false")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Output format: config < CLI
    output_format = "text"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in FORMATS:
                raise argparse.ArgumentTypeError(
                    f"invalid output format in config: {cfg_format!r} "
                    f"(expected one of {', '.join(FORMATS)})"
                )
            output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    # Validation: config < CLI
    enabled = False
    unreferenced = True
    undeclared = True
    cfg_validate = config.get("validate")
    if isinstance(cfg_validate, dict):
        enabled = _config_bool(cfg_validate, "enabled", enabled)
        unreferenced = _config_bool(cfg_validate, "unreferenced", unreferenced)
        undeclared = _config_bool(cfg_validate, "undeclared", undeclared)
    if args.validate is not None:
        enabled = args.validate
    if args.allow_unreferenced:
        unreferenced = False
    if args.allow_undeclared:
        undeclared = False

    validation = None
    if enabled:
        validation = ValidationOptions(unreferenced=unreferenced, undeclared=undeclared)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        validation=validation,
        watch=args.watch,
        debug=args.debug,
    )


def expand_file(options: CliOptions) -> str:
    """Read, parse, expand, and render a script file."""
    from sqlargs.debug import dump_ast
    from sqlargs.expand import expand
    from sqlargs.parser import parse
    from sqlargs.render import render, render_json

    filename = str(options.input_file)
    source = options.input_file.read_text(encoding="utf-8")
    script = parse(source, filename)

    if options.debug:
        dump_ast(script, file=sys.stderr)

    expansions = expand(script, source, filename, validation=options.validation)
    if options.output_format == "json":
        return render_json(expansions, filename)
    return render(expansions)


def _report(exc: LexError | GrammarError | ValidationError, options: CliOptions) -> None:
    print(exc.format(str(options.input_file)), file=sys.stderr)


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-expand on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    output = expand_file(options)
                    if options.output_file:
                        options.output_file.write_text(output, encoding="utf-8")
                    else:
                        sys.stdout.write(output)
                        sys.stdout.flush()
                    print(f"Expanded {options.input_file}", file=sys.stderr)
                except (LexError, GrammarError, ValidationError) as exc:
                    _report(exc, options)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        output = expand_file(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (LexError, GrammarError) as exc:
        _report(exc, options)
        return 1
    except ValidationError as exc:
        _report(exc, options)
        return 2

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    return 0
