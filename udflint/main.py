#!/usr/bin/env python3
"""udflint/main.py — CLI entry-point for udflint.

Usage examples
--------------
    # Validate one or more UDF modules
    udflint check my_udf.lua other.lua

    # Read from stdin, JSON output, skip the sandboxed run
    cat my_udf.lua | udflint check - --format json --no-exec

    # Show the statement tree the validator sees
    udflint dump-tree my_udf.lua

    # List reserved names
    udflint reserved

Exit codes
----------
    0   Every script accepted.
    1   At least one script rejected (semantic or execution failure).
    2   Infrastructure failure (missing file, bad option, ...).
    3   At least one script failed to parse.

With several files the highest code wins.  ``python -m udflint`` calls
:func:`main` through ``udflint/__main__.py``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence, TextIO, Tuple

from udflint import __version__
from udflint.errors import LuaParseError, UdfLintError

_log = logging.getLogger("udflint")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_REJECTED: int = 1
EXIT_INFRA: int = 2
EXIT_PARSE: int = 3

FORMATS = ("gcc", "json", "summary")


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``udflint`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("udflint")
    root.setLevel(level)
    if not any(getattr(h, "_udflint", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        handler._udflint = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def _load_source(raw: str) -> Tuple[str, str]:
    """Return ``(filename, text)`` for a path or ``-`` (stdin)."""
    if raw == "-":
        return "<stdin>", sys.stdin.read()
    path = Path(raw).expanduser()
    return str(path), path.read_text(encoding="utf-8")


# ===========================================================================
# Commands
# ===========================================================================

def cmd_check(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Handle the 'check' command."""
    out = out or sys.stdout
    from udflint.checker import Rejected, UdfChecker
    from udflint.config import CheckerConfig

    exit_code = EXIT_OK
    total = 0
    for raw in args.inputs:
        try:
            filename, text = _load_source(raw)
        except (OSError, UnicodeDecodeError) as exc:
            _log.error("cannot read %s: %s", raw, exc)
            exit_code = max(exit_code, EXIT_INFRA)
            continue

        try:
            checker = UdfChecker(CheckerConfig.from_args(args, filename=filename))
            outcome = checker.validate(text)
        except LuaParseError as exc:
            total += 1
            _emit_parse_error(exc, filename, args.format, out)
            exit_code = max(exit_code, EXIT_PARSE)
            continue
        except UdfLintError as exc:
            _log.error("%s", exc.message)
            exit_code = max(exit_code, EXIT_INFRA)
            continue

        if isinstance(outcome, Rejected):
            total += len(outcome.reasons)
            _emit_rejection(outcome, filename, args.format, out)
            exit_code = max(exit_code, EXIT_REJECTED)
        elif args.format == "json":
            out.write(json.dumps({"file": filename, "status": "accepted"}) + "\n")
        elif not args.quiet:
            out.write(f"{filename}: ok\n")

    if args.format == "summary":
        out.write(f"\n--- {len(args.inputs)} file(s), {total} diagnostic(s) ---\n")
    return exit_code


def cmd_dump_tree(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Handle the 'dump-tree' command."""
    out = out or sys.stdout
    from udflint.parser import parse
    from udflint.printer import dump_sexp

    try:
        filename, text = _load_source(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        _log.error("cannot read %s: %s", args.input, exc)
        return EXIT_INFRA
    try:
        tree = parse(text, filename)
    except LuaParseError as exc:
        out.write(exc.to_gcc_format() + "\n")
        return EXIT_PARSE
    out.write(dump_sexp(tree) + "\n")
    return EXIT_OK


def cmd_reserved(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Handle the 'reserved' command."""
    out = out or sys.stdout
    from udflint.reserved import DEFAULT_RESERVED

    for name in DEFAULT_RESERVED:
        out.write(name + "\n")
    return EXIT_OK


# ===========================================================================
# Output
# ===========================================================================

def _emit_rejection(outcome, filename: str, fmt: str, out: TextIO) -> None:
    if fmt == "json":
        out.write(json.dumps({
            "file": filename,
            "status": "rejected",
            "origin": outcome.origin.value,
            "diagnostics": [d.to_dict() for d in outcome.reasons],
        }) + "\n")
        return
    for diag in outcome.reasons:
        out.write(diag.to_gcc_format() + "\n")


def _emit_parse_error(exc: LuaParseError, filename: str, fmt: str, out: TextIO) -> None:
    if fmt == "json":
        out.write(json.dumps({
            "file": filename,
            "status": "parse-error",
            "error": exc.to_json(),
        }) + "\n")
        return
    out.write(exc.to_gcc_format() + "\n")


# ===========================================================================
# Argument parsing
# ===========================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the udflint CLI."""
    parser = argparse.ArgumentParser(
        prog="udflint",
        description="Static validation of Lua scripts for the Aerospike UDF sandbox.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s check my_udf.lua
              %(prog)s check - --format json < my_udf.lua
              %(prog)s dump-tree my_udf.lua
              %(prog)s reserved
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # ── check ────────────────────────────────────────────────────────────

    p_check = subparsers.add_parser(
        "check",
        help="Validate UDF scripts",
        description=(
            "Parse each script, apply the reserved-name and global-variable "
            "rules, and, when those pass, run it in a sandboxed Lua runtime."
        ),
    )
    p_check.add_argument(
        "inputs",
        nargs="+",
        metavar="FILE",
        help="Lua files to check (use '-' for stdin)",
    )
    p_check.add_argument(
        "--format",
        choices=FORMATS,
        default="gcc",
        help="Diagnostic output format (default: gcc)",
    )
    p_check.add_argument(
        "--no-exec",
        action="store_true",
        help="Skip the sandboxed execution check",
    )
    p_check.add_argument(
        "--suppress",
        action="append",
        metavar="ERROR_ID",
        help="Suppress an error id everywhere (repeatable, '*' for all)",
    )
    p_check.add_argument(
        "--no-inline-suppressions",
        action="store_true",
        help="Ignore '-- udflint: ignore ...' comments",
    )
    p_check.add_argument(
        "--reserve",
        action="append",
        metavar="NAME",
        help="Treat NAME as reserved in addition to the built-in list",
    )
    p_check.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print anything for accepted scripts",
    )
    p_check.set_defaults(func=cmd_check)

    # ── dump-tree ────────────────────────────────────────────────────────

    p_dump = subparsers.add_parser(
        "dump-tree",
        help="Print the statement tree the validator sees",
    )
    p_dump.add_argument("input", help="Lua file (use '-' for stdin)")
    p_dump.set_defaults(func=cmd_dump_tree)

    # ── reserved ─────────────────────────────────────────────────────────

    p_reserved = subparsers.add_parser(
        "reserved",
        help="List the reserved sandbox names",
    )
    p_reserved.set_defaults(func=cmd_reserved)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the udflint CLI.

    Parameters
    ----------
    argv : sequence of str, optional
        Command-line arguments. Defaults to sys.argv[1:].

    Returns
    -------
    int
        Exit code (see module docstring).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        return 130


if __name__ == "__main__":
    sys.exit(main())
