"""udflint — static validation of Aerospike UDF Lua scripts.

Scripts loaded into the Aerospike UDF sandbox must not shadow the
sandbox's built-in namespace objects (``record``, ``map``, ``list``,
``aerospike``, ...) and must not declare variables in the outermost
scope.  This package checks both rules before a script is accepted into
a build, then runs the script once in an isolated Lua runtime.

Submodules
----------
reserved
    The fixed registry of reserved sandbox names.
ast
    The closed statement union the validator works on.
parser
    ``luaparser`` adapter: source text → statement tree.
validator
    Scope-aware depth-first validator (the two rules).
diagnostics
    ``Diagnostic``, ``DiagnosticCollector`` and suppressions.
sandbox
    ``lupa`` adapter for the execution sanity check.
checker
    ``UdfChecker`` — the parse → validate → run pipeline.
config
    ``CheckerConfig``.
printer
    S-expression dump of a statement tree.
main
    CLI entry-point with subcommands ``check``, ``dump-tree``, ``reserved``.

Usage
-----
Command-line::

    udflint check my_udf.lua
    python -m udflint check - --format json < my_udf.lua

Programmatic::

    from udflint import validate, Accepted

    outcome = validate(source)
    if isinstance(outcome, Accepted):
        embed(outcome.text)
    else:
        for reason in outcome.reasons:
            print(reason.to_gcc_format())
"""

from __future__ import annotations

__version__: str = "0.1.0"

from udflint.checker import Accepted, Rejected, RejectionOrigin, UdfChecker, validate
from udflint.config import CheckerConfig
from udflint.errors import LuaParseError, UdfLintError

__all__: list[str] = [
    "__version__",
    "Accepted",
    "Rejected",
    "RejectionOrigin",
    "UdfChecker",
    "CheckerConfig",
    "LuaParseError",
    "UdfLintError",
    "validate",
]
