"""udflint/parser.py – Lua source → :mod:`udflint.ast` statement tree.

Parsing itself is delegated to the ``luaparser`` package.  This module
only lowers its AST into the closed statement union the validator works
on, and turns any grammar failure into a fatal
:class:`~udflint.errors.LuaParseError`.

Lowering rules
--------------
* ``Function`` / ``LocalFunction`` / ``Method`` → ``FunctionDeclaration``
  (varargs are not parameters and are dropped).
* ``LocalAssign`` → ``LocalDeclaration``.
* ``Assign`` → ``Assignment``; ``Name`` targets stay names, everything
  else becomes an ``IndexTarget``.
* ``If`` with its ``ElseIf`` chain → ``If(body, elseifs, orelse)``.
* ``While`` / ``Fornum`` / ``Forin`` / ``Repeat`` → the loop kinds.
* Everything else (calls, returns, ``do`` blocks, gotos, ...) → ``Other``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Tuple

from luaparser import ast as lua_ast
from luaparser import astnodes

from udflint import ast as A
from udflint.errors import LuaParseError, SourceSpan

__all__ = [
    "parse",
    "parse_file",
    "lower",
]

logger = logging.getLogger(__name__)

# "line 1:6: mismatched input ..." (luaparser 4)
_LINE_COLUMN_RE = re.compile(r"\bline\s+(\d+):(\d+)", re.IGNORECASE)
# "(3,10): Error: ..." (luaparser 3)
_POSITION_RE = re.compile(r"\(\s*(\d+)\s*,\s*(\d+)\s*\)")
_LINE_RE = re.compile(r"\bline\s+(\d+)", re.IGNORECASE)


def parse(text: str, filename: str = "<udf>") -> A.SyntaxTree:
    """Parse *text* and lower it into a :class:`~udflint.ast.SyntaxTree`.

    Raises
    ------
    LuaParseError
        If *text* is not syntactically valid Lua.
    """
    try:
        chunk = lua_ast.parse(text)
    # luaparser reports grammar errors with its own exception types
    # that are not part of its public API.
    except Exception as exc:
        raise _to_parse_error(exc, filename) from exc

    tree = lower(chunk)
    logger.debug("parsed %s: %d root statement(s)", filename, len(tree))
    return tree


def parse_file(path: str) -> A.SyntaxTree:
    """Read and parse a Lua file."""
    with open(path, "r", encoding="utf-8") as fh:
        return parse(fh.read(), filename=path)


def lower(chunk: Any) -> A.SyntaxTree:
    """Lower a ``luaparser`` chunk (or bare block) into a SyntaxTree."""
    body = getattr(chunk, "body", chunk)
    return A.SyntaxTree(body=_lower_block(body))


# ---------------------------------------------------------------------------
# Lowering helpers
# ---------------------------------------------------------------------------

def _lower_block(node: Any) -> A.Block:
    if node is None:
        return ()
    statements = node.body if isinstance(node, astnodes.Block) else node
    return tuple(_lower_statement(stmt) for stmt in statements)


def _lower_statement(node: Any) -> A.Statement:
    # names carry no position of their own; fall back to the statement's
    line = _line_of(node)
    if isinstance(node, astnodes.LocalFunction):
        return A.FunctionDeclaration(
            name=_describe(node.name),
            params=_params(node.args, line),
            body=_lower_block(node.body),
            local=True,
        )
    if isinstance(node, astnodes.Method):
        return A.FunctionDeclaration(
            name=f"{_describe(node.source)}:{_describe(node.name)}",
            params=_params(node.args, line),
            body=_lower_block(node.body),
        )
    if isinstance(node, astnodes.Function):
        return A.FunctionDeclaration(
            name=_describe(node.name),
            params=_params(node.args, line),
            body=_lower_block(node.body),
        )
    if isinstance(node, astnodes.LocalAssign):
        names = (_as_name(t, line) for t in node.targets)
        return A.LocalDeclaration(targets=tuple(n for n in names if n is not None))
    if isinstance(node, astnodes.Assign):
        return A.Assignment(targets=tuple(_target(t, line) for t in node.targets))
    if isinstance(node, astnodes.If):
        return _lower_if(node)
    if isinstance(node, astnodes.While):
        return A.While(body=_lower_block(node.body))
    if isinstance(node, astnodes.Fornum):
        return A.NumericFor(body=_lower_block(node.body))
    if isinstance(node, astnodes.Forin):
        return A.GenericFor(body=_lower_block(node.body))
    if isinstance(node, astnodes.Repeat):
        return A.Repeat(body=_lower_block(node.body))
    return A.Other(kind=type(node).__name__)


def _lower_if(node: Any) -> A.If:
    elseifs: List[A.Block] = []
    orelse = node.orelse
    while isinstance(orelse, astnodes.ElseIf):
        elseifs.append(_lower_block(orelse.body))
        orelse = orelse.orelse
    return A.If(
        body=_lower_block(node.body),
        elseifs=tuple(elseifs),
        orelse=_lower_block(orelse) if orelse is not None else None,
    )


def _params(args: Any, line: Optional[int] = None) -> Tuple[A.Name, ...]:
    names = (_as_name(arg, line) for arg in (args or ()))
    return tuple(name for name in names if name is not None)


def _as_name(node: Any, line: Optional[int] = None) -> Optional[A.Name]:
    if isinstance(node, astnodes.Name):
        return A.Name(id=node.id, line=_line_of(node) or line)
    return None


def _target(node: Any, line: Optional[int] = None) -> A.Target:
    name = _as_name(node, line)
    if name is not None:
        return name
    return A.IndexTarget(text=_describe(node), line=_line_of(node) or line)


def _describe(node: Any) -> str:
    """Short source-like rendering of a name or index expression."""
    if node is None:
        return ""
    if isinstance(node, astnodes.Name):
        return node.id
    if isinstance(node, astnodes.String):
        return str(node.s)
    if isinstance(node, astnodes.Index):
        base = _describe(node.value)
        dotted = getattr(node, "notation", None) is not astnodes.IndexNotation.SQUARE
        if dotted and isinstance(node.idx, astnodes.Name):
            return f"{base}.{node.idx.id}"
        return f"{base}[...]"
    return type(node).__name__


def _line_of(node: Any) -> Optional[int]:
    line = getattr(node, "line", None)
    if not isinstance(line, int) or line <= 0:
        line = getattr(getattr(node, "_first_token", None), "line", None)
    return line if isinstance(line, int) and line > 0 else None


def _to_parse_error(exc: Exception, filename: str) -> LuaParseError:
    message = str(exc).strip() or type(exc).__name__
    line = column = 0
    match = _LINE_COLUMN_RE.search(message) or _POSITION_RE.search(message)
    if match:
        line, column = int(match.group(1)), int(match.group(2))
    else:
        match = _LINE_RE.search(message)
        if match:
            line = int(match.group(1))
    logger.debug("parse failure in %s: %s", filename, message)
    return LuaParseError(
        message,
        span=SourceSpan(file=filename, line=line, column=column),
    )
