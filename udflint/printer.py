"""udflint/printer.py – S-expression rendering of a lowered statement tree.

Debugging aid behind ``udflint dump-tree``: shows exactly what the
validator sees, e.g.::

    (chunk
      (local x)
      (function "f" (params a map) (body (local y))))
"""

from __future__ import annotations

from typing import Any, List

import sexpdata
from sexpdata import Symbol

from udflint import ast as A

__all__ = ["to_sexp", "dump_sexp"]

_LOOP_HEADS = {
    A.While: "while",
    A.NumericFor: "fornum",
    A.GenericFor: "forin",
    A.Repeat: "repeat",
}


def to_sexp(node: Any) -> List[Any]:
    """Convert a tree or statement into nested ``sexpdata`` lists."""
    if isinstance(node, A.SyntaxTree):
        return [Symbol("chunk")] + _block(node.body)
    if isinstance(node, A.FunctionDeclaration):
        head = "local-function" if node.local else "function"
        return [
            Symbol(head),
            node.name,
            [Symbol("params")] + [Symbol(p.id) for p in node.params],
            [Symbol("body")] + _block(node.body),
        ]
    if isinstance(node, A.LocalDeclaration):
        return [Symbol("local")] + [Symbol(n.id) for n in node.targets]
    if isinstance(node, A.Assignment):
        return [Symbol("assign")] + [_target(t) for t in node.targets]
    if isinstance(node, A.If):
        parts: List[Any] = [Symbol("if"), [Symbol("then")] + _block(node.body)]
        for block in node.elseifs:
            parts.append([Symbol("elseif")] + _block(block))
        if node.orelse is not None:
            parts.append([Symbol("else")] + _block(node.orelse))
        return parts
    if isinstance(node, A.LOOP_STATEMENTS):
        return [Symbol(_LOOP_HEADS[type(node)])] + _block(node.body)
    if isinstance(node, A.Other):
        return [Symbol("other"), node.kind]
    raise TypeError(f"cannot render {type(node).__name__}")


def dump_sexp(tree: A.SyntaxTree) -> str:
    """Render *tree* with one root statement per line."""
    lines = ["(chunk"]
    lines.extend("  " + sexpdata.dumps(to_sexp(stmt)) for stmt in tree.body)
    return "\n".join(lines) + ")"


def _block(block: A.Block) -> List[Any]:
    return [to_sexp(stmt) for stmt in block]


def _target(target: A.Target) -> Any:
    if isinstance(target, A.Name):
        return Symbol(target.id)
    return [Symbol("index"), target.text]
