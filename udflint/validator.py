"""
UDF Scope Validator

Walks a lowered statement tree depth-first and applies two independent
rules to every declared identifier:

1. Reserved names - a parameter, local or assigned name must not match
   a name bound by the sandbox (checked at any depth).
2. Global variables - a local declaration or bare-name assignment must
   not appear directly in the root block.

The scope context is an explicit two-valued argument passed by value
into each recursive call.  Entering any block owned by a statement
(function body, if/elseif/else branch, loop body) demotes ``OUTERMOST``
to ``NESTED``; ``NESTED`` is passed through unchanged.  A demotion inside
one branch can therefore never leak into a sibling.

Each visit returns its own diagnostics followed by those of its children,
in source order.  Nothing short-circuits: every statement and every
nested block is visited no matter how many violations were found.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional

from udflint import ast as A
from udflint.diagnostics import Diagnostic, DiagnosticSeverity, SourceLocation
from udflint.errors import InternalError, UdfErrorCodes
from udflint.reserved import DEFAULT_RESERVED, ReservedNames

__all__ = [
    "ScopeContext",
    "ScopeValidator",
    "validate_tree",
    "reserved_identifier",
    "global_variable",
]

logger = logging.getLogger(__name__)


class ScopeContext(Enum):
    """Whether a statement sits directly in the root block."""
    OUTERMOST = "outermost"
    NESTED = "nested"

    def demoted(self) -> "ScopeContext":
        """Context for any block owned by a statement in this context."""
        return ScopeContext.NESTED


# ============================================================================
# Diagnostic constructors
# ============================================================================


def _location(filename: str, name: A.Name) -> SourceLocation:
    return SourceLocation(file=filename, line=name.line or 0)


def reserved_identifier(name: A.Name, filename: str = "<udf>") -> Diagnostic:
    code = UdfErrorCodes.RESERVED_IDENTIFIER
    return Diagnostic(
        error_id=code.slug,
        code=code.code,
        message=(
            f"aerospike reserved identifier: `{name.id}`. "
            "consider renaming your variable"
        ),
        severity=DiagnosticSeverity.ERROR,
        location=_location(filename, name),
        symbol=name.id,
    )


def global_variable(name: A.Name, filename: str = "<udf>") -> Diagnostic:
    code = UdfErrorCodes.GLOBAL_VARIABLE
    return Diagnostic(
        error_id=code.slug,
        code=code.code,
        message=f"global variables are not allowed: `{name.id}`",
        severity=DiagnosticSeverity.ERROR,
        location=_location(filename, name),
        symbol=name.id,
    )


# ============================================================================
# Validator
# ============================================================================


class ScopeValidator:
    """
    Applies the reserved-name and global-variable rules to a SyntaxTree.

    The validator holds no per-run state; one instance can validate any
    number of trees.
    """

    def __init__(
        self,
        registry: Optional[ReservedNames] = None,
        *,
        filename: str = "<udf>",
    ) -> None:
        self._registry = registry if registry is not None else DEFAULT_RESERVED
        self._filename = filename

    @property
    def registry(self) -> ReservedNames:
        return self._registry

    def validate(self, tree: A.SyntaxTree) -> List[Diagnostic]:
        """Return every violation in *tree*, in discovery order."""
        diagnostics = self.visit_block(tree.body, ScopeContext.OUTERMOST)
        logger.debug(
            "validated %s: %d statement(s), %d diagnostic(s)",
            self._filename, len(tree), len(diagnostics),
        )
        return diagnostics

    def visit_block(self, block: A.Block, ctx: ScopeContext) -> List[Diagnostic]:
        """Visit each statement of *block* with the same incoming context."""
        result: List[Diagnostic] = []
        for stmt in block:
            result += self.visit(stmt, ctx)
        return result

    def visit(self, stmt: A.Statement, ctx: ScopeContext) -> List[Diagnostic]:
        """Dispatch on the statement kind."""
        if isinstance(stmt, A.FunctionDeclaration):
            return self.visit_function(stmt, ctx)
        if isinstance(stmt, A.LocalDeclaration):
            return self.check_names(stmt.targets, ctx)
        if isinstance(stmt, A.Assignment):
            return self.check_names(stmt.names, ctx)
        if isinstance(stmt, A.If):
            inner = ctx.demoted()
            result: List[Diagnostic] = []
            for block in stmt.blocks():
                result += self.visit_block(block, inner)
            return result
        if isinstance(stmt, A.LOOP_STATEMENTS):
            return self.visit_block(stmt.body, ctx.demoted())
        if isinstance(stmt, A.Other):
            return []
        raise InternalError(f"unhandled statement kind {type(stmt).__name__}")

    def visit_function(
        self, func: A.FunctionDeclaration, ctx: ScopeContext
    ) -> List[Diagnostic]:
        # parameters are locals of the function: reserved rule only
        result = [
            reserved_identifier(param, self._filename)
            for param in func.params
            if self._registry.is_reserved(param.id)
        ]
        return result + self.visit_block(func.body, ScopeContext.NESTED)

    def check_names(
        self, names: Iterable[A.Name], ctx: ScopeContext
    ) -> List[Diagnostic]:
        """Apply both rules to declared *names* under context *ctx*."""
        result: List[Diagnostic] = []
        for name in names:
            if self._registry.is_reserved(name.id):
                result.append(reserved_identifier(name, self._filename))
            if ctx is ScopeContext.OUTERMOST:
                result.append(global_variable(name, self._filename))
        return result


def validate_tree(
    tree: A.SyntaxTree,
    registry: Optional[ReservedNames] = None,
    *,
    filename: str = "<udf>",
) -> List[Diagnostic]:
    """
    Validate a lowered statement tree.

    Args:
        tree: Root block produced by :func:`udflint.parser.parse`
        registry: Reserved names; defaults to the shipped Aerospike list
        filename: Label attached to every diagnostic location

    Returns:
        Diagnostics in left-to-right, depth-first discovery order.
        Empty means the tree passes both rules.
    """
    return ScopeValidator(registry, filename=filename).validate(tree)
