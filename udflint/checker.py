"""udflint/checker.py — validation boundary for one UDF script.

Pipeline
--------
::

    script text
        │
        ▼
    ┌──────────┐
    │  Parser   │   luaparser → statement tree      (failure: LuaParseError, fatal)
    └────┬─────┘
         ▼
    ┌──────────────┐
    │  Scope        │   reserved-name + global-variable rules
    │  Validator    │   (all violations, discovery order)
    └────┬─────────┘
         ▼  only if no diagnostics survived suppression
    ┌──────────────┐
    │  Lua sandbox  │   lupa; a failure is the sole reported reason
    └────┬─────────┘
         ▼
    Accepted(text) | Rejected(reasons)

A rejection never mixes semantic diagnostics with an execution failure.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, Tuple, Union, runtime_checkable

from udflint import ast as A
from udflint.config import CheckerConfig
from udflint.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSeverity,
    SourceLocation,
    SuppressionManager,
)
from udflint.errors import ConfigError, UdfErrorCodes
from udflint.validator import ScopeValidator

if TYPE_CHECKING:
    from udflint.sandbox import RunOutcome

__all__ = [
    "Accepted",
    "Rejected",
    "RejectionOrigin",
    "ValidationOutcome",
    "UdfChecker",
    "validate",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------

@runtime_checkable
class ScriptParser(Protocol):
    def __call__(self, text: str, filename: str = ...) -> A.SyntaxTree: ...


@runtime_checkable
class ScriptRunner(Protocol):
    def run(self, text: str) -> RunOutcome: ...


def _default_parser() -> ScriptParser:
    from udflint.parser import parse
    return parse


def _default_runner() -> ScriptRunner:
    from udflint.sandbox import LuaSandbox
    return LuaSandbox()


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class RejectionOrigin(Enum):
    SEMANTIC = "semantic"
    EXECUTION = "execution"


@dataclass(frozen=True)
class Accepted:
    """The script passed; ``text`` is the input, unchanged."""
    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """The script failed; ``reasons`` is non-empty and in report order."""
    reasons: Tuple[Diagnostic, ...]
    origin: RejectionOrigin

    def __post_init__(self) -> None:
        if not self.reasons:
            raise ValueError("Rejected requires at least one reason")

    @property
    def ok(self) -> bool:
        return False

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(d.message for d in self.reasons)


ValidationOutcome = Union[Accepted, Rejected]


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------

class UdfChecker:
    """
    Sequences parser, validator and sandbox for UDF scripts.

    The parser and runner are injectable; by default they are
    :func:`udflint.parser.parse` and :class:`udflint.sandbox.LuaSandbox`,
    imported on first use.
    """

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        *,
        parser: Optional[ScriptParser] = None,
        runner: Optional[ScriptRunner] = None,
    ) -> None:
        self.config = config or CheckerConfig()
        problems = self.config.validate()
        if problems:
            raise ConfigError("; ".join(problems))
        self._parser = parser
        self._runner = runner
        self._validator = ScopeValidator(
            self.config.registry(), filename=self.config.filename
        )

    @property
    def parser(self) -> ScriptParser:
        if self._parser is None:
            self._parser = _default_parser()
        return self._parser

    @property
    def runner(self) -> ScriptRunner:
        if self._runner is None:
            self._runner = _default_runner()
        return self._runner

    def validate(self, text: str) -> ValidationOutcome:
        """
        Validate one script.

        Raises:
            LuaParseError: if *text* does not parse; no diagnostics are
                produced in that case.
        """
        filename = self.config.filename
        started = time.perf_counter()
        tree = self.parser(text, filename)
        logger.debug("parse of %s took %.2fms", filename,
                     (time.perf_counter() - started) * 1000)

        collector = DiagnosticCollector(
            suppression_manager=self._suppressions_for(text)
        )

        collector.extend(self._validator.validate(tree))
        if not collector.is_empty():
            logger.info("%s rejected with %d diagnostic(s)", filename, len(collector))
            return Rejected(tuple(collector.diagnostics), RejectionOrigin.SEMANTIC)
        if collector.suppressed_count:
            logger.info("%s: %d diagnostic(s) suppressed", filename,
                        collector.suppressed_count)

        if not self.config.sanity_check:
            logger.info("%s accepted (execution check skipped)", filename)
            return Accepted(text)

        outcome = self.runner.run(text)
        if not outcome.ok:
            collector.add(self._execution_failure(outcome.message))
            if not collector.is_empty():
                logger.info("%s rejected by sandboxed run", filename)
                return Rejected(tuple(collector.diagnostics), RejectionOrigin.EXECUTION)

        logger.info("%s accepted", filename)
        return Accepted(text)

    def _suppressions_for(self, text: str) -> SuppressionManager:
        manager = SuppressionManager(self.config.suppressions)
        if self.config.inline_suppressions:
            manager.load_inline_suppressions_from_source(text, self.config.filename)
        return manager

    def _execution_failure(self, message: Optional[str]) -> Diagnostic:
        code = UdfErrorCodes.EXECUTION_FAILURE
        return Diagnostic(
            error_id=code.slug,
            code=code.code,
            message=message or "script failed to execute",
            severity=DiagnosticSeverity.ERROR,
            location=SourceLocation(file=self.config.filename),
        )


def validate(text: str, config: Optional[CheckerConfig] = None) -> ValidationOutcome:
    """Validate *text* with a default-configured :class:`UdfChecker`."""
    return UdfChecker(config).validate(text)
