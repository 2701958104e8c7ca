# udflint/errors.py
"""
udflint Error Types

Structured exceptions for the UDF validation pipeline. Every exception
carries an ``ErrorCode`` and an optional ``SourceSpan`` so that fatal
failures can be rendered the same way as collected diagnostics.

Error Hierarchy:
────────────────
  UdfLintError (base)
  ├── LuaParseError   - script is not syntactically valid Lua (fatal)
  ├── ConfigError     - invalid checker configuration
  └── InternalError   - validator bugs (should never happen)

Error Codes:
────────────
Codes follow the pattern UDF-XXXX:
  - 1000-1999: Syntax errors
  - 2000-2999: Configuration errors
  - 3000-3999: Semantic (scope/binding) violations
  - 5000-5999: Runtime (sandbox execution) failures
  - 9000-9999: Internal errors
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from udflint.diagnostics import Diagnostic


@unique
class ErrorPhase(Enum):
    """Pipeline phase where the error occurred."""

    SYNTAX = "syntax"        # Parsing
    CONFIG = "config"        # Option handling
    SEMANTIC = "semantic"    # Scope/name rules
    RUNTIME = "runtime"      # Sandbox execution
    INTERNAL = "internal"    # Validator internals


class ErrorCode:
    """
    Structured error code.

    ``prefix`` and ``number`` form the printable code (``UDF-3000``);
    ``slug`` is the stable error id used in output and suppressions.
    """

    __slots__ = ("prefix", "number", "slug", "phase")

    def __init__(
        self,
        prefix: str,
        number: int,
        slug: str,
        phase: ErrorPhase,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.slug = slug
        self.phase = phase

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.slug!r})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        return NotImplemented


class UdfErrorCodes:
    """Predefined error codes."""

    # SYNTAX ERRORS (1000-1999)
    PARSE_FAILURE = ErrorCode("UDF", 1000, "parse-failure", ErrorPhase.SYNTAX)

    # CONFIGURATION ERRORS (2000-2999)
    INVALID_CONFIG = ErrorCode("UDF", 2000, "invalid-config", ErrorPhase.CONFIG)

    # SEMANTIC VIOLATIONS (3000-3999)
    RESERVED_IDENTIFIER = ErrorCode(
        "UDF", 3000, "reserved-identifier", ErrorPhase.SEMANTIC
    )
    GLOBAL_VARIABLE = ErrorCode(
        "UDF", 3001, "global-variable", ErrorPhase.SEMANTIC
    )

    # RUNTIME FAILURES (5000-5999)
    EXECUTION_FAILURE = ErrorCode(
        "UDF", 5000, "execution-failure", ErrorPhase.RUNTIME
    )

    # INTERNAL ERRORS (9000-9999)
    INTERNAL_ERROR = ErrorCode("UDF", 9000, "internal-error", ErrorPhase.INTERNAL)

    @classmethod
    def by_slug(cls, slug: str) -> Optional[ErrorCode]:
        """Look up a predefined code by its error id."""
        for value in vars(cls).values():
            if isinstance(value, ErrorCode) and value.slug == slug:
                return value
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE LOCATION TYPES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SourceSpan:
    """A position in a script, as reported by the parser."""

    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if not self.file and self.line == 0:
            return "<unknown location>"

        parts = []
        if self.file:
            parts.append(self.file)
        if self.line > 0:
            parts.append(str(self.line))
            if self.column > 0:
                parts.append(str(self.column))

        return ":".join(parts)


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class UdfLintError(Exception):
    """
    Base exception for all udflint errors.

    Carries structured error information that can be converted to a
    diagnostic or printed GCC-style.
    """

    default_code: ErrorCode = UdfErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.span = span or SourceSpan()
        self.hint = hint

    def with_hint(self, hint: str) -> "UdfLintError":
        """Attach a hint to this error."""
        self.hint = hint
        return self

    def to_diagnostic(self) -> "Diagnostic":
        """Render this error as a Diagnostic."""
        from udflint.diagnostics import Diagnostic, DiagnosticSeverity, SourceLocation

        location = None
        if self.span.file or self.span.line:
            location = SourceLocation(
                file=self.span.file or "<udf>",
                line=self.span.line,
                column=self.span.column,
            )
        return Diagnostic(
            error_id=self.code.slug,
            code=self.code.code,
            message=self.message,
            severity=DiagnosticSeverity.ERROR,
            location=location,
        )

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        main = f"{self.span}: error: {self.message} [{self.code}]"
        if self.hint:
            return f"{main}\nhint: {self.hint}"
        return main

    def to_json(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "code": self.code.code,
            "errorId": self.code.slug,
            "message": self.message,
            "phase": self.code.phase.value,
            "location": {
                "file": self.span.file,
                "line": self.span.line,
                "column": self.span.column,
            },
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


class LuaParseError(UdfLintError):
    """The script is not syntactically valid Lua."""

    default_code = UdfErrorCodes.PARSE_FAILURE

    def __init__(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=UdfErrorCodes.PARSE_FAILURE,
            span=span,
            **kwargs,
        )


class ConfigError(UdfLintError):
    """Invalid checker configuration."""

    default_code = UdfErrorCodes.INVALID_CONFIG


class InternalError(UdfLintError):
    """Internal validator error (indicates a bug)."""

    default_code = UdfErrorCodes.INTERNAL_ERROR

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message=f"Internal error: {message}", **kwargs)
