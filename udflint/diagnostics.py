"""
Diagnostic model for UDF validation.

Provides:
- ``Diagnostic`` — one reported violation, immutable
- ``SuppressionManager`` — global and inline (``-- udflint: ignore``) suppressions
- ``DiagnosticCollector`` — ordered accumulator for a single validation run
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
)

# ============================================================================
# PART 1 — DIAGNOSTIC MODEL
# ============================================================================


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Immutable source location for diagnostics."""
    file: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line <= 0:
            return self.file
        if self.column > 0:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    A single validation finding.

    Attributes:
        error_id: Stable rule identifier (e.g. "reserved-identifier")
        code: Printable error code (e.g. "UDF-3000")
        message: Human-readable description naming the offending identifier
        severity: How serious the issue is
        location: Where it was found; the line is 0 when unknown
        symbol: The offending identifier, when the rule concerns one
    """
    error_id: str
    code: str
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    location: Optional[SourceLocation] = None
    symbol: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "errorId": self.error_id,
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.location:
            result["location"] = {
                "file": self.location.file,
                "line": self.location.line,
                "column": self.location.column,
            }
        if self.symbol is not None:
            result["symbol"] = self.symbol
        return result

    def to_gcc_format(self) -> str:
        """Format as GCC-style diagnostic string."""
        loc_str = str(self.location) if self.location else "<unknown>"
        return f"{loc_str}: {self.severity.value}: [{self.error_id}] {self.message}"

    def __str__(self) -> str:
        return self.message


# ============================================================================
# PART 2 — SUPPRESSION MANAGER
# ============================================================================

_INLINE_SUPPRESS = re.compile(
    r'--\s*udflint:\s*ignore\s+([\w-]+(?:[\s,]+[\w-]+)*)',
    re.IGNORECASE,
)


class SuppressionManager:
    """
    Manages diagnostic suppressions.

    Suppression sources:
    1. Inline comments: -- udflint: ignore error-id [error-id ...]
    2. Global suppressions: error IDs suppressed everywhere
    """

    def __init__(self, global_ids: Iterable[str] = ()) -> None:
        # (file, line) -> set of suppressed error IDs ("*" for all)
        self._inline: Dict[Tuple[str, int], Set[str]] = {}
        self._global: Set[str] = set(global_ids)

    def add_inline_suppression(
        self, file: str, line: int, error_id: str
    ) -> None:
        """Add an inline suppression for a specific location."""
        self._inline.setdefault((file, line), set()).add(error_id)

    def load_inline_suppressions_from_source(self, source: str, filename: str) -> None:
        """
        Scan Lua source text for suppression comments.
        A comment covers its own line and the next one.
        """
        for line_num, line in enumerate(source.splitlines(), start=1):
            match = _INLINE_SUPPRESS.search(line)
            if match:
                for error_id in re.split(r'[\s,]+', match.group(1)):
                    self.add_inline_suppression(filename, line_num, error_id)
                    self.add_inline_suppression(filename, line_num + 1, error_id)

    def is_suppressed(self, diag: Diagnostic) -> bool:
        """Check if a diagnostic should be suppressed."""
        error_id = diag.error_id

        if error_id in self._global or "*" in self._global:
            return True

        if diag.location is None or diag.location.line <= 0:
            return False

        suppressed = self._inline.get((diag.location.file, diag.location.line))
        if suppressed and (error_id in suppressed or "*" in suppressed):
            return True

        return False

    def filter_diagnostics(
        self, diagnostics: Iterable[Diagnostic]
    ) -> List[Diagnostic]:
        """Return diagnostics that are not suppressed."""
        return [d for d in diagnostics if not self.is_suppressed(d)]


# ============================================================================
# PART 3 — DIAGNOSTIC COLLECTOR
# ============================================================================


class DiagnosticCollector:
    """
    Collects diagnostics for one validation run, in discovery order.

    Order is never changed and nothing is deduplicated; the only
    diagnostics dropped are the suppressed ones.
    """

    def __init__(
        self,
        *,
        suppression_manager: Optional[SuppressionManager] = None,
    ) -> None:
        self._diagnostics: List[Diagnostic] = []
        self._suppression = suppression_manager or SuppressionManager()
        self._suppressed_count = 0

    def add(self, diag: Diagnostic) -> None:
        """Append a diagnostic unless it is suppressed."""
        if self._suppression.is_suppressed(diag):
            self._suppressed_count += 1
            return
        self._diagnostics.append(diag)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diag in diagnostics:
            self.add(diag)

    def report(
        self,
        error_id: str,
        code: str,
        message: str,
        severity: DiagnosticSeverity = DiagnosticSeverity.ERROR,
        location: Optional[SourceLocation] = None,
        **kwargs: Any,
    ) -> None:
        """Build and add a diagnostic."""
        self.add(
            Diagnostic(
                error_id=error_id,
                code=code,
                message=message,
                severity=severity,
                location=location,
                **kwargs,
            )
        )

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def suppressed_count(self) -> int:
        return self._suppressed_count

    def is_empty(self) -> bool:
        return not self._diagnostics

    def has_errors(self) -> bool:
        """Check if any ERROR diagnostics were collected."""
        return any(d.severity == DiagnosticSeverity.ERROR for d in self._diagnostics)

    def error_count(self) -> int:
        """Count ERROR severity diagnostics."""
        return sum(1 for d in self._diagnostics if d.severity == DiagnosticSeverity.ERROR)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def clear(self) -> None:
        """Clear all collected diagnostics."""
        self._diagnostics.clear()
        self._suppressed_count = 0
