# tests/test_diagnostics.py
"""
Tests for diagnostics, suppressions and the collector.
"""

import json

import pytest

from udflint.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSeverity,
    SourceLocation,
    SuppressionManager,
)


def _diag(error_id="global-variable", line=0, symbol="x", file="mod.lua"):
    return Diagnostic(
        error_id=error_id,
        code="UDF-3001",
        message=f"{error_id}: {symbol}",
        location=SourceLocation(file=file, line=line),
        symbol=symbol,
    )


class TestDiagnostic:

    def test_gcc_format_with_line(self):
        assert _diag(line=3).to_gcc_format() == (
            "mod.lua:3: error: [global-variable] global-variable: x"
        )

    def test_gcc_format_without_location(self):
        diag = Diagnostic("execution-failure", "UDF-5000", "boom")
        assert diag.to_gcc_format() == "<unknown>: error: [execution-failure] boom"

    def test_to_dict_is_json_serialisable(self):
        data = _diag(line=2).to_dict()
        assert json.loads(json.dumps(data)) == {
            "errorId": "global-variable",
            "code": "UDF-3001",
            "message": "global-variable: x",
            "severity": "error",
            "location": {"file": "mod.lua", "line": 2, "column": 0},
            "symbol": "x",
        }

    def test_immutable(self):
        with pytest.raises(AttributeError):
            _diag().message = "changed"


class TestSuppressionManager:

    def test_global_suppression(self):
        manager = SuppressionManager(["global-variable"])
        assert manager.is_suppressed(_diag())
        assert not manager.is_suppressed(_diag("reserved-identifier"))

    def test_wildcard(self):
        manager = SuppressionManager(["*"])
        assert manager.is_suppressed(_diag("reserved-identifier"))

    def test_inline_covers_same_and_next_line(self):
        manager = SuppressionManager()
        manager.load_inline_suppressions_from_source(
            "local a = 1\n-- udflint: ignore global-variable\nlocal b = 2\nlocal c = 3\n",
            "mod.lua",
        )
        assert not manager.is_suppressed(_diag(line=1))
        assert manager.is_suppressed(_diag(line=2))
        assert manager.is_suppressed(_diag(line=3))
        assert not manager.is_suppressed(_diag(line=4))

    def test_inline_multiple_ids(self):
        manager = SuppressionManager()
        manager.load_inline_suppressions_from_source(
            "local map = 1 -- udflint: ignore reserved-identifier, global-variable\n",
            "mod.lua",
        )
        assert manager.is_suppressed(_diag("reserved-identifier", line=1))
        assert manager.is_suppressed(_diag("global-variable", line=1))

    def test_inline_is_per_file(self):
        manager = SuppressionManager()
        manager.load_inline_suppressions_from_source(
            "-- udflint: ignore global-variable\n", "a.lua"
        )
        assert not manager.is_suppressed(_diag(line=1, file="b.lua"))

    def test_inline_needs_a_line(self):
        manager = SuppressionManager()
        manager.load_inline_suppressions_from_source(
            "-- udflint: ignore global-variable\n", "mod.lua"
        )
        assert not manager.is_suppressed(_diag(line=0))

    def test_filter(self):
        manager = SuppressionManager(["global-variable"])
        kept = manager.filter_diagnostics([_diag(), _diag("reserved-identifier")])
        assert [d.error_id for d in kept] == ["reserved-identifier"]


class TestDiagnosticCollector:

    def test_preserves_order_and_duplicates(self):
        collector = DiagnosticCollector()
        items = [_diag(symbol="b"), _diag(symbol="a"), _diag(symbol="b")]
        collector.extend(items)
        assert collector.diagnostics == items

    def test_empty(self):
        collector = DiagnosticCollector()
        assert collector.is_empty()
        assert not collector.has_errors()
        assert collector.error_count() == 0

    def test_report(self):
        collector = DiagnosticCollector()
        collector.report("reserved-identifier", "UDF-3000", "bad", symbol="map")
        assert not collector.is_empty()
        assert collector.error_count() == 1
        assert collector.diagnostics[0].symbol == "map"

    def test_warnings_are_not_errors(self):
        collector = DiagnosticCollector()
        collector.report("x", "UDF-0000", "note", severity=DiagnosticSeverity.WARNING)
        assert not collector.has_errors()
        assert len(collector) == 1

    def test_suppressed_are_counted_not_kept(self):
        collector = DiagnosticCollector(
            suppression_manager=SuppressionManager(["global-variable"])
        )
        collector.extend([_diag(), _diag("reserved-identifier")])
        assert len(collector) == 1
        assert collector.suppressed_count == 1

    def test_diagnostics_returns_copy(self):
        collector = DiagnosticCollector()
        collector.add(_diag())
        collector.diagnostics.clear()
        assert len(collector) == 1

    def test_clear(self):
        collector = DiagnosticCollector()
        collector.add(_diag())
        collector.clear()
        assert collector.is_empty()
