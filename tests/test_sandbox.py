# tests/test_sandbox.py
"""
Tests for the lupa-backed execution sanity check.
"""

import pytest

pytest.importorskip("lupa")

from udflint.sandbox import LuaSandbox, RunOutcome
from tests.conftest import CLEAN_UDF, RUNTIME_ERROR


@pytest.fixture
def sandbox():
    return LuaSandbox()


class TestLuaSandbox:

    def test_clean_script_runs(self, sandbox):
        assert sandbox.run(CLEAN_UDF) == RunOutcome.success()

    def test_error_call_fails(self, sandbox):
        outcome = sandbox.run(RUNTIME_ERROR)
        assert not outcome.ok
        assert "boom" in outcome.message

    def test_calling_nil_fails(self, sandbox):
        outcome = sandbox.run("missing_function()\n")
        assert not outcome.ok
        assert outcome.message

    def test_fresh_runtime_per_run(self, sandbox):
        assert sandbox.run("leaked = 42\n").ok
        outcome = sandbox.run('assert(leaked == nil, "state leaked")\n')
        assert outcome.ok

    def test_python_bridge_removed(self, sandbox):
        outcome = sandbox.run('assert(python == nil, "bridge visible")\n')
        assert outcome.ok

    def test_os_exit_blocked(self, sandbox):
        outcome = sandbox.run("os.exit(0)\n")
        assert not outcome.ok

    def test_io_blocked(self, sandbox, tmp_path):
        target = tmp_path / "written.txt"
        outcome = sandbox.run(f"io.open([[{target}]], 'w'):write('x')\n")
        assert not outcome.ok
        assert not target.exists()

    @pytest.mark.parametrize("name", [
        "io", "debug", "package", "require", "dofile", "loadfile", "python",
    ])
    def test_host_globals_removed(self, sandbox, name):
        outcome = sandbox.run(f'assert({name} == nil, "{name} visible")\n')
        assert outcome.ok, outcome.message

    def test_pure_libraries_kept(self, sandbox):
        source = 'local s = string.upper(table.concat({"a", "b"})) .. math.floor(1.5)\n'
        assert sandbox.run(source + 'assert(s == "AB1")\n').ok

    def test_os_clock_kept(self, sandbox):
        assert sandbox.run("assert(type(os.time()) == 'number')\n").ok
        assert sandbox.run("assert(os.execute == nil and os.remove == nil)\n").ok

    def test_binary_chunks_refused(self, sandbox):
        source = "assert(load(string.dump(function() end)) == nil)\n"
        assert sandbox.run(source).ok

    def test_failure_is_logged(self, sandbox, caplog):
        with caplog.at_level("WARNING", logger="udflint.sandbox"):
            sandbox.run(RUNTIME_ERROR)
        assert "sandboxed run failed" in caplog.text


class TestRunOutcome:

    def test_constructors(self):
        assert RunOutcome.success() == RunOutcome(ok=True)
        assert RunOutcome.failure("x") == RunOutcome(ok=False, message="x")
