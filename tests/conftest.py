# tests/conftest.py
"""
Shared Lua snippets and statement-tree builders for udflint tests.
"""

from types import SimpleNamespace

import pytest

from udflint import ast as A
from udflint.checker import UdfChecker
from udflint.config import CheckerConfig


# ---------------------------------------------------------------------------
# Lua sources
# ---------------------------------------------------------------------------

CLEAN_UDF = """\
local function add(a, b)
  return a + b
end

function increment(rec, bin)
  local value = rec[bin] or 0
  rec[bin] = add(value, 1)
  return rec[bin]
end
"""

RESERVED_AT_ROOT = "local aerospike = 1\n"

GLOBAL_AT_ROOT = "local x = 1\n"

LOCAL_IN_FUNCTION = """\
local function f()
  local x = 1
end
"""

RESERVED_PARAM_AT_ROOT = """\
local function f(map)
end
"""

RESERVED_PARAM_NESTED = """\
local function f()
  local function g(map)
  end
end
"""

TWO_ROOT_VIOLATIONS = """\
local first = 1
local second = 2
"""

RESERVED_AND_GLOBAL = """\
local function f(record)
end
local counter = 0
"""

BRANCHES = """\
if cond then
  local list = 1
elseif other then
  stream = 2
else
  geojson = 3
end
"""

LOOPS = """\
for i = 1, 3 do
  local map = i
end
for k, v in pairs({}) do
  bytes = v
end
while false do
  local iterator = 1
end
repeat
  local record = 1
until true
"""

FIELD_ASSIGNMENT = """\
local function f(rec)
  rec.bin = 1
end
"""

SYNTAX_ERROR = "local = = 1\n"

RUNTIME_ERROR = 'error("boom")\n'

SUPPRESSED = """\
-- udflint: ignore global-variable
local cache = {}
"""


# ---------------------------------------------------------------------------
# Tree builders
# ---------------------------------------------------------------------------

def N(name, line=None):
    return A.Name(name, line)


def local(*names):
    return A.LocalDeclaration(tuple(N(n) if isinstance(n, str) else n for n in names))


def assign(*targets):
    return A.Assignment(tuple(N(t) if isinstance(t, str) else t for t in targets))


def func(params=(), *body, name="f", is_local=True):
    return A.FunctionDeclaration(
        name=name,
        params=tuple(N(p) for p in params),
        body=tuple(body),
        local=is_local,
    )


def tree(*stmts):
    return A.SyntaxTree(tuple(stmts))


def symbols(diagnostics):
    return [(d.error_id, d.symbol) for d in diagnostics]


class FakeRunner:
    """Records calls; fails with ``message`` when given one."""

    def __init__(self, message=None):
        self.message = message
        self.calls = []

    def run(self, text):
        self.calls.append(text)
        if self.message is None:
            return SimpleNamespace(ok=True, message=None)
        return SimpleNamespace(ok=False, message=self.message)


def fixed_parser(result):
    """A parser double that ignores its input and returns *result*."""
    def _parse(text, filename="<udf>"):
        return result
    return _parse


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def make_checker():
    def _make(parsed, runner=None, **config):
        return UdfChecker(
            CheckerConfig(**config),
            parser=fixed_parser(parsed),
            runner=runner or FakeRunner(),
        )
    return _make
