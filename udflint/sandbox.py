# udflint/sandbox.py
"""
Execution sanity-check: load and run a script in a fresh Lua runtime.

Used only as a fallback signal after static validation passed.  Each
call builds its own ``lupa.LuaRuntime`` so nothing leaks between
scripts.  The runtime keeps the pure libraries (``string``, ``table``,
``math``, ``coroutine``, ``utf8``) and loses everything that reaches
the host: ``io``, ``debug``, ``package``/``require``, ``dofile``,
``loadfile``, the Python bridge, and all of ``os`` except the clock and
date functions.  Scripts are loaded as text only; precompiled chunks
are refused.

There is no timeout: a script that loops forever at load time blocks
the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from lupa import LuaError, LuaRuntime

logger = logging.getLogger(__name__)

#: Globals removed from every sandboxed runtime.
BLOCKED_GLOBALS = (
    "io",
    "debug",
    "package",
    "require",
    "dofile",
    "loadfile",
    "loadstring",
    "python",
)

#: Functions of ``os`` that stay visible.
SAFE_OS_FUNCTIONS = ("clock", "date", "difftime", "time")

# Runs once per runtime, after the globals above are cleared.  Returns
# the loader used for the script itself.
_LOADER = """
local load, error = load, error
_G.load = function(chunk, name, mode, env)
  return load(chunk, name, "t", env)
end
return function(text)
  local chunk, err = load(text, "=udf", "t")
  if not chunk then
    error(err, 0)
  end
  return chunk()
end
"""


@dataclass(frozen=True)
class RunOutcome:
    """Result of one sandboxed run."""
    ok: bool
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "RunOutcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> "RunOutcome":
        return cls(ok=False, message=message)


class LuaSandbox:
    """Runs script text in an isolated Lua interpreter."""

    def run(self, text: str) -> RunOutcome:
        execute = self._new_runtime()
        try:
            execute(text)
        except LuaError as exc:
            message = str(exc).strip() or type(exc).__name__
            logger.warning("sandboxed run failed: %s", message)
            return RunOutcome.failure(message)
        logger.debug("sandboxed run succeeded")
        return RunOutcome.success()

    def _new_runtime(self) -> Any:
        lua = LuaRuntime(
            register_eval=False,
            register_builtins=False,
            unpack_returned_tuples=True,
        )
        env = lua.globals()
        safe_os = lua.table()
        for name in SAFE_OS_FUNCTIONS:
            safe_os[name] = env.os[name]
        env.os = safe_os
        for name in BLOCKED_GLOBALS:
            env[name] = None
        return lua.execute(_LOADER)
