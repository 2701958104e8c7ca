"""Checker configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Tuple

from udflint.errors import ConfigError, UdfErrorCodes
from udflint.reserved import DEFAULT_RESERVED, ReservedNames

_LUA_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class CheckerConfig:
    """Tuning knobs for one :class:`~udflint.checker.UdfChecker`."""
    filename: str = "<udf>"
    sanity_check: bool = True
    suppressions: Tuple[str, ...] = ()
    inline_suppressions: bool = True
    extra_reserved: Tuple[str, ...] = ()

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        problems: List[str] = []
        if not self.filename:
            problems.append("filename must not be empty")
        for error_id in self.suppressions:
            if error_id == "*":
                continue
            code = UdfErrorCodes.by_slug(error_id)
            if code is None:
                problems.append(f"unknown error id in suppressions: {error_id!r}")
            elif code == UdfErrorCodes.PARSE_FAILURE:
                problems.append("parse failures cannot be suppressed")
        for name in self.extra_reserved:
            if not _LUA_NAME.match(name):
                problems.append(f"not a Lua identifier: {name!r}")
        return problems

    def registry(self) -> ReservedNames:
        """The reserved-name registry this configuration checks against."""
        if not self.extra_reserved:
            return DEFAULT_RESERVED
        return DEFAULT_RESERVED.extended(self.extra_reserved)

    @classmethod
    def from_args(cls, args: Any, filename: str = "<udf>") -> "CheckerConfig":
        """Build a config from parsed CLI arguments.

        Raises ConfigError if the resulting config is invalid.
        """
        config = cls(
            filename=filename,
            sanity_check=not getattr(args, "no_exec", False),
            suppressions=tuple(getattr(args, "suppress", None) or ()),
            inline_suppressions=not getattr(args, "no_inline_suppressions", False),
            extra_reserved=tuple(getattr(args, "reserve", None) or ()),
        )
        problems = config.validate()
        if problems:
            raise ConfigError("; ".join(problems))
        return config
