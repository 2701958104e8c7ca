# tests/test_config.py
"""
Tests for CheckerConfig and the error types.
"""

import argparse

import pytest

from udflint.config import CheckerConfig
from udflint.errors import (
    ConfigError,
    ErrorCode,
    ErrorPhase,
    InternalError,
    LuaParseError,
    SourceSpan,
    UdfErrorCodes,
)


class TestCheckerConfig:

    def test_defaults_valid(self):
        config = CheckerConfig()
        assert config.validate() == []
        assert config.sanity_check
        assert config.inline_suppressions

    def test_unknown_suppression(self):
        problems = CheckerConfig(suppressions=("nope",)).validate()
        assert problems == ["unknown error id in suppressions: 'nope'"]

    def test_parse_failure_not_suppressible(self):
        problems = CheckerConfig(suppressions=("parse-failure",)).validate()
        assert problems == ["parse failures cannot be suppressed"]

    def test_wildcard_allowed(self):
        assert CheckerConfig(suppressions=("*",)).validate() == []

    def test_extra_reserved_must_be_identifier(self):
        problems = CheckerConfig(extra_reserved=("ok_name", "not-valid")).validate()
        assert problems == ["not a Lua identifier: 'not-valid'"]

    def test_registry_extension(self):
        registry = CheckerConfig(extra_reserved=("cache",)).registry()
        assert registry.is_reserved("cache")
        assert registry.is_reserved("record")

    def test_from_args(self):
        args = argparse.Namespace(
            no_exec=True,
            suppress=["global-variable"],
            no_inline_suppressions=False,
            reserve=None,
        )
        config = CheckerConfig.from_args(args, filename="m.lua")
        assert config == CheckerConfig(
            filename="m.lua",
            sanity_check=False,
            suppressions=("global-variable",),
        )

    def test_from_args_invalid(self):
        args = argparse.Namespace(suppress=["bogus"])
        with pytest.raises(ConfigError) as info:
            CheckerConfig.from_args(args)
        assert info.value.code == UdfErrorCodes.INVALID_CONFIG


class TestErrors:

    def test_codes(self):
        assert str(UdfErrorCodes.RESERVED_IDENTIFIER) == "UDF-3000"
        assert UdfErrorCodes.GLOBAL_VARIABLE.slug == "global-variable"
        assert UdfErrorCodes.by_slug("execution-failure") is UdfErrorCodes.EXECUTION_FAILURE
        assert UdfErrorCodes.by_slug("missing") is None

    def test_code_equality_consistent_with_hash(self):
        same = ErrorCode("UDF", 3001, "global-variable", ErrorPhase.SEMANTIC)
        assert same == UdfErrorCodes.GLOBAL_VARIABLE
        assert {UdfErrorCodes.GLOBAL_VARIABLE: "g"}[same] == "g"
        assert UdfErrorCodes.GLOBAL_VARIABLE != "UDF-3001"
        assert UdfErrorCodes.GLOBAL_VARIABLE != "global-variable"
        assert "UDF-3001" not in {UdfErrorCodes.GLOBAL_VARIABLE}

    def test_parse_error_format(self):
        exc = LuaParseError("unexpected symbol near '='", SourceSpan("m.lua", 1, 7))
        assert exc.to_gcc_format() == (
            "m.lua:1:7: error: unexpected symbol near '=' [UDF-1000]"
        )
        assert exc.to_json()["errorId"] == "parse-failure"

    def test_parse_error_as_diagnostic(self):
        diag = LuaParseError("bad", SourceSpan("m.lua", 2)).to_diagnostic()
        assert diag.error_id == "parse-failure"
        assert str(diag.location) == "m.lua:2"

    def test_internal_error_prefix(self):
        exc = InternalError("oops")
        assert exc.message == "Internal error: oops"
        assert exc.code == UdfErrorCodes.INTERNAL_ERROR

    def test_hint(self):
        exc = ConfigError("bad option").with_hint("see --help")
        assert exc.to_gcc_format().endswith("hint: see --help")
