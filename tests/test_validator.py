"""Tests for Result and the Validator base class."""

import pytest

from hookwarden.validator import Result, Validator
from tests.utils import StubValidator, bash_context


class TestResult:
    """Tests for Result constructors."""

    def test_ok(self):
        result = Result.ok()
        assert result.passed
        assert not result.should_block
        assert result.message == ""

    def test_fail_blocks(self):
        result = Result.fail("nope")
        assert not result.passed
        assert result.should_block
        assert result.message == "nope"

    def test_warn_does_not_block(self):
        result = Result.warn("careful")
        assert not result.passed
        assert not result.should_block

    def test_with_detail_returns_copy(self):
        base = Result.fail("nope")
        detailed = base.with_detail("help", "do this").with_detail("file", "a.sh")
        assert detailed.details == {"help": "do this", "file": "a.sh"}
        assert base.details == {}
        assert detailed.should_block


class TestValidatorBase:
    """Tests for Validator helpers."""

    def test_abstract(self):
        with pytest.raises(TypeError):
            Validator("x")

    def test_fail_honors_blocking(self):
        assert StubValidator("a").fail("bad").should_block

    def test_fail_downgraded_when_not_blocking(self):
        validator = StubValidator("a")
        validator.blocking = False
        result = validator.fail("bad")
        assert not result.passed
        assert not result.should_block

    def test_logger_name(self):
        assert StubValidator("validate-x").logger.name == "hookwarden.validators.validate-x"

    def test_repr(self):
        assert repr(StubValidator("a")) == "StubValidator(name='a', blocking=True)"

    def test_stub_counts_calls(self):
        validator = StubValidator("a", Result.warn("w"))
        assert validator.validate(bash_context("ls")) == Result.warn("w")
        assert validator.calls == 1
