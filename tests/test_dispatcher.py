"""Tests for validation dispatch and error formatting."""

import logging

from hookwarden.dispatcher import (
    Dispatcher,
    ValidationError,
    format_errors,
    should_block,
)
from hookwarden.hook import EventType, ToolName
from hookwarden.registry import Registry, when
from hookwarden.validator import Result
from tests.utils import StubValidator, bash_context, notification_context

BASH = when(EventType.PRE_TOOL_USE, tools=(ToolName.BASH,))


def make_dispatcher(*validators):
    registry = Registry()
    for validator in validators:
        registry.register(validator, BASH)
    return Dispatcher(registry)


class TestDispatch:
    """Tests for Dispatcher.dispatch."""

    def test_no_applicable_validators(self):
        dispatcher = make_dispatcher(StubValidator("a", Result.fail("x")))
        assert dispatcher.dispatch(notification_context()) == []

    def test_all_pass(self):
        dispatcher = make_dispatcher(StubValidator("a"), StubValidator("b"))
        assert dispatcher.dispatch(bash_context("ls")) == []

    def test_failure_recorded(self):
        dispatcher = make_dispatcher(
            StubValidator("a", Result.fail("bad").with_detail("help", "fix it")),
        )
        assert dispatcher.dispatch(bash_context("ls")) == [
            ValidationError("a", "bad", {"help": "fix it"}, should_block=True),
        ]

    def test_runs_every_validator_after_block(self):
        first = StubValidator("a", Result.fail("first"))
        second = StubValidator("b", Result.fail("second"))
        third = StubValidator("c", Result.warn("third"))
        errors = make_dispatcher(first, second, third).dispatch(bash_context("ls"))

        assert [e.validator_name for e in errors] == ["a", "b", "c"]
        assert (first.calls, second.calls, third.calls) == (1, 1, 1)

    def test_warning_only_does_not_block(self):
        errors = make_dispatcher(StubValidator("a", Result.warn("w"))).dispatch(bash_context("ls"))
        assert len(errors) == 1
        assert not should_block(errors)

    def test_idempotent(self):
        dispatcher = make_dispatcher(
            StubValidator("a", Result.fail("x")),
            StubValidator("b", Result.warn("y")),
        )
        ctx = bash_context("git push --force")
        assert dispatcher.dispatch(ctx) == dispatcher.dispatch(ctx)

    def test_adding_blocking_validator_keeps_block(self):
        ctx = bash_context("ls")
        before = make_dispatcher(StubValidator("a", Result.fail("x"))).dispatch(ctx)
        after = make_dispatcher(
            StubValidator("a", Result.fail("x")),
            StubValidator("b", Result.warn("y")),
        ).dispatch(ctx)
        assert should_block(before)
        assert should_block(after)

    def test_logs_failures(self, caplog):
        dispatcher = make_dispatcher(StubValidator("a", Result.fail("bad")))
        with caplog.at_level(logging.INFO, logger="hookwarden.dispatcher"):
            dispatcher.dispatch(bash_context("ls"))
        assert "Validator a failed: bad" in caplog.text

    def test_failures_quiet_at_default_level(self, caplog):
        """Blocking messages reach stderr once, via format_errors only."""
        dispatcher = make_dispatcher(StubValidator("a", Result.fail("bad")))
        with caplog.at_level(logging.WARNING, logger="hookwarden.dispatcher"):
            errors = dispatcher.dispatch(bash_context("ls"))
        assert errors[0].message == "bad"
        assert "bad" not in caplog.text


class TestShouldBlock:
    """Tests for should_block."""

    def test_empty(self):
        assert not should_block([])

    def test_any_blocking(self):
        assert should_block([
            ValidationError("a", should_block=False),
            ValidationError("b", should_block=True),
        ])


class TestFormatErrors:
    """Tests for format_errors."""

    def test_empty(self):
        assert format_errors([]) == ""

    def test_blocking_before_warnings(self):
        text = format_errors([
            ValidationError("w", "just a warning"),
            ValidationError("b", "hard stop", should_block=True),
        ])
        assert text.index("❌ Validation Failed:") < text.index("hard stop")
        assert text.index("hard stop") < text.index("⚠️  Warnings:")
        assert text.index("⚠️  Warnings:") < text.index("just a warning")

    def test_details_sorted(self):
        text = format_errors([
            ValidationError("b", "stop", {"zeta": "2", "alpha": "1"}, should_block=True),
        ])
        assert "    alpha: 1\n    zeta: 2" in text

    def test_warnings_only_has_no_failure_header(self):
        text = format_errors([ValidationError("w", "careful")])
        assert "Validation Failed" not in text
        assert "  careful" in text

    def test_message_falls_back_to_name(self):
        assert "  validate-x" in format_errors([ValidationError("validate-x", should_block=True)])

    def test_str(self):
        assert str(ValidationError("a", "bad")) == "a: bad"
        assert str(ValidationError("a")) == "a"
