"""Tests for the shell script validator."""

import pytest

from hookwarden.hook import Edit, ToolName
from hookwarden.linters import LintResult
from hookwarden.validators.file import (
    ShellScriptValidator,
    format_shellcheck_output,
    is_fish_script,
    is_shell_script,
)
from tests.utils import file_context


@pytest.fixture
def checker(mocker):
    """ShellChecker double that reports a clean lint."""
    mock = mocker.MagicMock()
    mock.timeout = 10
    mock.check.return_value = LintResult(success=True)
    return mock


class TestShellScriptValidator:
    """Tests for ShellScriptValidator.validate."""

    def test_clean_script_passes(self, checker):
        ctx = file_context(ToolName.WRITE, "run.sh", content="echo hi\n")
        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_called_once_with("echo hi\n")

    def test_lint_failure_blocks(self, checker):
        checker.check.return_value = LintResult(
            success=False, output="In - line 1:\necho $x\n     ^-- SC2086\n",
        )
        ctx = file_context(ToolName.WRITE, "run.sh", content="echo $x\n")

        result = ShellScriptValidator(checker=checker).validate(ctx)

        assert result.should_block
        assert result.message.startswith("Shellcheck validation failed")
        assert "SC2086" in result.message

    def test_lint_failure_as_warning(self, checker):
        checker.check.return_value = LintResult(success=False, output="SC2086")
        ctx = file_context(ToolName.WRITE, "run.sh", content="echo $x\n")

        result = ShellScriptValidator(checker=checker, blocking=False).validate(ctx)

        assert not result.passed
        assert not result.should_block

    def test_timeout_warns(self, checker):
        checker.check.return_value = LintResult(success=False, timed_out=True)
        ctx = file_context(ToolName.WRITE, "run.sh", content="echo hi\n")

        result = ShellScriptValidator(checker=checker).validate(ctx)

        assert not result.should_block
        assert "timed out after 10s" in result.message

    def test_non_shell_file_skipped(self, checker):
        ctx = file_context(ToolName.WRITE, "app.py", content="print('hi')\n")
        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_not_called()

    def test_shebang_without_extension(self, checker):
        ctx = file_context(ToolName.WRITE, "bin/deploy", content="#!/usr/bin/env bash\nls\n")
        ShellScriptValidator(checker=checker).validate(ctx)
        checker.check.assert_called_once()

    def test_fish_script_skipped(self, checker):
        ctx = file_context(ToolName.WRITE, "conf.fish", content="set -x A 1\n")
        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_not_called()

    def test_empty_content_skipped(self, checker):
        ctx = file_context(ToolName.WRITE, "run.sh", content="  \n")
        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_not_called()

    def test_no_file_path(self, checker):
        ctx = file_context(ToolName.WRITE, "", content="echo hi\n")
        assert ShellScriptValidator(checker=checker).validate(ctx).passed


class TestEditContent:
    """Edits are linted as the file will look afterwards."""

    def test_edit_applied_to_file(self, checker, tmp_path):
        script = tmp_path / "run.sh"
        script.write_text("echo one\necho one\n")
        ctx = file_context(
            ToolName.EDIT, str(script), old_string="one", new_string="two",
        )

        ShellScriptValidator(checker=checker).validate(ctx)

        checker.check.assert_called_once_with("echo two\necho one\n")

    def test_replace_all(self, checker, tmp_path):
        script = tmp_path / "run.sh"
        script.write_text("echo one\necho one\n")
        ctx = file_context(
            ToolName.EDIT, str(script),
            old_string="one", new_string="two", extra={"replace_all": True},
        )

        ShellScriptValidator(checker=checker).validate(ctx)

        checker.check.assert_called_once_with("echo two\necho two\n")

    def test_multiedit_applied_in_order(self, checker, tmp_path):
        script = tmp_path / "run.sh"
        script.write_text("a b c\n")
        ctx = file_context(
            ToolName.MULTI_EDIT, str(script),
            edits=(Edit("a", "x"), Edit("x b", "y")),
        )

        ShellScriptValidator(checker=checker).validate(ctx)

        checker.check.assert_called_once_with("y c\n")

    def test_missing_file_skipped(self, checker, tmp_path):
        ctx = file_context(
            ToolName.EDIT, str(tmp_path / "gone.sh"), old_string="a", new_string="b",
        )
        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_not_called()

    def test_non_utf8_file_skipped(self, checker, tmp_path):
        """An undecodable target is skipped instead of crashing the hook."""
        script = tmp_path / "run.sh"
        script.write_bytes(b"#!/bin/bash\necho \xff\n")
        ctx = file_context(
            ToolName.EDIT, str(script), old_string="echo", new_string="printf",
        )

        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_not_called()

    def test_old_string_not_found_skipped(self, checker, tmp_path):
        """An edit that changes nothing does not lint the existing file."""
        script = tmp_path / "run.sh"
        script.write_text("echo $unquoted\n")
        ctx = file_context(
            ToolName.EDIT, str(script), old_string="missing", new_string="x",
        )

        assert ShellScriptValidator(checker=checker).validate(ctx).passed
        checker.check.assert_not_called()

    def test_multiedit_skips_unmatched_edits(self, checker, tmp_path):
        script = tmp_path / "run.sh"
        script.write_text("a b\n")
        ctx = file_context(
            ToolName.MULTI_EDIT, str(script),
            edits=(Edit("zzz", "q"), Edit("b", "c")),
        )

        ShellScriptValidator(checker=checker).validate(ctx)

        checker.check.assert_called_once_with("a c\n")


class TestSyntaxFallback:
    """bashlex syntax check when shellcheck is not installed."""

    def test_valid_script_passes(self, checker):
        checker.check.return_value = LintResult(success=True, available=False)
        ctx = file_context(ToolName.WRITE, "run.sh", content="echo hi && ls -la\n")
        assert ShellScriptValidator(checker=checker).validate(ctx).passed

    def test_syntax_error_warns(self, checker):
        checker.check.return_value = LintResult(success=True, available=False)
        ctx = file_context(ToolName.WRITE, "run.sh", content="echo (\n")

        result = ShellScriptValidator(checker=checker).validate(ctx)

        assert not result.passed
        assert not result.should_block
        assert result.message.startswith("Shell script syntax error")
        assert "shellcheck is not installed" in result.details["note"]


class TestHelpers:
    """Tests for script detection helpers."""

    @pytest.mark.parametrize("path, content, expected", [
        ("a.sh", "", True),
        ("a.bash", "", True),
        ("a", "#!/bin/sh\n", True),
        ("a", "#!/usr/bin/env bash\n", True),
        ("a", "#!/usr/bin/env python3\n", False),
        ("a.zsh", "", False),
    ])
    def test_is_shell_script(self, path, content, expected):
        assert is_shell_script(path, content) is expected

    def test_is_fish_script(self):
        assert is_fish_script("x.fish", "")
        assert is_fish_script("x", "#!/usr/bin/env fish\n")
        assert not is_fish_script("x.sh", "#!/bin/bash\n")

    def test_format_drops_blank_lines(self):
        text = format_shellcheck_output("\nline one\n\nline two\n")
        assert text == (
            "Shellcheck validation failed\n\n"
            "line one\nline two\n\n"
            "Fix these issues before committing."
        )
