"""Shell script validator.

Lints shell scripts written or edited by the agent with shellcheck.
When shellcheck is not installed, falls back to a bashlex syntax check
so that malformed scripts still produce a warning.
"""

import os
import re

import bashlex
from bashlex.errors import ParsingError

from hookwarden.constants import DEFAULT_LINTER_TIMEOUT, SHELLSCRIPT_VALIDATOR
from hookwarden.hook import Edit, HookContext, ToolName
from hookwarden.linters import ShellChecker
from hookwarden.validator import Result, Validator

_SHELL_EXTENSIONS = (".sh", ".bash")

# #!/bin/sh, #!/bin/bash, #!/usr/bin/env bash, ...
_SHELL_SHEBANG_RE = re.compile(r"^#!\s*(?:/usr/bin/env\s+)?(?:/\S*/)?(?:ba)?sh\b")

_FISH_SHEBANGS = ("#!/usr/bin/env fish", "#!/usr/bin/fish", "#!/bin/fish")


class ShellScriptValidator(Validator):
    """Validates shell scripts touched by Write, Edit and MultiEdit."""

    def __init__(
        self,
        checker: ShellChecker | None = None,
        timeout: int = DEFAULT_LINTER_TIMEOUT,
        blocking: bool = True,
    ):
        super().__init__(SHELLSCRIPT_VALIDATOR, blocking)
        self.checker = checker or ShellChecker(timeout=timeout)

    def validate(self, context: HookContext) -> Result:
        self.logger.debug("Validating shell script")

        file_path = context.file_path
        if not file_path:
            self.logger.debug("No file path provided")
            return Result.ok()

        content = self._resolve_content(context)
        if not content or not content.strip():
            return Result.ok()

        if is_fish_script(file_path, content):
            self.logger.debug("Skipping fish script %s", file_path)
            return Result.ok()

        if not is_shell_script(file_path, content):
            return Result.ok()

        lint = self.checker.check(content)
        if not lint.available:
            return self._syntax_check(content)
        if lint.timed_out:
            return Result.warn(
                f"shellcheck timed out after {self.checker.timeout}s; "
                f"{file_path} was not linted"
            )
        if lint.success:
            self.logger.debug("shellcheck passed")
            return Result.ok()

        self.logger.debug("shellcheck failed: %s", lint.output)
        return self.fail(format_shellcheck_output(lint.output))

    def _resolve_content(self, context: HookContext) -> str | None:
        """Content the file will have after the tool call."""
        tool_input = context.tool_input
        if context.tool_name is ToolName.WRITE:
            return tool_input.content

        edits = tool_input.edits or (Edit(tool_input.old_string, tool_input.new_string),)
        try:
            with open(context.file_path) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.debug("Failed to read %s: %s", context.file_path, e)
            return None

        replace_all = bool(tool_input.extra.get("replace_all"))
        applied = 0
        for edit in edits:
            if not edit.old_string or edit.old_string not in text:
                self.logger.debug("old_string not found in %s", context.file_path)
                continue
            count = -1 if replace_all else 1
            text = text.replace(edit.old_string, edit.new_string, count)
            applied += 1

        # Nothing changed; pre-existing issues are not the agent's edit
        if not applied:
            return None
        return text

    def _syntax_check(self, content: str) -> Result:
        """Parse with bashlex when shellcheck is unavailable."""
        try:
            bashlex.parse(content)
        except ParsingError as e:
            return Result.warn(f"Shell script syntax error: {e}").with_detail(
                "note", "shellcheck is not installed; only syntax was checked"
            )
        except Exception:
            # bashlex does not implement every construct (case, arithmetic, ...)
            self.logger.debug("bashlex could not analyse script, skipping")
        return Result.ok()


def is_shell_script(file_path: str, content: str) -> bool:
    if os.path.splitext(file_path)[1] in _SHELL_EXTENSIONS:
        return True
    return bool(_SHELL_SHEBANG_RE.match(content))


def is_fish_script(file_path: str, content: str) -> bool:
    if os.path.splitext(file_path)[1] == ".fish":
        return True
    return content.startswith(_FISH_SHEBANGS)


def format_shellcheck_output(output: str) -> str:
    lines = [line for line in output.splitlines() if line.strip()]
    return (
        "Shellcheck validation failed\n\n"
        + "\n".join(lines)
        + "\n\nFix these issues before committing."
    )
