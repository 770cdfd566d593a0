"""Secret detection for file writes.

Scans the content the agent is about to write for credentials using a
list of regex patterns. Each finding carries its 1-based line and
column so the report points at the offending text.
"""

import re
from dataclasses import dataclass

from hookwarden.constants import SECRETS_VALIDATOR
from hookwarden.hook import HookContext, ToolName
from hookwarden.validator import Result, Validator


@dataclass(frozen=True)
class Pattern:
    name: str
    regex: re.Pattern
    description: str = ""


@dataclass(frozen=True)
class Finding:
    """One secret match in scanned content."""

    pattern: Pattern
    match: str
    line: int
    column: int

    @property
    def masked(self) -> str:
        """The match with everything after its first 4 characters hidden."""
        if len(self.match) <= 8:
            return "*" * len(self.match)
        return self.match[:4] + "*" * (len(self.match) - 4)


DEFAULT_PATTERNS = (
    Pattern(
        "aws-access-key-id",
        re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
        "AWS access key ID",
    ),
    Pattern(
        "github-token",
        re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9]{36,}|github_pat_[A-Za-z0-9_]{22,})\b"),
        "GitHub token",
    ),
    Pattern(
        "slack-token",
        re.compile(r"\bxox[abprs]-[A-Za-z0-9-]{10,}"),
        "Slack token",
    ),
    Pattern(
        "slack-webhook",
        re.compile(r"https://hooks\.slack\.com/services/[A-Za-z0-9_/]+"),
        "Slack incoming webhook URL",
    ),
    Pattern(
        "stripe-secret-key",
        re.compile(r"\b(?:sk|rk)_live_[A-Za-z0-9]{24,}\b"),
        "Stripe live secret key",
    ),
    Pattern(
        "google-api-key",
        re.compile(r"\bAIza[0-9A-Za-z_\-]{35}\b"),
        "Google API key",
    ),
    Pattern(
        "private-key",
        re.compile(r"-----BEGIN (?:[A-Z]+ )?PRIVATE KEY-----"),
        "Private key block",
    ),
    Pattern(
        "generic-credential",
        re.compile(
            r"(?i)\b(?:api[_-]?key|secret|password|passwd|access[_-]?token)\b"
            r"\s*[:=]\s*[\"'][^\"'\s]{8,}[\"']"
        ),
        "Hard-coded credential assignment",
    ),
)


class PatternDetector:
    """Finds secrets in text using compiled regex patterns."""

    def __init__(self, patterns: tuple[Pattern, ...] | list[Pattern] = DEFAULT_PATTERNS):
        self.patterns = list(patterns)

    def add_patterns(self, *patterns: Pattern) -> None:
        self.patterns.extend(patterns)

    def detect(self, content: str) -> list[Finding]:
        if not content:
            return []

        findings = []
        for pattern in self.patterns:
            for m in pattern.regex.finditer(content):
                line, column = _position(content, m.start())
                findings.append(Finding(pattern, m.group(0), line, column))
        return findings


def _position(content: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of a character offset."""
    line = content.count("\n", 0, offset) + 1
    line_start = content.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class SecretsValidator(Validator):
    """Blocks file writes that contain credentials."""

    def __init__(self, detector: PatternDetector | None = None, blocking: bool = True):
        super().__init__(SECRETS_VALIDATOR, blocking)
        self.detector = detector or PatternDetector()

    def validate(self, context: HookContext) -> Result:
        findings = []
        for text in _written_texts(context):
            findings.extend(self.detector.detect(text))

        if not findings:
            return Result.ok()

        self.logger.debug("%d potential secret(s) in %s", len(findings), context.file_path)
        report = "\n".join(
            f"line {f.line}, col {f.column}: {f.pattern.description or f.pattern.name} ({f.masked})"
            for f in findings
        )
        result = self.fail(f"Potential secrets detected ({len(findings)} finding(s))")
        if context.file_path:
            result = result.with_detail("file", context.file_path)
        return result.with_detail("findings", report).with_detail(
            "help", "Load secrets from environment variables or a secret manager instead"
        )


def _written_texts(context: HookContext) -> list[str]:
    tool_input = context.tool_input
    if context.tool_name is ToolName.WRITE:
        return [tool_input.content]
    if context.tool_name is ToolName.EDIT:
        return [tool_input.new_string]
    if context.tool_name is ToolName.MULTI_EDIT:
        return [edit.new_string for edit in tool_input.edits]
    return []
