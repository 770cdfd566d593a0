"""Installation diagnostics.

``hookwarden --doctor`` runs a fixed list of health checks and prints
a checklist grouped by category:

1. Config: config file presence and syntax, setting values
2. Tools: shellcheck and git on PATH, current directory in a work tree

Checks never raise; every problem becomes a CheckResult.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from hookwarden.config import check_values, config_path, parse_config_file, raw_values
from hookwarden.constants import DEFAULT_GIT_TIMEOUT
from hookwarden.linters import find_git_root

logger = logging.getLogger(__name__)


class Status(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


_ICONS = {
    Status.PASS: "✅",
    Status.WARNING: "⚠️",
    Status.ERROR: "❌",
    Status.SKIPPED: "⊘",
}


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one diagnostic check."""

    category: str
    name: str
    status: Status
    message: str = ""
    details: tuple[str, ...] = ()


def check_config_file(path: str) -> CheckResult:
    """Config file exists, is readable and holds only known keys."""
    if not os.path.exists(path):
        return CheckResult(
            "Config", "Config file", Status.WARNING, "Not found (optional)",
            (f"Expected at: {path}",),
        )

    try:
        _, problems = parse_config_file(path)
    except (OSError, UnicodeDecodeError) as e:
        return CheckResult(
            "Config", "Config file", Status.ERROR, "Unreadable",
            (f"File: {path}", f"Error: {e}"),
        )

    if problems:
        return CheckResult(
            "Config", "Config file", Status.WARNING,
            f"{len(problems)} line(s) ignored",
            (f"File: {path}", *problems),
        )
    return CheckResult("Config", "Config file", Status.PASS, "Loaded")


def check_settings(environ: Mapping[str, str], path: str) -> CheckResult:
    """Every configured value is usable as given."""
    problems = check_values(raw_values(environ, path))
    if problems:
        return CheckResult(
            "Config", "Settings", Status.ERROR,
            "Invalid values fall back to defaults", tuple(problems),
        )
    return CheckResult("Config", "Settings", Status.PASS, "All values valid")


def check_binary(name: str, purpose: str) -> CheckResult:
    location = shutil.which(name)
    if location is None:
        return CheckResult(
            "Tools", name, Status.WARNING, "Not found on PATH",
            (purpose,),
        )
    return CheckResult("Tools", name, Status.PASS, location)


def check_git_repository(timeout: int = DEFAULT_GIT_TIMEOUT) -> CheckResult:
    root = find_git_root(timeout)
    if root is None:
        return CheckResult(
            "Tools", "Git repository", Status.SKIPPED,
            "Not inside a git work tree (git validators pass everything)",
        )
    return CheckResult("Tools", "Git repository", Status.PASS, root)


def run_checks(
    environ: Mapping[str, str] | None = None,
    path: str | None = None,
) -> list[CheckResult]:
    """Run every check in report order.

    Args:
        environ: Environment mapping. Defaults to os.environ.
        path: Config file path. Defaults to $HOOKWARDEN_CONFIG, then
              the default location.

    Returns:
        One CheckResult per check.
    """
    env = os.environ if environ is None else environ
    if path is None:
        path = config_path(env)
    logger.debug("Running doctor checks with config %s", path)

    return [
        check_config_file(path),
        check_settings(env, path),
        check_binary(
            "shellcheck",
            "Shell scripts fall back to a bashlex syntax check without it",
        ),
        check_binary("git", "git add checks are skipped without it"),
        check_git_repository(),
    ]


def has_errors(results: list[CheckResult]) -> bool:
    return any(r.status is Status.ERROR for r in results)


def format_report(results: list[CheckResult]) -> str:
    """Checklist grouped by category, followed by a summary line."""
    lines = ["Checking hookwarden health...", ""]

    categories: dict[str, list[CheckResult]] = {}
    for result in results:
        categories.setdefault(result.category, []).append(result)

    for category, group in categories.items():
        lines.append(f"{category}:")
        for result in group:
            line = f"  {_ICONS[result.status]} {result.name}"
            if result.message:
                line += f" - {result.message}"
            lines.append(line)
            lines.extend(f"     {detail}" for detail in result.details)
        lines.append("")

    errors = sum(r.status is Status.ERROR for r in results)
    warnings = sum(r.status is Status.WARNING for r in results)
    passed = sum(r.status is Status.PASS for r in results)
    lines.append(f"Summary: {errors} error(s), {warnings} warning(s), {passed} passed")
    return "\n".join(lines) + "\n"
