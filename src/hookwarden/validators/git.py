"""Git command validators.

- GitAddValidator: blocks staging files under tmp/ (or other prefixes)
- BranchNameValidator: enforces type/description branch names
- GitPushValidator: blocks force pushes, warns on protected branches
"""

import itertools
import logging
import posixpath
import re
from typing import Callable

import braceexpand

from hookwarden.constants import (
    BRACE_VARIANT_LIMIT,
    BRANCH_NAME_VALIDATOR,
    DEFAULT_BLOCKED_ADD_PREFIXES,
    DEFAULT_BRANCH_TYPES,
    DEFAULT_GIT_TIMEOUT,
    DEFAULT_PROTECTED_BRANCHES,
    GIT_ADD_VALIDATOR,
    GIT_PUSH_VALIDATOR,
)
from hookwarden.git_command import GitCommand, iter_git_commands
from hookwarden.hook import HookContext
from hookwarden.linters import find_git_root
from hookwarden.parser import ParseError, ParseResult, parse
from hookwarden.validator import Result, Validator

logger = logging.getLogger(__name__)

# {1..5} / {-3..3..2}; braceexpand materializes each range eagerly
_INT_RANGE_RE = re.compile(r"\{(-?\d+)\.\.(-?\d+)(?:\.\.-?\d+)?\}")
_CHAR_RANGE_RE = re.compile(r"\{[A-Za-z]\.\.[A-Za-z](?:\.\.-?\d+)?\}")

# type/description, e.g. feat/add-feature
_BRANCH_NAME_RE = re.compile(r"^[a-z]+/[a-z0-9-]+$")

# Flags that create a branch, per subcommand
_CREATE_FLAGS = {
    "checkout": ("-b", "-B"),
    "switch": ("-c", "-C", "--create", "--force-create"),
}

# git branch forms that do not create a branch
_BRANCH_NON_CREATE_FLAGS = frozenset({
    "-d", "-D", "--delete",
    "-m", "-M", "--move",
    "-c", "-C", "--copy",
    "-l", "--list", "-a", "--all", "-r", "--remotes",
    "-v", "-vv", "--verbose", "--show-current",
    "--contains", "--no-contains", "--merged", "--no-merged", "--points-at",
    "-u", "--set-upstream-to", "--unset-upstream", "--edit-description",
})

_FORCE_FLAGS = frozenset({"-f", "--force"})


class _CommandValidator(Validator):
    """Shared parsing step for validators that read the Bash command."""

    def _parse(self, context: HookContext) -> ParseResult | Result:
        try:
            return parse(context.command)
        except ParseError as e:
            self.logger.error("Failed to parse command: %s", e)
            return Result.warn(f"Failed to parse command: {e}")


class GitAddValidator(_CommandValidator):
    """Blocks ``git add`` of paths under the blocked prefixes."""

    def __init__(
        self,
        blocked_prefixes: tuple[str, ...] = DEFAULT_BLOCKED_ADD_PREFIXES,
        git_timeout: int = DEFAULT_GIT_TIMEOUT,
        blocking: bool = True,
        git_root_finder: Callable[[int], str | None] | None = None,
    ):
        super().__init__(GIT_ADD_VALIDATOR, blocking)
        self.blocked_prefixes = blocked_prefixes
        self.git_timeout = git_timeout
        self._find_git_root = git_root_finder

    def validate(self, context: HookContext) -> Result:
        self.logger.debug("Running git add validation")
        parsed = self._parse(context)
        if isinstance(parsed, Result):
            return parsed

        adds = [g for g in iter_git_commands(parsed) if g.subcommand == "add"]
        if not adds:
            return Result.ok()

        finder = self._find_git_root or find_git_root
        git_root = finder(self.git_timeout)
        if git_root is None:
            self.logger.debug("Not in a git repository, skipping validation")
            return Result.ok()
        self.logger.debug("Git root found: %s", git_root)

        blocked = []
        for git_cmd in adds:
            paths = extract_add_paths(git_cmd)
            self.logger.debug("Extracted %d path(s) from git add: %s", len(paths), paths)
            blocked.extend(p for p in paths if self._is_blocked(p))

        if not blocked:
            self.logger.debug("Git add validation passed")
            return Result.ok()

        prefixes = ", ".join(self.blocked_prefixes)
        lines = [f"Files in {prefixes} should be in .gitignore or .git/info/exclude", ""]
        lines.append("Files being added:")
        lines.extend(f"  - {path}" for path in blocked)
        lines.append("")
        lines.append(f"Add {self.blocked_prefixes[0]} to .git/info/exclude:")
        lines.append(f"  echo '{self.blocked_prefixes[0]}' >> .git/info/exclude")

        return self.fail(
            f"Attempting to add files from {prefixes}"
        ).with_detail("help", "\n".join(lines))

    def _is_blocked(self, path: str) -> bool:
        for prefix in self.blocked_prefixes:
            if path.startswith(prefix) or path == prefix.rstrip("/"):
                return True
        return False


def extract_add_paths(git_cmd: GitCommand) -> list[str]:
    """Return normalised path arguments of a ``git add``.

    ``.`` is skipped (the whole tree is not inspected) and brace
    expressions are expanded the way bash would before git runs.
    """
    paths = []
    for arg in git_cmd.args:
        if not arg.strip() or arg == ".":
            continue
        for expanded in _expand_braces(arg):
            paths.append(posixpath.normpath(expanded))
    return paths


def _expand_braces(arg: str) -> list[str]:
    if "{" not in arg:
        return [arg]
    if variant_bound(arg) > BRACE_VARIANT_LIMIT:
        logger.debug("Brace expression too large to expand, checking as-is: %s", arg)
        return [arg]
    try:
        return list(itertools.islice(braceexpand.braceexpand(arg), BRACE_VARIANT_LIMIT))
    except braceexpand.UnbalancedBracesError:
        return [arg]


def variant_bound(arg: str) -> int:
    """Upper bound on the strings braceexpand builds up front for ``arg``.

    Ranges are the only construct braceexpand expands eagerly at the top
    level; comma lists nested inside another group are also built whole.
    Comma lists at the top level are produced lazily and capped by the
    caller.
    """
    bound = 52 ** len(_CHAR_RANGE_RE.findall(arg))
    for start, end in _INT_RANGE_RE.findall(arg):
        if max(len(start), len(end)) > 9:
            return BRACE_VARIANT_LIMIT + 1
        bound *= abs(int(end) - int(start)) + 1
        if bound > BRACE_VARIANT_LIMIT:
            return bound

    depth = 0
    for ch in arg:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth > 1:
            bound *= 2
            if bound > BRACE_VARIANT_LIMIT:
                break
    return bound


class BranchNameValidator(_CommandValidator):
    """Checks names of branches created with checkout, switch or branch."""

    def __init__(
        self,
        branch_types: tuple[str, ...] = DEFAULT_BRANCH_TYPES,
        protected_branches: tuple[str, ...] = DEFAULT_PROTECTED_BRANCHES,
        blocking: bool = True,
    ):
        super().__init__(BRANCH_NAME_VALIDATOR, blocking)
        self.branch_types = branch_types
        self.protected_branches = protected_branches

    def validate(self, context: HookContext) -> Result:
        self.logger.debug("Validating git branch command")
        parsed = self._parse(context)
        if isinstance(parsed, Result):
            return parsed

        for git_cmd in iter_git_commands(parsed):
            result = self._validate_git_command(git_cmd)
            if result is not None and not result.passed:
                return result

        return Result.ok()

    def _validate_git_command(self, git_cmd: GitCommand) -> Result | None:
        branch = extract_new_branch_name(git_cmd)
        if branch is None:
            return None

        name, has_extra = branch
        if has_extra:
            # Extra positionals after the name are read as a name with spaces
            return self.fail(
                "Branch name appears to contain spaces\n\n"
                "Branch names cannot contain spaces. Use hyphens instead.\n\n"
                "Example: feat/my-feature not feat/my feature"
            )
        return self.validate_branch_name(name)

    def validate_branch_name(self, name: str) -> Result:
        if name in self.protected_branches:
            self.logger.debug("Skipping protected branch %s", name)
            return Result.ok()

        if name != name.lower():
            return self.fail(
                "Branch name must be lowercase\n\n"
                f"Branch name '{name}' contains uppercase characters\n\n"
                f"Use: {name.lower()}"
            )

        types = ", ".join(self.branch_types)
        if not _BRANCH_NAME_RE.match(name):
            return self.fail(
                "Branch name must follow type/description format\n\n"
                f"Branch name '{name}' doesn't match pattern\n\n"
                "Expected format: <type>/<description>\n"
                f"Valid types: {types}\n\n"
                "Example: feat/add-user-auth or fix/login-bug-123"
            )

        branch_type = name.split("/", 1)[0]
        if branch_type not in self.branch_types:
            return self.fail(
                "Invalid branch type\n\n"
                f"Branch type '{branch_type}' is not valid\n\n"
                f"Valid types: {types}"
            )

        return Result.ok()


def extract_new_branch_name(git_cmd: GitCommand) -> tuple[str, bool] | None:
    """Find the name of the branch a git command creates.

    Returns:
        (name, has_extra) where has_extra reports positional arguments
        beyond the name, or None if the command creates no branch.
    """
    if git_cmd.subcommand in _CREATE_FLAGS:
        flags = _CREATE_FLAGS[git_cmd.subcommand]
        if not any(f.split("=", 1)[0] in flags for f in git_cmd.flags):
            return None
        for flag in flags:
            value = git_cmd.flag_value(flag)
            if value:
                return value, len(git_cmd.args) > 0
        # Create flag was the last word; fall back to positionals
        if git_cmd.args:
            return git_cmd.args[0], len(git_cmd.args) > 1
        return None

    if git_cmd.subcommand == "branch":
        if any(f.split("=", 1)[0] in _BRANCH_NON_CREATE_FLAGS for f in git_cmd.flags):
            return None
        if git_cmd.args:
            return git_cmd.args[0], len(git_cmd.args) > 1

    return None


class GitPushValidator(_CommandValidator):
    """Blocks force pushes and warns on pushes to protected branches."""

    def __init__(
        self,
        protected_branches: tuple[str, ...] = DEFAULT_PROTECTED_BRANCHES,
        blocking: bool = True,
    ):
        super().__init__(GIT_PUSH_VALIDATOR, blocking)
        self.protected_branches = protected_branches

    def validate(self, context: HookContext) -> Result:
        parsed = self._parse(context)
        if isinstance(parsed, Result):
            return parsed

        protected_targets = []
        for git_cmd in iter_git_commands(parsed):
            if git_cmd.subcommand != "push":
                continue
            if is_force_push(git_cmd):
                return self.fail("Force push is not allowed").with_detail(
                    "help",
                    "Use --force-with-lease to avoid overwriting others' work",
                )
            protected_targets.extend(
                target for target in push_targets(git_cmd)
                if target in self.protected_branches
            )

        if protected_targets:
            return Result.warn(
                f"Pushing directly to protected branch '{protected_targets[0]}'"
            ).with_detail("help", "Open a pull request instead")
        return Result.ok()


def is_force_push(git_cmd: GitCommand) -> bool:
    """True for --force/-f or a +refspec without --force-with-lease."""
    if any(f == "--force-with-lease" or f.startswith("--force-with-lease=") for f in git_cmd.flags):
        return False
    if any(f in _FORCE_FLAGS for f in git_cmd.flags):
        return True
    # +refspec after the remote name
    return any(arg.startswith("+") for arg in git_cmd.args[1:])


def push_targets(git_cmd: GitCommand) -> list[str]:
    """Destination branch names of the refspecs in a ``git push``."""
    targets = []
    for refspec in git_cmd.args[1:]:
        dst = refspec.lstrip("+").rsplit(":", 1)[-1]
        targets.append(dst.removeprefix("refs/heads/"))
    return targets
