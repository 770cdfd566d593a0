"""Git command model.

Classifies a parsed ``git`` invocation into its subcommand, flags and
positional arguments. Whether a flag swallows the following word is
not visible from the syntax (``git checkout -b name`` vs
``git branch -D name``), so it comes from the VALUE_FLAGS table below.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from hookwarden.parser import Command, ParseResult

logger = logging.getLogger(__name__)


# Options given before the subcommand that take a value
GLOBAL_VALUE_FLAGS = frozenset({
    "-C", "-c", "--git-dir", "--work-tree", "--namespace", "--exec-path",
})

# Per-subcommand flags that consume the following word. Flags not listed
# here consume nothing; ``--flag=value`` words never consume.
VALUE_FLAGS: dict[str, frozenset[str]] = {
    "add": frozenset({"--chmod", "--pathspec-from-file"}),
    "branch": frozenset({"-u", "--set-upstream-to", "--sort", "--format"}),
    "checkout": frozenset({"-b", "-B", "--orphan"}),
    "cherry-pick": frozenset({"-m", "--mainline", "-s", "--strategy", "-X", "--strategy-option"}),
    "clone": frozenset({
        "-b", "--branch", "-o", "--origin", "--depth", "--reference",
        "-c", "--config", "--separate-git-dir",
    }),
    "commit": frozenset({
        "-m", "--message", "-F", "--file", "-C", "--reuse-message",
        "-c", "--reedit-message", "--author", "--date", "--fixup",
        "--squash", "--cleanup", "-t", "--template",
    }),
    "config": frozenset({"-f", "--file", "--blob"}),
    "fetch": frozenset({"--depth", "--deepen", "--shallow-since"}),
    "log": frozenset({"-n", "--max-count"}),
    "merge": frozenset({"-m", "-F", "--file", "-s", "--strategy", "-X", "--strategy-option"}),
    "pull": frozenset({"--depth", "-s", "--strategy", "-X", "--strategy-option"}),
    "push": frozenset({"-o", "--push-option", "--repo", "--receive-pack", "--exec"}),
    "rebase": frozenset({"--onto", "-s", "--strategy", "-X", "--strategy-option", "-x", "--exec"}),
    "restore": frozenset({"-s", "--source"}),
    "revert": frozenset({"-m", "--mainline"}),
    "stash": frozenset({"-m", "--message"}),
    "switch": frozenset({"-c", "-C", "--create", "--force-create", "--orphan"}),
    "tag": frozenset({"-m", "--message", "-F", "--file", "-u", "--local-user"}),
    "worktree": frozenset({"-b", "-B", "--reason"}),
}


class GitCommandError(ValueError):
    """Raised when a command cannot be read as a git invocation."""


@dataclass(frozen=True)
class GitCommand:
    """Structured view of one ``git`` invocation.

    Flag values consumed per VALUE_FLAGS sit in ``flags`` directly after
    their flag.
    """

    subcommand: str
    flags: tuple[str, ...] = ()
    args: tuple[str, ...] = ()

    def has_flag(self, token: str) -> bool:
        return token in self.flags

    def flag_value(self, flag: str) -> str | None:
        """Return the value given to ``flag``, or None.

        Understands both ``-b name`` (two entries) and ``--flag=value``.
        """
        value_flags = VALUE_FLAGS.get(self.subcommand, frozenset()) | GLOBAL_VALUE_FLAGS
        i = 0
        while i < len(self.flags):
            entry = self.flags[i]
            if flag.startswith("--") and entry.startswith(flag + "="):
                return entry[len(flag) + 1:]
            if entry in value_flags and i + 1 < len(self.flags):
                if entry == flag:
                    return self.flags[i + 1]
                i += 2
                continue
            i += 1
        return None


def extract_git_command(cmd: Command) -> GitCommand:
    """Split a ``git`` Command into subcommand, flags and arguments.

    Args:
        cmd: A parsed command whose name is ``git``.

    Returns:
        The GitCommand view of ``cmd``.

    Raises:
        GitCommandError: If ``cmd`` is not git or has no subcommand.
    """
    if cmd.name != "git":
        raise GitCommandError(f"not a git command: {cmd.name!r}")
    if not cmd.args:
        raise GitCommandError("git command has no subcommand")

    words = cmd.args
    flags: list[str] = []
    i = 0

    # Global options (git -C dir add ...)
    while i < len(words) and words[i].startswith("-"):
        flags.append(words[i])
        i += 1
        if flags[-1] in GLOBAL_VALUE_FLAGS and i < len(words):
            flags.append(words[i])
            i += 1

    if i >= len(words):
        raise GitCommandError("git command has no subcommand")

    subcommand = words[i]
    value_flags = VALUE_FLAGS.get(subcommand, frozenset())
    args: list[str] = []
    positional_only = False
    i += 1

    while i < len(words):
        word = words[i]
        i += 1

        if positional_only or not word.startswith("-"):
            args.append(word)
            continue

        flags.append(word)
        if word == "--":
            positional_only = True
        elif word in value_flags and i < len(words):
            flags.append(words[i])
            i += 1

    return GitCommand(subcommand=subcommand, flags=tuple(flags), args=tuple(args))


def iter_git_commands(result: ParseResult) -> Iterator[GitCommand]:
    """Yield a GitCommand for every usable ``git`` command in ``result``."""
    for cmd in result.find("git"):
        try:
            yield extract_git_command(cmd)
        except GitCommandError as e:
            logger.debug("Skipping git command %s: %s", cmd.tokens, e)
