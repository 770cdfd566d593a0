"""Shell command line parsing module.

Splits a raw command line into the individual commands it chains
together. No execution or expansion happens here, only enough
tokenization to know which programs a command line runs and with
which words.

Handled:
1. Single quotes, double quotes and backslash escapes
2. Chaining operators (&&, ||, ;, |, |&, &, newline)
3. Leading NAME=value environment assignments
4. Comments (# at the start of a word)

Not handled: subshells, arithmetic, here-docs, parameter or command
substitution. Those words pass through as literal text.
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Leading VAR=value words before the command name
_ASSIGNMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")

# Characters a backslash escapes inside double quotes
_DQUOTE_ESCAPABLE = frozenset('"\\$`\n')

# Unquoted whitespace that separates words (newline ends a command)
_WORD_SEPARATORS = frozenset(" \t\r")

# First characters of the chaining operators
_OPERATOR_START = frozenset(";|&\n")


class ParseError(ValueError):
    """Raised when a command line cannot be tokenized."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at position {position}")
        self.position = position


@dataclass(frozen=True)
class Command:
    """A single command: its name and arguments, quoting removed."""

    name: str
    args: tuple[str, ...] = ()
    assignments: tuple[str, ...] = ()  # Leading VAR=value words

    @property
    def tokens(self) -> tuple[str, ...]:
        """Full word list: name followed by arguments."""
        if not self.name:
            return self.args
        return (self.name, *self.args)

    def has_flag(self, token: str) -> bool:
        """Exact, case-sensitive test for ``token`` among the arguments."""
        return token in self.args


@dataclass
class ParseResult:
    """Commands of a command line in left-to-right order."""

    commands: list[Command] = field(default_factory=list)

    def __iter__(self):
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def find(self, name: str) -> list[Command]:
        """Return every command named ``name``."""
        return [cmd for cmd in self.commands if cmd.name == name]


def parse(raw: str | None) -> ParseResult:
    """Split a raw command line into commands.

    Args:
        raw: The command line as the agent would hand it to bash. None
            is treated like the empty string.

    Returns:
        ParseResult with one Command per chained segment. Empty input,
        or input made only of whitespace and operators, gives an empty
        result.

    Raises:
        ParseError: On an unterminated quote or a trailing backslash.
    """
    result = ParseResult()
    if not raw:
        return result

    words: list[str] = []
    current: list[str] = []
    in_word = False
    quote: str | None = None
    quote_start = 0
    i = 0
    n = len(raw)

    def end_word() -> None:
        nonlocal in_word
        if in_word:
            words.append("".join(current))
            current.clear()
            in_word = False

    def end_command() -> None:
        end_word()
        if words:
            result.commands.append(_build_command(words))
            words.clear()

    while i < n:
        ch = raw[i]

        if quote == "'":
            if ch == "'":
                quote = None
            else:
                current.append(ch)
            i += 1
            continue

        if quote == '"':
            if ch == '"':
                quote = None
            elif ch == "\\" and i + 1 < n and raw[i + 1] in _DQUOTE_ESCAPABLE:
                if raw[i + 1] != "\n":
                    current.append(raw[i + 1])
                i += 2
                continue
            else:
                current.append(ch)
            i += 1
            continue

        if ch == "\\":
            if i + 1 >= n:
                raise ParseError("trailing unescaped backslash", i)
            if raw[i + 1] != "\n":
                current.append(raw[i + 1])
                in_word = True
            i += 2
            continue

        if ch in ("'", '"'):
            quote = ch
            quote_start = i
            in_word = True
            i += 1
            continue

        if ch in _WORD_SEPARATORS:
            end_word()
            i += 1
            continue

        if ch == "#" and not in_word:
            newline = raw.find("\n", i)
            i = n if newline == -1 else newline
            continue

        if ch in _OPERATOR_START:
            width = _operator_width(raw, i, in_word)
            if width:
                end_command()
                i += width
                continue

        current.append(ch)
        in_word = True
        i += 1

    if quote is not None:
        kind = "single" if quote == "'" else "double"
        raise ParseError(f"unterminated {kind} quote", quote_start)

    end_command()
    logger.debug("Parsed %d command(s) from: %s", len(result), raw)
    return result


def _operator_width(raw: str, i: int, in_word: bool) -> int:
    """Length of the chaining operator starting at ``raw[i]``, or 0.

    Returns 0 when the character belongs to a redirection word such as
    ``2>&1``, ``&>file`` or ``>|file``.
    """
    ch = raw[i]
    nxt = raw[i + 1] if i + 1 < len(raw) else ""

    if ch in "&|" and in_word and i > 0 and raw[i - 1] in "<>":
        return 0

    if ch == "&":
        if nxt == "&":
            return 2
        if nxt == ">":
            return 0
        return 1

    if ch == "|":
        if nxt in ("|", "&"):
            return 2
        return 1

    # ";" or newline
    return 1


def _build_command(words: list[str]) -> Command:
    """Build a Command, separating leading environment assignments."""
    idx = 0
    while idx < len(words) and _ASSIGNMENT_RE.match(words[idx]):
        idx += 1

    assignments = tuple(words[:idx])
    rest = words[idx:]
    if not rest:
        return Command(name="", assignments=assignments)
    return Command(name=rest[0], args=tuple(rest[1:]), assignments=assignments)
