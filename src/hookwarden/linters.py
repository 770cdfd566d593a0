"""External tool helpers.

Thin wrappers around the read-only subprocess calls validators make
(shellcheck, git). Every call has a timeout, and failures are returned
as values instead of raised so validators can map them to Results.
"""

import logging
import subprocess
from dataclasses import dataclass

from hookwarden.constants import DEFAULT_GIT_TIMEOUT, DEFAULT_LINTER_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass
class LintResult:
    """Outcome of one linter run."""

    success: bool
    output: str = ""
    available: bool = True    # False when the linter binary is missing
    timed_out: bool = False


class ShellChecker:
    """Runs shellcheck on script content passed through stdin."""

    def __init__(self, timeout: int = DEFAULT_LINTER_TIMEOUT, binary: str = "shellcheck"):
        self.timeout = timeout
        self.binary = binary

    def check(self, content: str) -> LintResult:
        try:
            result = subprocess.run(
                [self.binary, "--format=tty", "-"],
                input=content,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.debug("%s not available on this system", self.binary)
            return LintResult(success=True, available=False)
        except subprocess.TimeoutExpired:
            logger.debug("%s timed out after %ds", self.binary, self.timeout)
            return LintResult(success=False, timed_out=True)
        except OSError as e:
            logger.debug("%s failed to start: %s", self.binary, e)
            return LintResult(success=True, available=False)

        if result.returncode == 0:
            return LintResult(success=True, output=result.stdout)
        return LintResult(success=False, output=result.stdout or result.stderr)


def find_git_root(timeout: int = DEFAULT_GIT_TIMEOUT) -> str | None:
    """Return the top-level directory of the current git work tree.

    Returns:
        Absolute path, or None outside a repository, when git is
        missing, or when git does not answer in time.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug("git not available on this system")
        return None
    except subprocess.TimeoutExpired:
        logger.debug("git rev-parse timed out")
        return None

    if result.returncode != 0:
        logger.debug("Not in a git repository: %s", result.stderr.strip())
        return None
    return result.stdout.strip()
