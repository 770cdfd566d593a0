"""Registry construction.

Builds the validator list once at process start from Settings. The
order here is the order validators run and report in.
"""

import logging

from hookwarden.config import Settings
from hookwarden.constants import (
    BELL_VALIDATOR,
    BRANCH_NAME_VALIDATOR,
    GIT_ADD_VALIDATOR,
    GIT_PUSH_VALIDATOR,
    SECRETS_VALIDATOR,
    SHELLSCRIPT_VALIDATOR,
)
from hookwarden.hook import EventType, FILE_TOOLS, ToolName
from hookwarden.registry import Predicate, Registry, when
from hookwarden.validator import Validator
from hookwarden.validators import (
    BellValidator,
    BranchNameValidator,
    GitAddValidator,
    GitPushValidator,
    SecretsValidator,
    ShellScriptValidator,
)

logger = logging.getLogger(__name__)

_BASH_PRE = when(EventType.PRE_TOOL_USE, tools=(ToolName.BASH,))
_FILE_PRE = when(EventType.PRE_TOOL_USE, tools=tuple(sorted(FILE_TOOLS)))
_NOTIFICATION = when(EventType.NOTIFICATION)


def build_registry(settings: Settings) -> Registry:
    """Create the registry of enabled validators.

    Args:
        settings: Resolved configuration.

    Returns:
        Registry with validators in their fixed run order.
    """
    candidates: list[tuple[Validator, Predicate]] = [
        (
            GitAddValidator(
                blocked_prefixes=settings.blocked_add_prefixes,
                git_timeout=settings.git_timeout,
                blocking=settings.is_blocking(GIT_ADD_VALIDATOR),
            ),
            _BASH_PRE,
        ),
        (
            BranchNameValidator(
                branch_types=settings.branch_types,
                protected_branches=settings.protected_branches,
                blocking=settings.is_blocking(BRANCH_NAME_VALIDATOR),
            ),
            _BASH_PRE,
        ),
        (
            GitPushValidator(
                protected_branches=settings.protected_branches,
                blocking=settings.is_blocking(GIT_PUSH_VALIDATOR),
            ),
            _BASH_PRE,
        ),
        (
            ShellScriptValidator(
                timeout=settings.linter_timeout,
                blocking=settings.is_blocking(SHELLSCRIPT_VALIDATOR),
            ),
            _FILE_PRE,
        ),
        (
            SecretsValidator(blocking=settings.is_blocking(SECRETS_VALIDATOR)),
            _FILE_PRE,
        ),
        (
            BellValidator(blocking=settings.is_blocking(BELL_VALIDATOR)),
            _NOTIFICATION,
        ),
    ]

    registry = Registry()
    for validator, predicate in candidates:
        if not settings.is_enabled(validator.name):
            logger.debug("Validator %s disabled by configuration", validator.name)
            continue
        registry.register(validator, predicate)
    return registry
