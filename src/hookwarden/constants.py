"""Constants and configuration defaults for hookwarden.

Centralizes module-level constants, defaults, and static tables used
across the hookwarden codebase. Individual modules import from here
rather than defining constants inline.
"""

import os


# =============================================================================
# Config file and environment
# =============================================================================

# Environment variable that points at an alternate config file
CONFIG_PATH_ENV = "HOOKWARDEN_CONFIG"

# Default config file (KEY=VALUE lines, # comments)
DEFAULT_CONFIG_PATH = os.path.join(
    os.path.expanduser("~"), ".config", "hookwarden", "config"
)

# Keys recognised in the config file and the environment.
SETTING_KEYS = frozenset({
    "HOOKWARDEN_LOG_LEVEL",
    "HOOKWARDEN_DISABLED_VALIDATORS",
    "HOOKWARDEN_WARN_VALIDATORS",
    "HOOKWARDEN_LINTER_TIMEOUT",
    "HOOKWARDEN_GIT_TIMEOUT",
    "HOOKWARDEN_BRANCH_TYPES",
    "HOOKWARDEN_PROTECTED_BRANCHES",
    "HOOKWARDEN_BLOCKED_ADD_PREFIXES",
})


# =============================================================================
# Logging
# =============================================================================

DEFAULT_LOG_LEVEL = "WARNING"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


# =============================================================================
# Timeouts (seconds)
# =============================================================================

DEFAULT_LINTER_TIMEOUT = 10
DEFAULT_GIT_TIMEOUT = 5


# =============================================================================
# Git conventions
# =============================================================================

# Valid branch types for the type/description naming scheme
DEFAULT_BRANCH_TYPES = (
    "feat", "fix", "docs", "style", "refactor",
    "test", "chore", "ci", "build", "perf",
)

# Branches exempt from naming rules; pushes to them get a warning
DEFAULT_PROTECTED_BRANCHES = ("main", "master")

# Paths that must never be staged
DEFAULT_BLOCKED_ADD_PREFIXES = ("tmp/",)

# Upper bound on paths produced by brace expansion of one git add argument.
# Larger expressions are checked unexpanded.
BRACE_VARIANT_LIMIT = 256


# =============================================================================
# Validator names
# =============================================================================

GIT_ADD_VALIDATOR = "validate-git-add"
BRANCH_NAME_VALIDATOR = "validate-branch-name"
GIT_PUSH_VALIDATOR = "validate-git-push"
SHELLSCRIPT_VALIDATOR = "validate-shellscript"
SECRETS_VALIDATOR = "validate-secrets"
BELL_VALIDATOR = "notification-bell"

ALL_VALIDATORS = (
    GIT_ADD_VALIDATOR,
    BRANCH_NAME_VALIDATOR,
    GIT_PUSH_VALIDATOR,
    SHELLSCRIPT_VALIDATOR,
    SECRETS_VALIDATOR,
    BELL_VALIDATOR,
)


# =============================================================================
# Process exit codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_BLOCKED = 2  # Agent hooks treat exit code 2 as "block this tool call"
EXIT_DOCTOR_ERRORS = 1
