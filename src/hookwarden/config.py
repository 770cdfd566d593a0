"""Configuration module.

Loads settings from environment variables and an optional config file.
Settings are read once at process start into a frozen Settings object
that is passed to the registry factory.

Environment Variables
---------------------
HOOKWARDEN_CONFIG : str
    Path to the config file (KEY=VALUE lines, # comments).
    Default: ~/.config/hookwarden/config

HOOKWARDEN_LOG_LEVEL : str
    Log level for stderr logging: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    Default: WARNING

HOOKWARDEN_DISABLED_VALIDATORS : str
    Comma-separated validator names that are not registered at all.

HOOKWARDEN_WARN_VALIDATORS : str
    Comma-separated validator names whose failures only warn.

HOOKWARDEN_LINTER_TIMEOUT : int
    Seconds allowed for shellcheck. Default: 10

HOOKWARDEN_GIT_TIMEOUT : int
    Seconds allowed for git subprocess calls. Default: 5

HOOKWARDEN_BRANCH_TYPES : str
    Comma-separated branch types for type/description branch names.
    Default: feat, fix, docs, style, refactor, test, chore, ci, build, perf

HOOKWARDEN_PROTECTED_BRANCHES : str
    Comma-separated protected branch names. Default: main, master

HOOKWARDEN_BLOCKED_ADD_PREFIXES : str
    Comma-separated path prefixes that must not be staged. Default: tmp/

Environment variables win over the config file; the config file wins
over the defaults. Invalid values fall back to the default.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from hookwarden.constants import (
    ALL_VALIDATORS,
    CONFIG_PATH_ENV,
    DEFAULT_BLOCKED_ADD_PREFIXES,
    DEFAULT_BRANCH_TYPES,
    DEFAULT_CONFIG_PATH,
    DEFAULT_GIT_TIMEOUT,
    DEFAULT_LINTER_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROTECTED_BRANCHES,
    SETTING_KEYS,
    VALID_LOG_LEVELS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one hookwarden run."""

    log_level: str = DEFAULT_LOG_LEVEL
    disabled_validators: frozenset[str] = frozenset()
    warn_only_validators: frozenset[str] = frozenset()
    linter_timeout: int = DEFAULT_LINTER_TIMEOUT
    git_timeout: int = DEFAULT_GIT_TIMEOUT
    branch_types: tuple[str, ...] = DEFAULT_BRANCH_TYPES
    protected_branches: tuple[str, ...] = DEFAULT_PROTECTED_BRANCHES
    blocked_add_prefixes: tuple[str, ...] = DEFAULT_BLOCKED_ADD_PREFIXES

    def is_enabled(self, name: str) -> bool:
        return name not in self.disabled_validators

    def is_blocking(self, name: str) -> bool:
        return name not in self.warn_only_validators


def load_config_file(path: str) -> dict[str, str]:
    """Load configuration from a KEY=VALUE file.

    Values can optionally be quoted (single or double quotes are
    stripped). Unknown keys and malformed lines are skipped with a
    debug log.

    Args:
        path: Path to the config file.

    Returns:
        Dictionary of key-value pairs from the file.
        Empty dict if the file doesn't exist or can't be read.
    """
    if not os.path.exists(path):
        return {}

    try:
        config, problems = parse_config_file(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return {}

    for problem in problems:
        logger.debug("Skipping %s in %s", problem, path)
    return config


def parse_config_file(path: str) -> tuple[dict[str, str], list[str]]:
    """Parse a KEY=VALUE file, collecting lines that were skipped.

    Returns:
        (values, problems) where problems describes each malformed line
        and unknown key, e.g. ``"line 3: unknown key FOO"``.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    config: dict[str, str] = {}
    problems: list[str] = []

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                problems.append(f"line {line_num}: malformed (expected KEY=VALUE)")
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()
            if key not in SETTING_KEYS:
                problems.append(f"line {line_num}: unknown key {key}")
                continue
            # Strip surrounding quotes
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                value = value[1:-1]
            config[key] = value

    return config, problems


def raw_values(
    environ: Mapping[str, str] | None = None,
    path: str | None = None,
) -> dict[str, str]:
    """Unparsed setting values, environment over config file.

    Only keys set in either source are present.
    """
    env = os.environ if environ is None else environ
    file_values = load_config_file(config_path(env) if path is None else path)
    values = dict(file_values)
    values.update({key: env[key] for key in SETTING_KEYS if key in env})
    return values


def config_path(environ: Mapping[str, str] | None = None) -> str:
    """Config file location: $HOOKWARDEN_CONFIG or the default."""
    env = os.environ if environ is None else environ
    return env.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH


def check_values(values: Mapping[str, str]) -> list[str]:
    """Describe values that load_settings would replace with a default.

    Args:
        values: Raw setting values, as returned by raw_values().

    Returns:
        One message per invalid value; empty when everything is usable.
    """
    problems = []

    level = values.get("HOOKWARDEN_LOG_LEVEL", "").strip()
    if level and level.upper() not in VALID_LOG_LEVELS:
        problems.append(f"HOOKWARDEN_LOG_LEVEL: invalid level '{level}'")

    for key in ("HOOKWARDEN_LINTER_TIMEOUT", "HOOKWARDEN_GIT_TIMEOUT"):
        raw = values.get(key, "").strip()
        if not raw:
            continue
        try:
            if int(raw) <= 0:
                problems.append(f"{key}: '{raw}' must be positive")
        except ValueError:
            problems.append(f"{key}: '{raw}' is not an integer")

    for key in ("HOOKWARDEN_DISABLED_VALIDATORS", "HOOKWARDEN_WARN_VALIDATORS"):
        names = {item.strip() for item in values.get(key, "").split(",") if item.strip()}
        unknown = names.difference(ALL_VALIDATORS)
        if unknown:
            problems.append(f"{key}: unknown validator(s) {', '.join(sorted(unknown))}")

    return problems


def load_settings(
    environ: Mapping[str, str] | None = None,
    path: str | None = None,
) -> Settings:
    """Resolve Settings from the environment and the config file.

    Args:
        environ: Environment mapping. Defaults to os.environ.
        path: Config file path. Defaults to $HOOKWARDEN_CONFIG, then
              DEFAULT_CONFIG_PATH.

    Returns:
        Frozen Settings.
    """
    values = raw_values(environ, path)

    def raw(key: str) -> str:
        return values.get(key, "")

    return Settings(
        log_level=_parse_log_level(raw("HOOKWARDEN_LOG_LEVEL")),
        disabled_validators=_parse_validator_names(
            "HOOKWARDEN_DISABLED_VALIDATORS", raw("HOOKWARDEN_DISABLED_VALIDATORS")
        ),
        warn_only_validators=_parse_validator_names(
            "HOOKWARDEN_WARN_VALIDATORS", raw("HOOKWARDEN_WARN_VALIDATORS")
        ),
        linter_timeout=_parse_timeout(
            "HOOKWARDEN_LINTER_TIMEOUT", raw("HOOKWARDEN_LINTER_TIMEOUT"), DEFAULT_LINTER_TIMEOUT
        ),
        git_timeout=_parse_timeout(
            "HOOKWARDEN_GIT_TIMEOUT", raw("HOOKWARDEN_GIT_TIMEOUT"), DEFAULT_GIT_TIMEOUT
        ),
        branch_types=_parse_list(raw("HOOKWARDEN_BRANCH_TYPES"), DEFAULT_BRANCH_TYPES),
        protected_branches=_parse_list(
            raw("HOOKWARDEN_PROTECTED_BRANCHES"), DEFAULT_PROTECTED_BRANCHES
        ),
        blocked_add_prefixes=_parse_list(
            raw("HOOKWARDEN_BLOCKED_ADD_PREFIXES"), DEFAULT_BLOCKED_ADD_PREFIXES
        ),
    )


def _parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    if level in VALID_LOG_LEVELS:
        return level
    if level:
        logger.debug(
            "Invalid HOOKWARDEN_LOG_LEVEL '%s', falling back to '%s'",
            raw,
            DEFAULT_LOG_LEVEL,
        )
    return DEFAULT_LOG_LEVEL


def _parse_timeout(key: str, raw: str, default: int) -> int:
    """Parse a positive integer number of seconds."""
    if raw and raw.strip():
        try:
            value = int(raw.strip())
            if value > 0:
                return value
            logger.debug(
                "Invalid %s '%s' (must be positive), falling back to %d",
                key, raw, default,
            )
        except ValueError:
            logger.debug(
                "Invalid %s '%s' (not an integer), falling back to %d",
                key, raw, default,
            )
    return default


def _parse_list(raw: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated list; empty means the default."""
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items if items else default


def _parse_validator_names(key: str, raw: str) -> frozenset[str]:
    names = frozenset(item.strip() for item in raw.split(",") if item.strip())
    unknown = names.difference(ALL_VALIDATORS)
    if unknown:
        logger.debug("Unknown validator name(s) in %s: %s", key, ", ".join(sorted(unknown)))
    return names
