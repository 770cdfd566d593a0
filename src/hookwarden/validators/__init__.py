"""Concrete validators."""

from hookwarden.validators.file import ShellScriptValidator
from hookwarden.validators.git import BranchNameValidator, GitAddValidator, GitPushValidator
from hookwarden.validators.notification import BellValidator
from hookwarden.validators.secrets import PatternDetector, SecretsValidator

__all__ = [
    "BellValidator",
    "BranchNameValidator",
    "GitAddValidator",
    "GitPushValidator",
    "PatternDetector",
    "SecretsValidator",
    "ShellScriptValidator",
]
