"""Validator capability and validation results.

Every check implements Validator: a name plus ``validate(context)``
returning a Result. The dispatcher only ever sees Results; parse errors
and subprocess failures are turned into Results by the validator.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace

from hookwarden.hook import HookContext


@dataclass(frozen=True)
class Result:
    """Outcome of one validator run."""

    passed: bool
    message: str = ""
    details: dict[str, str] = field(default_factory=dict)
    should_block: bool = False

    @classmethod
    def ok(cls) -> "Result":
        return cls(passed=True)

    @classmethod
    def fail(cls, message: str) -> "Result":
        """Failure that blocks the operation."""
        return cls(passed=False, message=message, should_block=True)

    @classmethod
    def warn(cls, message: str) -> "Result":
        """Failure that is reported but lets the operation proceed."""
        return cls(passed=False, message=message, should_block=False)

    def with_detail(self, key: str, value: str) -> "Result":
        return replace(self, details={**self.details, key: value})


class Validator(ABC):
    """Base class for all validators.

    Args:
        name: Unique validator name, used in config and reports.
        blocking: When False, failures from ``self.fail`` are downgraded
            to warnings (the "warning" severity).
    """

    def __init__(self, name: str, blocking: bool = True):
        self.name = name
        self.blocking = blocking
        self.logger = logging.getLogger(f"hookwarden.validators.{name}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, blocking={self.blocking})"

    @abstractmethod
    def validate(self, context: HookContext) -> Result:
        """Inspect ``context`` and return a Result. Must not raise."""

    def fail(self, message: str) -> Result:
        """Failure honoring the configured severity."""
        if self.blocking:
            return Result.fail(message)
        return Result.warn(message)
