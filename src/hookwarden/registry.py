"""Validator registry.

Holds the validators built at start-up, each paired with a Predicate
stating which invocations it applies to. Predicates are plain data
(sets of event types, tool names and notification types) so the
registry contents can be listed and compared in tests.
"""

import logging
from dataclasses import dataclass

from hookwarden.hook import EventType, HookContext, ToolName
from hookwarden.validator import Validator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Predicate:
    """Applicability condition for a validator. Empty sets match anything."""

    event_types: frozenset[EventType] = frozenset()
    tool_names: frozenset[ToolName] = frozenset()
    notification_types: frozenset[str] = frozenset()

    def matches(self, context: HookContext) -> bool:
        if self.event_types and context.event_type not in self.event_types:
            return False
        if self.tool_names and context.tool_name not in self.tool_names:
            return False
        if (
            self.notification_types
            and context.notification_type not in self.notification_types
        ):
            return False
        return True

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "event_types": sorted(e.value for e in self.event_types),
            "tool_names": sorted(t.value for t in self.tool_names),
            "notification_types": sorted(self.notification_types),
        }


def when(
    *event_types: EventType,
    tools: tuple[ToolName, ...] = (),
    notification_types: tuple[str, ...] = (),
) -> Predicate:
    """Shorthand Predicate constructor: ``when(EventType.PRE_TOOL_USE, tools=(ToolName.BASH,))``."""
    return Predicate(
        event_types=frozenset(event_types),
        tool_names=frozenset(tools),
        notification_types=frozenset(notification_types),
    )


class Registry:
    """Ordered collection of (validator, predicate) entries."""

    def __init__(self):
        self._entries: list[tuple[Validator, Predicate]] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[tuple[Validator, Predicate]]:
        return list(self._entries)

    @property
    def names(self) -> list[str]:
        return [validator.name for validator, _ in self._entries]

    def register(self, validator: Validator, predicate: Predicate) -> None:
        """Append a validator. Names must be unique."""
        if validator.name in self.names:
            raise ValueError(f"validator {validator.name!r} is already registered")
        self._entries.append((validator, predicate))
        logger.debug("Registered %s for %s", validator.name, predicate.to_dict())

    def find_validators(self, context: HookContext) -> list[Validator]:
        """Return validators whose predicate matches, in registration order."""
        return [
            validator
            for validator, predicate in self._entries
            if predicate.matches(context)
        ]

    def describe(self) -> list[dict]:
        return [
            {"name": validator.name, "blocking": validator.blocking, **predicate.to_dict()}
            for validator, predicate in self._entries
        ]
