"""Shared test utilities for hookwarden tests.

Provides stub validators and context builders used across test modules.
"""

from hookwarden.hook import EventType, HookContext, ToolInput, ToolName
from hookwarden.validator import Result, Validator


class StubValidator(Validator):
    """Validator that returns a fixed Result and counts its calls."""

    def __init__(self, name: str, result: Result | None = None):
        super().__init__(name)
        self.result = result if result is not None else Result.ok()
        self.calls = 0

    def validate(self, context: HookContext) -> Result:
        self.calls += 1
        return self.result


def bash_context(
    command: str,
    event_type: EventType = EventType.PRE_TOOL_USE,
) -> HookContext:
    """Context for a Bash tool call."""
    return HookContext(
        event_type=event_type,
        tool_name=ToolName.BASH,
        tool_input=ToolInput(command=command),
    )


def file_context(
    tool_name: ToolName,
    file_path: str,
    event_type: EventType = EventType.PRE_TOOL_USE,
    **tool_input,
) -> HookContext:
    """Context for a Write/Edit/MultiEdit tool call."""
    return HookContext(
        event_type=event_type,
        tool_name=tool_name,
        tool_input=ToolInput(file_path=file_path, **tool_input),
    )


def notification_context(notification_type: str = "") -> HookContext:
    return HookContext(
        event_type=EventType.NOTIFICATION,
        notification_type=notification_type,
    )
