"""Hook invocation context.

Decodes the JSON object an agent hook receives on stdin into a
read-only HookContext that validators inspect.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    NOTIFICATION = "Notification"


class ToolName(str, Enum):
    BASH = "Bash"
    WRITE = "Write"
    EDIT = "Edit"
    MULTI_EDIT = "MultiEdit"
    GREP = "Grep"
    READ = "Read"
    GLOB = "Glob"


FILE_TOOLS = frozenset({ToolName.WRITE, ToolName.EDIT, ToolName.MULTI_EDIT})

# tool_input keys mapped onto ToolInput fields
_KNOWN_INPUT_KEYS = (
    "command", "file_path", "path", "content",
    "old_string", "new_string", "pattern",
)


class HookInputError(ValueError):
    """Raised when a hook payload cannot be decoded."""


@dataclass(frozen=True)
class Edit:
    """One replacement of a MultiEdit call."""

    old_string: str
    new_string: str


@dataclass(frozen=True)
class ToolInput:
    """Tool-specific parameters of an invocation."""

    command: str = ""
    file_path: str = ""
    path: str = ""
    content: str = ""
    old_string: str = ""
    new_string: str = ""
    pattern: str = ""
    edits: tuple[Edit, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolInput":
        values = {
            key: str(data[key])
            for key in _KNOWN_INPUT_KEYS
            if data.get(key) is not None
        }
        raw_edits = data.get("edits")
        if not isinstance(raw_edits, list):
            if raw_edits is not None:
                logger.debug("Ignoring non-list edits: %r", raw_edits)
            raw_edits = []
        edits = tuple(
            Edit(
                old_string=str(item.get("old_string", "")),
                new_string=str(item.get("new_string", "")),
            )
            for item in raw_edits
            if isinstance(item, dict)
        )
        extra = {
            key: value
            for key, value in data.items()
            if key not in _KNOWN_INPUT_KEYS and key != "edits"
        }
        return cls(**values, edits=edits, extra=extra)


@dataclass(frozen=True)
class HookContext:
    """Structured representation of one tool invocation."""

    event_type: EventType
    tool_name: ToolName | None = None
    tool_input: ToolInput = field(default_factory=ToolInput)
    notification_type: str = ""

    @property
    def command(self) -> str:
        return self.tool_input.command

    @property
    def file_path(self) -> str:
        """File path of a file tool, preferring file_path over path."""
        return self.tool_input.file_path or self.tool_input.path

    @property
    def content(self) -> str:
        return self.tool_input.content

    @property
    def is_bash_tool(self) -> bool:
        return self.tool_name is ToolName.BASH

    @property
    def is_file_tool(self) -> bool:
        return self.tool_name in FILE_TOOLS

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        event_type: EventType | str | None = None,
    ) -> "HookContext":
        """Build a context from a decoded hook payload.

        Args:
            payload: The JSON object read from stdin.
            event_type: Explicit event type; wins over the payload's
                ``hook_event_name``.

        Returns:
            The decoded HookContext.

        Raises:
            HookInputError: If the payload is not an object or the event
                type is missing or unknown.
        """
        if not isinstance(payload, dict):
            raise HookInputError(
                f"hook payload must be a JSON object, got {type(payload).__name__}"
            )

        raw_event = event_type if event_type is not None else payload.get("hook_event_name")
        if not raw_event:
            raise HookInputError("hook payload has no hook_event_name")
        try:
            event = EventType(raw_event)
        except ValueError:
            raise HookInputError(f"unknown hook event type: {raw_event!r}") from None

        raw_tool = payload.get("tool_name")
        try:
            tool = ToolName(raw_tool) if raw_tool else None
        except ValueError:
            logger.debug("Unknown tool name %r, no tool-specific validators apply", raw_tool)
            tool = None

        tool_input = payload.get("tool_input") or {}
        if not isinstance(tool_input, dict):
            raise HookInputError("tool_input must be a JSON object")

        return cls(
            event_type=event,
            tool_name=tool,
            tool_input=ToolInput.from_dict(tool_input),
            notification_type=str(payload.get("notification_type") or ""),
        )
