"""Validation dispatch module.

Runs every applicable validator against a hook context and collects
the failures. All validators run, even after one has asked to block,
so the caller sees every violation at once. Whether the operation is
blocked is decided afterwards by should_block().
"""

import logging
from dataclasses import dataclass, field

from hookwarden.hook import HookContext
from hookwarden.registry import Registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationError:
    """A failed validator result, tagged with the validator's name."""

    validator_name: str
    message: str = ""
    details: dict[str, str] = field(default_factory=dict)
    should_block: bool = False

    def __str__(self) -> str:
        if self.message:
            return f"{self.validator_name}: {self.message}"
        return self.validator_name


class Dispatcher:
    """Looks up applicable validators and aggregates their results."""

    def __init__(self, registry: Registry):
        self.registry = registry

    def dispatch(self, context: HookContext) -> list[ValidationError]:
        """Validate ``context`` with every matching validator.

        Args:
            context: The invocation to validate.

        Returns:
            One ValidationError per failed validator, in registry order.
            Empty when nothing applies or everything passed.
        """
        event = context.event_type.value
        tool = context.tool_name.value if context.tool_name else None
        logger.info("Dispatching event=%s tool=%s", event, tool)

        validators = self.registry.find_validators(context)
        if not validators:
            logger.info("No validators found for event=%s tool=%s", event, tool)
            return []

        logger.info("%d validator(s) found", len(validators))

        errors: list[ValidationError] = []
        for validator in validators:
            logger.debug("Running validator %s", validator.name)
            result = validator.validate(context)

            if result.passed:
                logger.info("Validator %s passed", validator.name)
                continue

            # Info only: failures reach the user through format_errors
            if result.should_block:
                logger.info("Validator %s failed: %s", validator.name, result.message)
            else:
                logger.info("Validator %s warned: %s", validator.name, result.message)

            errors.append(ValidationError(
                validator_name=validator.name,
                message=result.message,
                details=dict(result.details),
                should_block=result.should_block,
            ))

        return errors


def should_block(errors: list[ValidationError]) -> bool:
    """True if any error asks to block the operation."""
    return any(error.should_block for error in errors)


def format_errors(errors: list[ValidationError]) -> str:
    """Format errors for terminal display.

    Blocking errors are listed first, then warnings. Every message and
    detail is included.
    """
    if not errors:
        return ""

    blocking = [e for e in errors if e.should_block]
    warnings = [e for e in errors if not e.should_block]

    sections = []
    if blocking:
        sections.append(_format_section("❌ Validation Failed:", blocking))
    if warnings:
        sections.append(_format_section("⚠️  Warnings:", warnings))
    return "".join(sections)


def _format_section(header: str, errors: list[ValidationError]) -> str:
    lines = [header, ""]
    for error in errors:
        lines.append(f"  {error.message or error.validator_name}")
        for key in sorted(error.details):
            lines.append(f"    {key}: {error.details[key]}")
        lines.append("")
    return "\n".join(lines) + "\n"
