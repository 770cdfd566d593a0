"""hookwarden CLI entry point.

Reads one hook payload from stdin, validates it, prints any violations
to stderr and exits 2 when the tool call must be blocked.
"""

import json
import logging
import sys
from typing import Optional

import typer

from hookwarden import __version__
from hookwarden.config import load_settings
from hookwarden.constants import EXIT_BLOCKED, EXIT_DOCTOR_ERRORS, EXIT_SUCCESS
from hookwarden.dispatcher import Dispatcher, format_errors, should_block
from hookwarden.doctor import format_report, has_errors, run_checks
from hookwarden.factory import build_registry
from hookwarden.hook import HookContext, HookInputError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="hookwarden",
    help="Policy checks for coding-agent tool invocations",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Display version, then exit."""
    if value:
        print(f"hookwarden version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    event: Optional[str] = typer.Option(
        None,
        "--event",
        "-e",
        help="Hook event type; overrides hook_event_name from the payload",
    ),
    list_validators: bool = typer.Option(
        False,
        "--list-validators",
        help="Print the enabled validators as JSON lines and exit",
    ),
    doctor: bool = typer.Option(
        False,
        "--doctor",
        help="Check the config file and external tools, then exit",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Validate the hook payload read from stdin."""
    settings = load_settings()
    logging.getLogger("hookwarden").setLevel(settings.log_level)

    if doctor:
        results = run_checks()
        print(format_report(results), end="")
        raise typer.Exit(EXIT_DOCTOR_ERRORS if has_errors(results) else EXIT_SUCCESS)

    registry = build_registry(settings)

    if list_validators:
        for entry in registry.describe():
            print(json.dumps(entry))
        raise typer.Exit(EXIT_SUCCESS)

    raw = sys.stdin.read()
    try:
        context = HookContext.from_payload(json.loads(raw), event_type=event)
    except (json.JSONDecodeError, HookInputError) as e:
        # Fail open: a hook that cannot read its input must not wedge the agent
        logger.warning("Invalid hook input, allowing operation: %s", e)
        raise typer.Exit(EXIT_SUCCESS)

    errors = Dispatcher(registry).dispatch(context)
    if errors:
        print(format_errors(errors), file=sys.stderr, end="")

    if should_block(errors):
        raise typer.Exit(EXIT_BLOCKED)
    raise typer.Exit(EXIT_SUCCESS)


def run() -> None:
    """Console script: configure stderr logging, then run the app."""
    logging.basicConfig(
        stream=sys.stderr,
        format="hookwarden: %(levelname)s %(name)s: %(message)s",
    )
    app()


if __name__ == "__main__":
    run()
