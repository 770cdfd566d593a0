"""Notification validators."""

from hookwarden.constants import BELL_VALIDATOR
from hookwarden.hook import HookContext
from hookwarden.validator import Result, Validator


class BellValidator(Validator):
    """Rings the terminal bell when the agent sends a notification.

    Never fails: a missing or unwritable terminal is only logged.
    """

    def __init__(self, tty_path: str = "/dev/tty", blocking: bool = False):
        super().__init__(BELL_VALIDATOR, blocking)
        self.tty_path = tty_path

    def validate(self, context: HookContext) -> Result:
        try:
            with open(self.tty_path, "w") as tty:
                tty.write("\a")
        except OSError as e:
            self.logger.debug("Could not ring terminal bell: %s", e)
        return Result.ok()
