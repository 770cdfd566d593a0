"""hookwarden: policy checks for coding-agent tool invocations."""

__version__ = "0.1.0"
