"""Exception types raised by the console."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for errors raised by the console."""


class FormatterNotSetError(ConsoleError, RuntimeError):
    """Raised when a command tries to print through a context that has no formatter."""

    def __init__(self):
        super().__init__("No OutputFormatter specified. Use CommandContext.formatter = <OutputFormatter>.")


class ExecutionError(ConsoleError):
    """A command's task failed. The original error is chained as ``__cause__``."""


class ConfigUriError(ConsoleError, ValueError):
    """A configuration URI given on the command line is not syntactically valid."""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"{reason}: {uri!r}")
        self.uri = uri
        self.reason = reason


class ConfigurationError(ConsoleError):
    """A configuration resource could not be read, parsed or validated."""
