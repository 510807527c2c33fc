"""
Command context shared by every command of one console invocation
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import FormatterNotSetError
from .properties import SystemProperties, system_properties

if TYPE_CHECKING:
    from typing import IO

    from .formatter import OutputFormatter


class CommandContext:
    """Handle through which commands reach the output formatter and the system properties.

    One context is created per top-level invocation and handed by reference to
    every command the shell dispatches to. Every print method fails with
    FormatterNotSetError while no formatter is set.
    """

    def __init__(self, formatter: OutputFormatter | None = None, properties: SystemProperties | None = None):
        self.formatter = formatter
        self.properties = properties if properties is not None else system_properties

    def _require_formatter(self) -> OutputFormatter:
        if self.formatter is None:
            raise FormatterNotSetError()
        return self.formatter

    @property
    def output_stream(self) -> IO[str]:
        """Stream the formatter writes to."""
        return self._require_formatter().output_stream

    def print_help(self, help_lines):
        self._require_formatter().print_help(help_lines)

    def print_info(self, info: str):
        self._require_formatter().print_info(info)

    def print_version(self, version: str):
        self._require_formatter().print_version(version)

    def print_exception(self, error: BaseException):
        self._require_formatter().print_exception(error)

    def print_message(self, message):
        """Print one message mapping or a collection of them."""
        self._require_formatter().print_message(message)

    def print(self, obj):
        """Print a string, a mapping or a collection."""
        self._require_formatter().print(obj)
