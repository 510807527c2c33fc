"""
Output formatting with Rich
Renders everything the commands print through their CommandContext
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import IO, Optional, Protocol, runtime_checkable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class OutputFormatter(Protocol):
    """Print requests a CommandContext forwards to its formatter."""

    @property
    def output_stream(self) -> IO[str]: ...

    def print_help(self, help_lines: Iterable[str]) -> None: ...

    def print_info(self, info: str) -> None: ...

    def print_version(self, version: str) -> None: ...

    def print_exception(self, error: BaseException) -> None: ...

    def print_message(self, message) -> None: ...

    def print(self, obj) -> None: ...


class ConsoleOutputFormatter:
    """Rich-formatted output for the console"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    @property
    def output_stream(self) -> IO[str]:
        return self.console.file

    def print_help(self, help_lines: Iterable[str]):
        """Help files are pre-formatted, print them line by line as they are"""
        for line in help_lines:
            self.console.print(Text(line), soft_wrap=True)

    def print_info(self, info: str):
        self.console.print(Text(info), soft_wrap=True)

    def print_version(self, version: str):
        version_text = Text()
        version_text.append("Platform Console ", style="bold blue")
        version_text.append(version, style="bold green")

        panel = Panel(
            version_text,
            title="Version Information",
            title_align="center",
            border_style="blue",
            width=50
        )
        self.console.print(panel)

    def print_exception(self, error: BaseException):
        LOGGER.debug("Printing exception", exc_info=error)
        message = Text.assemble(("ERROR ", "bold red"), f"{type(error).__name__}: {error}")
        self.console.print(message, soft_wrap=True)

    def print_message(self, message):
        """Print a message as a property table, or each message of a collection in turn."""
        if isinstance(message, Mapping):
            table = Table(title="Message", show_header=True)
            table.add_column("Property", style="cyan", no_wrap=True)
            table.add_column("Value")
            for key, value in message.items():
                table.add_row(str(key), str(value))
            self.console.print(table)
        else:
            for msg in message:
                self.print_message(msg)

    def print(self, obj):
        if isinstance(obj, str):
            self.console.print(Text(obj), soft_wrap=True)
        elif isinstance(obj, Mapping):
            table = Table(show_header=False, box=None, padding=(0, 2))
            table.add_column("Key", style="cyan", no_wrap=True)
            table.add_column("Value")
            for key, value in obj.items():
                table.add_row(str(key), str(value))
            self.console.print(table)
        else:
            for item in obj:
                self.console.print(Text(str(item)), soft_wrap=True)
